from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .logging_setup import configure_logging, get_logger
from .periods import router as periods_router
from .recurrence import router as recurrence_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings.log_level)
    logger.info("%s starting (default horizon %d months)", settings.app_name, settings.default_horizon_months)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(recurrence_router)
app.include_router(periods_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
