from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gympro.api.api import api_router
from gympro.core.config import settings
from gympro.core.errors import register_exception_handlers
from gympro.core.logging_config import setup_logging, get_logger
from gympro.db.init_db import ensure_tables_exist
from gympro.db.seed import seed_reference_data
from gympro.db.session import SessionLocal
from gympro.services.scheduler import init_scheduler, shutdown_scheduler

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting GymPro API...")

    await ensure_tables_exist()
    logger.info("📊 Database tables ready")

    if settings.SEED_ON_STARTUP:
        try:
            async with SessionLocal() as db:
                await seed_reference_data(db)
        except Exception as e:
            logger.error(f"Reference data seeding skipped: {e}", exc_info=True)

    init_scheduler()
    yield
    logger.info("🛑 Shutting down...")
    shutdown_scheduler()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    description="GymPro fitness platform API",
    lifespan=lifespan,
)

if settings.BACKEND_CORS_ORIGINS:
    logger.info(f"CORS origins: {settings.BACKEND_CORS_ORIGINS}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get(f"{settings.API_PREFIX}/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
