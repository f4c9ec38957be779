import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from stashgate import models  # noqa: F401  registers tables on Base.metadata
from stashgate.core.config import settings
from stashgate.core.database import Base, engine, get_db
from stashgate.core.errors import StashgateError, register_exception_handlers
from stashgate.core.minio_client import ObjectStorage, get_storage
from stashgate.monitoring.setup import setup_monitoring
from stashgate.routes import files, share_links
from stashgate.utils.clock import utcnow

logger = logging.getLogger("stashgate")


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    try:
        async with engine.begin() as conn:
            if engine.dialect.name == "sqlite":
                await conn.execute(text("PRAGMA journal_mode=WAL;"))
            logger.info("Creating database tables: %s", ", ".join(Base.metadata.tables))
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    yield

    await engine.dispose()
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(title="stashgate", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-API-Key"],
    )

    register_exception_handlers(app)
    app.include_router(files)
    app.include_router(share_links)
    setup_monitoring(app)

    @app.get("/health")
    async def health_check(
        db: AsyncSession = Depends(get_db),
        storage: ObjectStorage = Depends(get_storage),
    ):
        try:
            await db.execute(text("SELECT 1"))
            db_status = "ok"
        except Exception as e:
            logger.warning("Health check database error: %s", e)
            db_status = "error"

        try:
            await storage.ping()
            storage_status = "ok"
        except StashgateError as e:
            storage_status = f"error: {e.reason}"

        return {
            "status": "running",
            "timestamp": utcnow().isoformat(),
            "database": db_status,
            "storage": storage_status,
        }

    return app


app = create_app()


def run():
    uvicorn.run(
        "stashgate.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_keep_alive=60,
        # uvicorn's access log prints the query string, which can carry share passwords;
        # monitor_requests logs the path only
        access_log=False,
    )


if __name__ == "__main__":
    run()
