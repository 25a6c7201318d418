"""sharelink — Main application entry point."""

import asyncio
from contextlib import asynccontextmanager, suppress
from pathlib import Path

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sharelink import config
from sharelink.api.download.controllers.download_controller import router as download_router
from sharelink.api.files.controllers.files_controller import router as files_router
from sharelink.api.upload.controllers.upload_controller import router as upload_router
from sharelink.cleanup import cleanup_loop
from sharelink.dependencies import Services, build_services
from sharelink.errors import ShareError
from sharelink.logger import logger


def run_migrations():
    """Run Alembic migrations on startup."""
    try:
        alembic_ini = Path(__file__).parent / "alembic.ini"
        alembic_cfg = Config(str(alembic_ini))
        alembic_cfg.set_main_option(
            "script_location", str(Path(__file__).parent / "db_migrations")
        )
        alembic_cfg.set_main_option("sqlalchemy.url", config.DATABASE_URL.replace("%", "%%"))
        command.upgrade(alembic_cfg, "head")
    except Exception as e:
        logger.warning(f"Migration failed, creating tables directly: {e}")
        from sharelink.database import init_db

        init_db()


async def share_error_handler(request: Request, exc: ShareError):
    # Full detail stays server-side
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {type(exc).__name__}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


def create_app(services: Services | None = None) -> FastAPI:
    """Build the app. Pass ``services`` to skip migrations and inject clients."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        reaper = None
        if services is None:
            run_migrations()
            app.state.services = build_services()

        if config.CLEANUP_INTERVAL_SECONDS > 0:
            reaper = asyncio.create_task(
                cleanup_loop(app.state.services.files, config.CLEANUP_INTERVAL_SECONDS)
            )

        yield

        if reaper:
            reaper.cancel()
            with suppress(asyncio.CancelledError):
                await reaper

    app = FastAPI(title="sharelink", version="0.1.0", lifespan=lifespan)
    if services is not None:
        app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ShareError, share_error_handler)

    @app.get("/api/health")
    async def health():
        return {"status": "ok"}

    app.include_router(upload_router)
    app.include_router(download_router)
    app.include_router(files_router)

    return app


app = create_app()
