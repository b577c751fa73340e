"""
FastAPI application entrypoint.

Lifespan:
  • On startup: create the upload directory, verify DB connectivity
    (non-fatal), install a loop-level handler so stray async errors
    are logged instead of lost.
  • On shutdown: dispose the engine cleanly.

Routes:
  • /api/projects — create + list projects
  • /uploads      — uploaded cover images (static)
  • /health       — shallow liveness probe
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import Settings, settings
from app.core.database import Database
from app.core.errors import PortfolioError
from app.routers.projects import router as projects_router
from app.services.uploads import UPLOADS_URL_PREFIX, LocalImageStore

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def _log_unhandled_async_error(
    loop: asyncio.AbstractEventLoop, context: dict[str, Any]
) -> None:
    """Log exceptions no request owns; the process keeps running."""
    logger.error(
        "Unhandled async error: %s",
        context.get("message"),
        exc_info=context.get("exception"),
    )


# ── Lifespan ────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    database: Database = app.state.database
    Path(app.state.settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    asyncio.get_running_loop().set_exception_handler(_log_unhandled_async_error)

    # Startup — verify DB is reachable
    try:
        await database.ping()
        logger.info("Database connection verified ✓")
    except Exception:
        logger.warning(
            "Could not reach the database on startup. "
            "The app will start, but requests will fail until the DB is available.",
            exc_info=True,
        )

    yield  # ← application runs here

    # Shutdown — clean up connection pool
    await database.dispose()
    logger.info("Database engine disposed ✓")


# ── Error handlers ──────────────────────────────────────────
async def portfolio_error_handler(request: Request, exc: PortfolioError) -> JSONResponse:
    """Render PortfolioError as {"error": message}."""
    if exc.http_status >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    else:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


# ── App factory ─────────────────────────────────────────────
def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Build the application with its process-scoped state.

    The database and image store are created once here and kept on
    app.state; request handlers reach them through dependencies.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.APP_NAME,
        version="0.1.0",
        description="Portfolio projects backend — create and list projects.",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = Database(app_settings.DATABASE_URL, echo=app_settings.DEBUG)
    app.state.image_store = LocalImageStore(app_settings.UPLOAD_DIR, UPLOADS_URL_PREFIX)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PortfolioError, portfolio_error_handler)

    # Mount routers
    app.include_router(projects_router, prefix="/api/projects")

    # Uploaded images — the directory itself is created on startup
    app.mount(
        UPLOADS_URL_PREFIX,
        StaticFiles(directory=app_settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )

    # ── Health check ────────────────────────────────────────
    @app.get(
        "/health",
        tags=["System"],
        summary="Liveness probe",
    )
    async def health_check() -> dict[str, str]:
        """Shallow health check — confirms the process is alive."""
        return {"status": "OK"}

    return app


app = create_app()


def run() -> None:
    """Serve the app on the configured host/port (`portfolio-api`)."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
