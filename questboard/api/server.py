"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from questboard import __version__
from questboard.api.routes import router
from questboard.api.metrics_routes import router as metrics_router
from questboard.api.middleware import setup_cors, setup_rate_limiting
from questboard.config import STORE_PATH, STORAGE_PREFIX, TIMEZONE
from questboard.db.local_store import LocalStore
from questboard.exceptions import QuestBoardError, RecordNotFoundError, ValidationError
from questboard.remote.activity_log import RemoteActivityLog, create_activity_log
from questboard.services.profile_service import ProfileStore

logger = logging.getLogger(__name__)


def create_api_application(
    store: Optional[LocalStore] = None,
    activity_log: Optional[RemoteActivityLog] = None
) -> FastAPI:
    """
    Create and configure FastAPI application

    Args:
        store: Local store handle (defaults to STORE_PATH)
        activity_log: Shared activity log (defaults to configuration)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle manager for FastAPI application"""
        # Startup
        logger.info("Starting API server...")
        local_store = store or LocalStore(STORE_PATH)
        local_store.open()
        remote_log = activity_log or create_activity_log()
        await remote_log.sign_in()

        app.state.activity_log = remote_log
        app.state.profile_store = ProfileStore(
            local_store,
            remote_log,
            prefix=STORAGE_PREFIX,
            tz_name=TIMEZONE
        )
        logger.info("Profile store ready")

        yield

        # Shutdown
        logger.info("Shutting down API server...")
        await remote_log.close()
        local_store.close()
        logger.info("Local store closed")

    app = FastAPI(
        title="QuestBoard API",
        description="Gamified activity tracking: quests, XP, streaks and leaderboard",
        version=__version__,
        lifespan=lifespan
    )

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)
    app.include_router(metrics_router)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError):
        return JSONResponse(status_code=404, content=exc.to_dict())

    @app.exception_handler(QuestBoardError)
    async def questboard_error_handler(request: Request, exc: QuestBoardError):
        return JSONResponse(status_code=500, content=exc.to_dict())

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    logger.info("FastAPI application created")

    return app
