"""
Editorial Dashboard Server

FastAPI application providing:
- Sign-in / sign-up / sign-out against Supabase auth
- Tabbed dashboard of articles, categories, tags, comments and analytics
- Seed-data test action
- JSON state and health check
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .config import config, state
from .gateway import create_gateway
from .rate_limit import setup_rate_limiting
from .routes import auth_router, dashboard_router, misc_router
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> None:
    """Configure the root logger once from LOG_LEVEL."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return
    logging.basicConfig(level=config.LOG_LEVEL.upper(), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup application resources."""
    configure_logging()

    # Startup - skip if already initialized (e.g., by tests)
    if state.gateway_factory is None:
        state.gateway_factory = create_gateway
        if not config.has_backend():
            logger.warning(
                "SUPABASE_URL / SUPABASE_ANON_KEY not configured. "
                "New browser sessions will fail to connect."
            )
    if state.sessions is None:
        state.sessions = SessionRegistry(state.gateway_factory)

    yield

    # Shutdown
    if state.sessions is not None:
        try:
            await state.sessions.dispose_all()
        except Exception as e:
            logger.warning(f"Error disposing sessions: {e}")


app = FastAPI(
    title="Editorial Dashboard",
    version=__version__,
    lifespan=lifespan
)

setup_rate_limiting(app)

# Include routers
app.include_router(misc_router)
app.include_router(auth_router)
app.include_router(dashboard_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
