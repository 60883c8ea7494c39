"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.api.admin import router as admin_router
from src.api.companion import router as companion_router
from src.api.health import router as health_router
from src.config import settings
from src.core.event_bus import EventBus
from src.core.logging import get_logger, setup_logging
from src.db.database import engine as db_engine
from src.db.models import Base

setup_logging(settings.LOG_LEVEL, sql_echo=settings.SQL_ECHO)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=db_engine)
    logger.info("Database tables created.")

    yield

    logger.info("Shutting down...")
    app.state.event_bus.clear()
    db_engine.dispose()


app = FastAPI(title="River Companion", debug=settings.DEBUG, lifespan=lifespan)

# Services are built per request; the bus is shared across them
app.state.event_bus = EventBus()

app.include_router(health_router)
app.include_router(companion_router)
app.include_router(admin_router)
