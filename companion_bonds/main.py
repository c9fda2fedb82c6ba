"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from companion_bonds.api.attitudes import router as attitudes_router
from companion_bonds.api.health import router as health_router
from companion_bonds.api.interactions import router as interactions_router
from companion_bonds.api.persons import router as persons_router
from companion_bonds.config import settings
from companion_bonds.core.event_bus import EventBus
from companion_bonds.core.locks import KeyedLock
from companion_bonds.core.logging import get_logger, setup_logging
from companion_bonds.db.database import SessionLocal, engine as db_engine
from companion_bonds.db.models import Base
from companion_bonds.services.attitude_service import AttitudeService
from companion_bonds.services.conversation_service import ConversationService
from companion_bonds.services.interaction_service import InteractionService
from companion_bonds.services.person_service import PersonService

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=db_engine)
    logger.info("Database tables created.")

    logger.info("Initializing services...")
    event_bus = EventBus()
    locks = KeyedLock()
    attitude_service = AttitudeService(SessionLocal, event_bus, locks=locks)
    person_service = PersonService(SessionLocal, event_bus, locks=locks)
    interaction_service = InteractionService(
        SessionLocal, event_bus, attitude_service, person_service, locks=locks
    )
    app.state.event_bus = event_bus
    app.state.attitude_service = attitude_service
    app.state.person_service = person_service
    app.state.interaction_service = interaction_service
    app.state.conversation_service = ConversationService(
        attitude_service, person_service, interaction_service
    )
    logger.info("Services initialized.")

    yield

    logger.info("Shutting down...")
    event_bus.clear()
    db_engine.dispose()


app = FastAPI(title="Companion Bonds", lifespan=lifespan)

app.include_router(health_router)
app.include_router(attitudes_router)
app.include_router(persons_router)
app.include_router(interactions_router)
