"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from companion_bonds.core.event_bus import EventBus
from companion_bonds.core.locks import KeyedLock
from companion_bonds.db.database import get_db, make_engine, make_session_factory
from companion_bonds.db.models import Base
from companion_bonds.main import app
from companion_bonds.services.attitude_service import AttitudeService
from companion_bonds.services.conversation_service import ConversationService
from companion_bonds.services.interaction_service import InteractionService
from companion_bonds.services.person_service import PersonService


@pytest.fixture()
def session_factory() -> sessionmaker:
    """Fresh in-memory SQLite database per test (one shared connection)."""
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    try:
        yield make_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(session_factory: sessionmaker) -> Session:
    """Raw database session for direct DB assertions."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def locks() -> KeyedLock:
    return KeyedLock()


@pytest.fixture()
def attitude_service(session_factory, bus, locks) -> AttitudeService:
    return AttitudeService(session_factory, bus, locks=locks, retry_backoff=0.0)


@pytest.fixture()
def person_service(session_factory, bus, locks) -> PersonService:
    return PersonService(session_factory, bus, locks=locks, retry_backoff=0.0)


@pytest.fixture()
def interaction_service(
    session_factory, bus, attitude_service, person_service
) -> InteractionService:
    return InteractionService(
        session_factory, bus, attitude_service, person_service, retry_backoff=0.0
    )


@pytest.fixture()
def conversation_service(
    attitude_service, person_service, interaction_service
) -> ConversationService:
    return ConversationService(
        attitude_service, person_service, interaction_service, user_name="Sam"
    )


@pytest.fixture()
def client(
    session_factory,
    bus,
    attitude_service,
    person_service,
    interaction_service,
    conversation_service,
) -> TestClient:
    """FastAPI TestClient wired to the in-memory services."""

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.state.event_bus = bus
    app.state.attitude_service = attitude_service
    app.state.person_service = person_service
    app.state.interaction_service = interaction_service
    app.state.conversation_service = conversation_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
