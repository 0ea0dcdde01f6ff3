# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator, Iterator
from datetime import timedelta
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from community_maps.core.security import create_access_token
from community_maps.db.session import Base
from community_maps.db.session import get_db as app_get_session
from community_maps.db.time import utcnow
from community_maps.main import app as fastapi_app
from community_maps.models import Location, Map, User
from community_maps.models.location import LOCATION_STATUS_PENDING

TEST_DB_URL = "sqlite://"

_MAP_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Commits inside services escape the outer transaction; wipe every table.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_user(db_session: Session, user_id: str, first_name: str, email: str) -> User:
    user = User(id=user_id, email=email, first_name=first_name, last_name="Tester")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return the map owner used by most tests."""
    return _make_user(db_session, "user-owner-0001", "Olive", "olive@example.com")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second user who does not own any map."""
    return _make_user(db_session, "user-other-0002", "Sam", "sam@example.com")


def auth_headers_for(user_id: str, **claims) -> dict[str, str]:
    token = create_access_token(user_id, **claims)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers_for(test_user.id, email=test_user.email)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers_for(other_user.id, email=other_user.email)


@pytest.fixture()
def expired_token(test_user: User) -> dict[str, str]:
    """Return headers carrying an already-expired token."""
    return auth_headers_for(test_user.id, expires_delta=timedelta(minutes=-5))


@pytest.fixture()
def test_map(db_session: Session, test_user: User) -> Map:
    """Create a map owned by ``test_user``."""
    n = next(_MAP_COUNTER)
    now = utcnow()
    map_ = Map(
        title=f"Test Map {n}",
        slug=f"test-map-{n}",
        short_description="A map for tests",
        body="Places used by the test suite.",
        city="Bangalore",
        owner_id=test_user.id,
        created_at=now,
        updated_at=now,
    )
    db_session.add(map_)
    db_session.commit()
    db_session.refresh(map_)
    return map_


@pytest.fixture()
def pending_location(db_session: Session, test_map: Map, other_user: User) -> Location:
    """Create a pending submission from ``other_user`` on ``test_map``."""
    location = Location(
        map_id=test_map.id,
        creator_id=other_user.id,
        name="Third Wave Coffee",
        latitude=12.9716,
        longitude=77.5946,
        source_url="https://www.google.com/maps/place/Third+Wave+Coffee/@12.9716,77.5946,17z",
        status=LOCATION_STATUS_PENDING,
        is_approved=False,
    )
    db_session.add(location)
    db_session.commit()
    db_session.refresh(location)
    return location
