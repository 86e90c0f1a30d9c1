import itertools
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from recipe_voyage.db import Base
from recipe_voyage import models  # noqa: F401
from recipe_voyage.repository import RecipeRepository
from recipe_voyage.services.storage import LocalAudioStore, LocalPhotoStore

# --- Test Database Setup ---

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,  # One shared connection so every session sees the same in-memory DB
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Direct database session for setup and assertions."""
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def clock():
    """Deterministic clock: one second later on every call."""
    ticks = itertools.count()
    return lambda: START + timedelta(seconds=next(ticks))


@pytest.fixture
def audio_store():
    store = MagicMock(spec=LocalAudioStore)
    store.delete_file.return_value = True
    return store


@pytest.fixture
def photo_store():
    store = MagicMock(spec=LocalPhotoStore)
    counter = itertools.count(1)
    store.store.side_effect = lambda data: f"photo-{next(counter)}.bin"
    store.delete.return_value = True
    return store


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def repo(session_factory, audio_store, photo_store, clock):
    return RecipeRepository(
        session_factory,
        audio_store=audio_store,
        photo_store=photo_store,
        clock=clock,
    )


@pytest.fixture
def library_of(repo):
    """Create library recipes by title, in order. Returns {title: id}."""
    def _make(*titles):
        return {title: repo.create_recipe(title).id for title in titles}
    return _make
