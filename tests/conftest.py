from collections.abc import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine.base import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lightbox.config import get_gallery_settings
from lightbox.db import Base
from lightbox.models import Album, Photo  # noqa: F401
from lightbox.store.external import ExternalStore
from lightbox.store.records import RecordStore
from tests.helpers import DummyAsyncS3Client


@pytest.fixture(scope="function")
def engine() -> Generator[Engine]:
    """In-memory SQLite engine shared across threads."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool, future=True)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_maker(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, future=True, expire_on_commit=False)


@pytest.fixture(scope="function")
def record_store(session_maker) -> RecordStore:
    return RecordStore(session_maker)


@pytest.fixture(scope="function")
def s3_client() -> DummyAsyncS3Client:
    return DummyAsyncS3Client()


@pytest.fixture(scope="function")
def store(record_store, s3_client) -> ExternalStore:
    return ExternalStore(records=record_store, binaries=s3_client)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_gallery_settings.cache_clear()
    yield
    get_gallery_settings.cache_clear()


@pytest.fixture(scope="function")
def client(store: ExternalStore) -> Generator[TestClient]:
    """Test client whose lifespan wires the SQLite/dummy-S3 store instead of the hosted one."""
    from lightbox.main import app

    with patch("lightbox.main.ExternalStore", return_value=store):
        with TestClient(app) as test_client:
            yield test_client
