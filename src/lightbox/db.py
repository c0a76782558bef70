import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine.base import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all models."""

    __abstract__ = True


class DatabaseSettings(BaseSettings):
    """Settings for the hosted record store connection, loaded from environment variables."""

    db: str = "postgres"
    user: str = "postgres"
    password: str = "postgres"
    host: str = "localhost"
    port: int = 5432
    # Full SQLAlchemy URL, takes precedence over the individual parts (e.g. sqlite for development)
    url: str | None = None

    @property
    def database_url(self) -> str:
        if self.url:
            return self.url
        return f"postgresql+psycopg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="POSTGRES_", extra="ignore")


@lru_cache(maxsize=1)
def get_database_url() -> str:  # pragma: no cover
    settings = DatabaseSettings()
    return settings.database_url


@lru_cache(maxsize=1)
def _get_engine_and_sessionmaker() -> tuple[Engine, sessionmaker[Session]]:  # pragma: no cover
    """Create and cache the SQLAlchemy engine and sessionmaker lazily."""
    database_url = get_database_url()
    if database_url.startswith("sqlite"):
        eng = create_engine(database_url, future=True, connect_args={"check_same_thread": False})
    else:
        eng = create_engine(database_url, future=True, pool_size=10, max_overflow=20, pool_recycle=1800, pool_pre_ping=True)
    logger.info("Record store engine created for %s", eng.url.render_as_string(hide_password=True))
    sess = sessionmaker(bind=eng, future=True, expire_on_commit=False)

    return eng, sess


def get_engine() -> Engine:  # pragma: no cover - simple accessor
    return _get_engine_and_sessionmaker()[0]


def get_session_maker() -> sessionmaker[Session]:  # pragma: no cover - simple accessor
    return _get_engine_and_sessionmaker()[1]
