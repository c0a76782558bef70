"""
Record collections of the hosted store

The `photos` and `albums` collections live in a PostgreSQL database owned by
the hosted backend. This module exposes them through two generic operations,
`select` and `insert`, returning plain dicts so callers never hold ORM state.
"""

import asyncio
import logging
from typing import Any

from sqlalchemy import select as sa_select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from lightbox.db import Base, get_session_maker
from lightbox.errors import StoreError
from lightbox.models.gallery import Album, Photo

logger = logging.getLogger(__name__)

COLLECTIONS: dict[str, type[Base]] = {
    "photos": Photo,
    "albums": Album,
}


class RecordStore:
    """Generic select/insert access to the store's record collections.

    SQLAlchemy sessions are synchronous; every call runs in a worker thread so
    the event loop is never blocked.
    """

    def __init__(self, session_maker: sessionmaker[Session] | None = None):
        self._session_maker = session_maker

    @property
    def session_maker(self) -> sessionmaker[Session]:
        if self._session_maker is None:
            self._session_maker = get_session_maker()
        return self._session_maker

    @staticmethod
    def _model(collection: str) -> type[Base]:
        model = COLLECTIONS.get(collection)
        if model is None:
            raise StoreError(f"Unknown collection: {collection}", operation="resolve")
        return model

    @staticmethod
    def _column(model: type[Base], field: str):
        columns = model.__table__.columns
        if field not in columns:
            raise StoreError(f"Unknown field {field!r} for collection {model.__tablename__}", operation="resolve")
        return columns[field]

    @staticmethod
    def _to_dict(model: type[Base], row: Any) -> dict[str, Any]:
        return {column.key: getattr(row, column.key) for column in model.__table__.columns}

    def _select_sync(self, collection: str, filters: dict[str, Any] | None, order_by: str | None, descending: bool) -> list[dict[str, Any]]:
        model = self._model(collection)
        stmt = sa_select(model)
        for field, value in (filters or {}).items():
            column = self._column(model, field)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        if order_by:
            column = self._column(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())

        with self.session_maker() as session:
            rows = session.execute(stmt).scalars().all()
            return [self._to_dict(model, row) for row in rows]

    def _insert_sync(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        model = self._model(collection)
        for field in record:
            self._column(model, field)

        with self.session_maker() as session:
            try:
                row = model(**record)
                session.add(row)
                session.commit()
                session.refresh(row)
                return self._to_dict(model, row)
            except SQLAlchemyError:
                session.rollback()
                raise

    async def select(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[dict[str, Any]]:
        """Read records from a collection.

        Args:
            collection: Collection name ("photos" or "albums")
            filters: Optional equality filters, None matches NULL
            order_by: Optional column to order by
            descending: Order direction when order_by is set

        Returns:
            Ordered list of records as dicts

        Raises:
            StoreError: If the collection is unknown or the read fails
        """
        try:
            rows = await asyncio.to_thread(self._select_sync, collection, filters, order_by, descending)
        except SQLAlchemyError as e:
            logger.error(f"Failed to select from {collection}: {e}")
            raise StoreError(f"Could not load {collection}", operation="select") from e
        logger.debug(f"Selected {len(rows)} rows from {collection}")
        return rows

    async def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a record and return it with its store-assigned id and timestamp.

        Raises:
            StoreError: If the collection or a field is unknown, or the write fails
        """
        try:
            created = await asyncio.to_thread(self._insert_sync, collection, record)
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert into {collection}: {e}")
            raise StoreError(f"Could not save to {collection}", operation="insert") from e
        logger.info(f"Inserted record {created.get('id')} into {collection}")
        return created
