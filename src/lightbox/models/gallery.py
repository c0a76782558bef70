import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import mapped_column, relationship

from lightbox.db import Base


class Album(Base):
    __tablename__ = "albums"

    id = mapped_column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    name = mapped_column(String, nullable=False)
    description = mapped_column(Text, nullable=True)
    created_at = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True)

    photos = relationship("Photo", back_populates="album", passive_deletes=True)


class Photo(Base):
    __tablename__ = "photos"

    id = mapped_column(Uuid, primary_key=True, default=uuid.uuid4, nullable=False)
    title = mapped_column(String, nullable=False)
    description = mapped_column(Text, nullable=True)
    # Public URL of the stored object, or the URL submitted by the user
    image_url = mapped_column(String, nullable=False)
    album_id = mapped_column(Uuid, ForeignKey("albums.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True)

    album = relationship(Album, back_populates="photos")
