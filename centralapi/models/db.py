"""SQLAlchemy ORM models for CentralAPI.

Three tables: users own collections (one per property), collections own
images. Child rows cascade on delete. Image bytes are not stored here, only
the object-store key and public URL.
"""

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from centralapi.models.enums import Status, UserRole, UserStatus, UserType

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONList = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    user_type: Mapped[str] = mapped_column(String(20), nullable=False, default=UserType.CLIENT)
    user_role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.OWNER)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=UserStatus.ACTIVE)
    property_ids: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    collections: Mapped[list["Collection"]] = relationship(
        back_populates="user", cascade="all, delete", passive_deletes=True
    )


class Collection(Base):
    __tablename__ = "collections"
    __table_args__ = (Index("idx_collections_user", "user_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    property_description: Mapped[str] = mapped_column(Text, nullable=False)
    property_address: Mapped[str] = mapped_column(String(500), nullable=False)
    collection_code: Mapped[str] = mapped_column(String(100), nullable=False)
    property_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    property_owner_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    parking_spaces: Mapped[int | None] = mapped_column(Integer, nullable=True)
    property_type: Mapped[str] = mapped_column(String(50), nullable=False)
    image_urls: Mapped[list] = mapped_column(JSONList, nullable=False, default=list)
    approval_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=Status.PENDING
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    user: Mapped["User"] = relationship(back_populates="collections")
    images: Mapped[list["Image"]] = relationship(
        back_populates="collection", cascade="all, delete", passive_deletes=True
    )


class Image(Base):
    __tablename__ = "images"
    __table_args__ = (Index("idx_images_collection", "collection_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    image_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    collection_id: Mapped[int] = mapped_column(
        ForeignKey("collections.id", ondelete="CASCADE"), nullable=False
    )
    storage_key: Mapped[str] = mapped_column(String(500), nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    upload_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    image_tag: Mapped[str] = mapped_column(String(30), nullable=False)
    custom_tag: Mapped[str | None] = mapped_column(String(100), nullable=True)
    instance_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    image_status: Mapped[str] = mapped_column(String(20), nullable=False, default=Status.PENDING)
    rejection_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description_summary: Mapped[str | None] = mapped_column(String(500), nullable=True)
    ai_tag: Mapped[str | None] = mapped_column(String(30), nullable=True)
    ai_confidence: Mapped[float | None] = mapped_column(Float, nullable=True)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False)

    collection: Mapped["Collection"] = relationship(back_populates="images")
