"""Declarative base and shared column mixins."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class OwnedMixin:
    """Every user-facing row belongs to exactly one owning user."""

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)


def row_to_dict(row: Base) -> dict:
    """Column values of an ORM row keyed by attribute name."""
    return {
        attr.key: getattr(row, attr.key)
        for attr in row.__mapper__.column_attrs
    }
