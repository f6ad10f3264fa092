"""SQLAlchemy models for the field-level audit logs.

One table per audited entity. Rows are write-once and are removed by the
database together with their subject (``ON DELETE CASCADE``).
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cse_whiteboard.common.models import Base, utcnow

AUDIT_ACTIONS = frozenset({
    "create",
    "update",
    "archive",
    "unarchive",
    "complete",
    "uncomplete",
    "delete",
})


class AuditLogMixin:
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    action: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    field_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)


class CustomerAuditLogModel(Base, AuditLogMixin):
    __tablename__ = "customer_audit_log"

    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True
    )


class CustomerNoteAuditLogModel(Base, AuditLogMixin):
    __tablename__ = "customer_note_audit_log"

    note_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customer_notes.id", ondelete="CASCADE"), nullable=False, index=True
    )


class TodoAuditLogModel(Base, AuditLogMixin):
    __tablename__ = "todo_audit_log"

    todo_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("todos.id", ondelete="CASCADE"), nullable=False, index=True
    )
