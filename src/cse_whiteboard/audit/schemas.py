"""Pydantic schemas for audit log API responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AuditLogResponse(BaseModel):
    id: int
    entity_id: int
    action: str
    field_name: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    user_id: str
    created_at: datetime

    @classmethod
    def from_entry(cls, entry, fk: str) -> "AuditLogResponse":
        return cls(
            id=entry.id,
            entity_id=getattr(entry, fk),
            action=entry.action,
            field_name=entry.field_name,
            old_value=entry.old_value,
            new_value=entry.new_value,
            user_id=entry.user_id,
            created_at=entry.created_at,
        )
