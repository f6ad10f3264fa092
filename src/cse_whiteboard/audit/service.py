"""Audit service — write and query field-level change history."""

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cse_whiteboard.audit.diff import (
    CUSTOMER_TRACKED_FIELDS,
    NOTE_TRACKED_FIELDS,
    TODO_TRACKED_FIELDS,
    diff_fields,
    snapshot_json,
)
from cse_whiteboard.audit.models import (
    AUDIT_ACTIONS,
    CustomerAuditLogModel,
    CustomerNoteAuditLogModel,
    TodoAuditLogModel,
)
from cse_whiteboard.common.config import WhiteboardSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditTarget:
    """How one entity type is audited."""
    model: type
    fk: str
    tracked_fields: tuple[str, ...]
    # When an update changes no tracked field, write one whole-object row anyway.
    log_unchanged_updates: bool = False


AUDIT_TARGETS: dict[str, AuditTarget] = {
    "customer": AuditTarget(CustomerAuditLogModel, "customer_id", CUSTOMER_TRACKED_FIELDS),
    "note": AuditTarget(CustomerNoteAuditLogModel, "note_id", NOTE_TRACKED_FIELDS),
    "todo": AuditTarget(
        TodoAuditLogModel, "todo_id", TODO_TRACKED_FIELDS, log_unchanged_updates=True,
    ),
}


class AuditService:
    """Immutable per-entity change log."""

    def __init__(self, settings: WhiteboardSettings):
        self.settings = settings

    @staticmethod
    def _target(kind: str) -> AuditTarget:
        try:
            return AUDIT_TARGETS[kind]
        except KeyError:
            raise ValueError(f"Unknown audit kind: {kind!r}") from None

    async def _write(
        self, session: AsyncSession, kind: str, entity_id: int,
        rows: list[dict[str, Any]], user_id: str,
    ) -> list:
        target = self._target(kind)
        entries = []
        for row in rows:
            if row["action"] not in AUDIT_ACTIONS:
                raise ValueError(f"Unknown audit action: {row['action']!r}")
            entry = target.model(**{target.fk: entity_id}, user_id=user_id, **row)
            session.add(entry)
            entries.append(entry)
        if entries:
            await session.flush()
        return entries

    # ── Write ──

    async def log_create(
        self, session: AsyncSession, kind: str, entity_id: int,
        new_state: Mapping[str, Any], user_id: str,
    ):
        entries = await self._write(session, kind, entity_id, [{
            "action": "create",
            "field_name": None,
            "old_value": None,
            "new_value": snapshot_json(new_state),
        }], user_id)
        return entries[0]

    async def log_delete(
        self, session: AsyncSession, kind: str, entity_id: int,
        old_state: Mapping[str, Any], user_id: str,
    ):
        """Must run before the subject row is deleted; the FK would reject it afterwards."""
        entries = await self._write(session, kind, entity_id, [{
            "action": "delete",
            "field_name": None,
            "old_value": snapshot_json(old_state),
            "new_value": None,
        }], user_id)
        return entries[0]

    async def log_update(
        self, session: AsyncSession, kind: str, entity_id: int,
        old_state: Mapping[str, Any], new_state: Mapping[str, Any], user_id: str,
    ) -> list:
        """One row per changed tracked field present in ``new_state``."""
        target = self._target(kind)
        rows = [
            {"action": "update", "field_name": field, "old_value": old, "new_value": new}
            for field, old, new in diff_fields(old_state, new_state, target.tracked_fields)
        ]
        if not rows and target.log_unchanged_updates:
            rows.append({
                "action": "update",
                "field_name": None,
                "old_value": snapshot_json(old_state),
                "new_value": snapshot_json({**old_state, **new_state}),
            })
        return await self._write(session, kind, entity_id, rows, user_id)

    async def log_archive(
        self, session: AsyncSession, customer_id: int, archived: bool, user_id: str,
    ):
        """Prior value is implied by the target state, not read."""
        entries = await self._write(session, "customer", customer_id, [{
            "action": "archive" if archived else "unarchive",
            "field_name": "archived",
            "old_value": str(not archived).lower(),
            "new_value": str(archived).lower(),
        }], user_id)
        return entries[0]

    async def log_completion(
        self, session: AsyncSession, todo_id: int, completed: bool, user_id: str,
    ):
        entries = await self._write(session, "todo", todo_id, [{
            "action": "complete" if completed else "uncomplete",
            "field_name": "completed",
            "old_value": str(not completed).lower(),
            "new_value": str(completed).lower(),
        }], user_id)
        return entries[0]

    # ── Read ──

    def _clamp(self, limit: int | None) -> int:
        if limit is None:
            return self.settings.default_audit_limit
        return max(1, min(limit, self.settings.max_audit_limit))

    async def get_logs(
        self, session: AsyncSession, kind: str, entity_id: int,
        action: str | None = None, limit: int | None = None, offset: int = 0,
        user_id: str | None = None,
    ) -> list:
        """Entries for one entity, newest first, optionally only those written by ``user_id``."""
        target = self._target(kind)
        model = target.model
        query = select(model).where(getattr(model, target.fk) == entity_id)
        if user_id is not None:
            query = query.where(model.user_id == user_id)
        if action:
            query = query.where(model.action == action)
        query = (
            query.order_by(model.created_at.desc(), model.id.desc())
            .offset(offset)
            .limit(self._clamp(limit))
        )
        result = await session.execute(query)
        return list(result.scalars().all())

    async def get_user_logs(
        self, session: AsyncSession, kind: str, user_id: str,
        action: str | None = None, limit: int | None = None,
    ) -> list:
        """Entries written by one user across all entities of ``kind``, newest first."""
        model = self._target(kind).model
        query = select(model).where(model.user_id == user_id)
        if action:
            query = query.where(model.action == action)
        query = query.order_by(model.created_at.desc(), model.id.desc()).limit(self._clamp(limit))
        result = await session.execute(query)
        return list(result.scalars().all())
