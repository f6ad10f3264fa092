"""Note service — append and edit rich-text customer notes."""

import logging
from typing import Any, Mapping

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cse_whiteboard.common.config import WhiteboardSettings
from cse_whiteboard.common.exceptions import NotFoundOrUnauthorizedError
from cse_whiteboard.common.invalidation import DASHBOARD_PATH
from cse_whiteboard.common.models import row_to_dict
from cse_whiteboard.common.security import require_user
from cse_whiteboard.common.validation import validate_input
from cse_whiteboard.customers.models import CustomerModel
from cse_whiteboard.notes.models import CustomerNoteModel
from cse_whiteboard.notes.schemas import NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)


class NoteService:
    """Notes inherit their owner from the customer they are attached to."""

    def __init__(self, settings: WhiteboardSettings, audit_service=None, invalidator=None):
        self.settings = settings
        self.audit_service = audit_service
        self.invalidator = invalidator

    def _invalidate(self) -> None:
        if self.invalidator is not None:
            self.invalidator.invalidate(DASHBOARD_PATH)

    async def _get_owned(
        self, session: AsyncSession, note_id: int, user_id: str,
    ) -> CustomerNoteModel:
        result = await session.execute(
            select(CustomerNoteModel).where(
                CustomerNoteModel.id == note_id,
                CustomerNoteModel.user_id == user_id,
            )
        )
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundOrUnauthorizedError("Note")
        return note

    async def add_note(
        self, session: AsyncSession, user_id: str | None,
        data: Mapping[str, Any] | BaseModel,
    ) -> CustomerNoteModel:
        user_id = require_user(user_id)
        validated = validate_input(NoteCreate, data)

        result = await session.execute(
            select(CustomerModel.id).where(
                CustomerModel.id == validated.customer_id,
                CustomerModel.user_id == user_id,
            )
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundOrUnauthorizedError("Customer")

        note = CustomerNoteModel(
            customer_id=validated.customer_id,
            note=validated.note,
            user_id=user_id,
        )
        session.add(note)
        await session.flush()

        if self.audit_service:
            await self.audit_service.log_create(
                session, "note", note.id, row_to_dict(note), user_id,
            )
        logger.info(
            "note added",
            extra={"note_id": note.id, "customer_id": note.customer_id, "user_id": user_id},
        )
        self._invalidate()
        return note

    async def update_note(
        self, session: AsyncSession, user_id: str | None,
        data: Mapping[str, Any] | BaseModel,
    ) -> CustomerNoteModel:
        user_id = require_user(user_id)
        validated = validate_input(NoteUpdate, data)

        note = await self._get_owned(session, validated.id, user_id)
        old_state = row_to_dict(note)
        note.note = validated.note
        await session.flush()

        if self.audit_service:
            await self.audit_service.log_update(
                session, "note", note.id, old_state, {"note": validated.note}, user_id,
            )
        logger.info("note updated", extra={"note_id": note.id, "user_id": user_id})
        self._invalidate()
        return note

    async def get_note(
        self, session: AsyncSession, user_id: str | None, note_id: int,
    ) -> CustomerNoteModel:
        user_id = require_user(user_id)
        return await self._get_owned(session, note_id, user_id)
