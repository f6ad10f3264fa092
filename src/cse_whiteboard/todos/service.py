"""To-do service — create, update, complete and delete tasks."""

import logging
from typing import Any, Mapping

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cse_whiteboard.audit.diff import snapshot_json
from cse_whiteboard.common.config import WhiteboardSettings
from cse_whiteboard.common.exceptions import NotFoundOrUnauthorizedError
from cse_whiteboard.common.invalidation import TODOS_PATH
from cse_whiteboard.common.models import row_to_dict
from cse_whiteboard.common.security import require_user
from cse_whiteboard.common.validation import validate_input
from cse_whiteboard.customers.models import CustomerModel
from cse_whiteboard.notes.models import CustomerNoteModel
from cse_whiteboard.todos.models import TodoModel
from cse_whiteboard.todos.schemas import TodoCreate, TodoDelete, TodoUpdate

logger = logging.getLogger(__name__)

# Columns that cannot hold NULL; an explicit null in an update leaves them as-is.
_NON_NULLABLE = frozenset({"title", "priority", "completed"})


class TodoService:
    """Task list operations, always filtered by the owning user."""

    def __init__(self, settings: WhiteboardSettings, audit_service=None, invalidator=None):
        self.settings = settings
        self.audit_service = audit_service
        self.invalidator = invalidator

    def _invalidate(self) -> None:
        if self.invalidator is not None:
            self.invalidator.invalidate(TODOS_PATH)

    async def _get_owned(
        self, session: AsyncSession, todo_id: int, user_id: str,
    ) -> TodoModel:
        result = await session.execute(
            select(TodoModel).where(
                TodoModel.id == todo_id,
                TodoModel.user_id == user_id,
            )
        )
        todo = result.scalar_one_or_none()
        if todo is None:
            raise NotFoundOrUnauthorizedError("Todo")
        return todo

    async def _check_references(
        self, session: AsyncSession, user_id: str,
        customer_id: int | None = None, note_id: int | None = None,
    ) -> None:
        """Linked customer and note must belong to the caller too."""
        if customer_id is not None:
            result = await session.execute(
                select(CustomerModel.id).where(
                    CustomerModel.id == customer_id,
                    CustomerModel.user_id == user_id,
                )
            )
            if result.scalar_one_or_none() is None:
                raise NotFoundOrUnauthorizedError("Customer")
        if note_id is not None:
            result = await session.execute(
                select(CustomerNoteModel.id).where(
                    CustomerNoteModel.id == note_id,
                    CustomerNoteModel.user_id == user_id,
                )
            )
            if result.scalar_one_or_none() is None:
                raise NotFoundOrUnauthorizedError("Note")

    # ── Mutations ──

    async def create_todo(
        self, session: AsyncSession, user_id: str | None,
        data: Mapping[str, Any] | BaseModel,
    ) -> TodoModel:
        user_id = require_user(user_id)
        validated = validate_input(TodoCreate, data)
        await self._check_references(
            session, user_id,
            customer_id=validated.customer_id, note_id=validated.note_id,
        )

        todo = TodoModel(**validated.model_dump(), user_id=user_id)
        session.add(todo)
        await session.flush()

        if self.audit_service:
            await self.audit_service.log_create(
                session, "todo", todo.id, row_to_dict(todo), user_id,
            )
        logger.info("todo created", extra={"todo_id": todo.id, "user_id": user_id})
        self._invalidate()
        return todo

    async def update_todo(
        self, session: AsyncSession, user_id: str | None,
        data: Mapping[str, Any] | BaseModel,
    ) -> TodoModel:
        user_id = require_user(user_id)
        validated = validate_input(TodoUpdate, data)

        todo = await self._get_owned(session, validated.id, user_id)
        changes = validated.model_dump(exclude_unset=True, exclude={"id"})
        changes = {
            field: value for field, value in changes.items()
            if not (value is None and field in _NON_NULLABLE)
        }
        if changes.get("customer_id") is not None:
            await self._check_references(session, user_id, customer_id=changes["customer_id"])

        old_state = row_to_dict(todo)
        for field, value in changes.items():
            setattr(todo, field, value)
        await session.flush()

        if self.audit_service:
            await self.audit_service.log_update(
                session, "todo", todo.id, old_state, changes, user_id,
            )
        logger.info("todo updated", extra={"todo_id": todo.id, "user_id": user_id})
        self._invalidate()
        return todo

    async def delete_todo(
        self, session: AsyncSession, user_id: str | None,
        data: Mapping[str, Any] | BaseModel,
    ) -> TodoModel:
        user_id = require_user(user_id)
        validated = validate_input(TodoDelete, data)

        todo = await self._get_owned(session, validated.id, user_id)
        old_state = row_to_dict(todo)

        # The audit row references the todo, so it has to be written first.
        # The database then removes it along with the todo (ON DELETE CASCADE);
        # the log line below is the only durable trace of the deletion.
        if self.audit_service:
            await self.audit_service.log_delete(session, "todo", todo.id, old_state, user_id)
        await session.delete(todo)
        await session.flush()

        logger.info(
            "todo deleted",
            extra={"todo_id": validated.id, "user_id": user_id, "snapshot": snapshot_json(old_state)},
        )
        self._invalidate()
        return todo

    async def toggle_todo_complete(
        self, session: AsyncSession, user_id: str | None, todo_id: int,
    ) -> TodoModel:
        user_id = require_user(user_id)
        todo = await self._get_owned(session, todo_id, user_id)

        todo.completed = not todo.completed
        await session.flush()

        if self.audit_service:
            await self.audit_service.log_completion(session, todo.id, todo.completed, user_id)
        logger.info(
            "todo completion toggled",
            extra={"todo_id": todo.id, "completed": todo.completed, "user_id": user_id},
        )
        self._invalidate()
        return todo

    # ── Queries ──

    async def get_todo(
        self, session: AsyncSession, user_id: str | None, todo_id: int,
    ) -> TodoModel:
        user_id = require_user(user_id)
        return await self._get_owned(session, todo_id, user_id)

    async def list_todos(
        self, session: AsyncSession, user_id: str | None,
        customer_id: int | None = None,
    ) -> list[TodoModel]:
        """Caller's tasks, newest first, optionally for one customer."""
        user_id = require_user(user_id)
        query = select(TodoModel).where(TodoModel.user_id == user_id)
        if customer_id is not None:
            query = query.where(TodoModel.customer_id == customer_id)
        query = query.order_by(TodoModel.created_at.desc(), TodoModel.id.desc())
        result = await session.execute(query)
        return list(result.scalars().all())
