"""Customer service — create, update, archive and owner-scoped queries."""

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
from cse_whiteboard.customers.schemas import CustomerCreate, CustomerUpdate
from cse_whiteboard.notes.models import CustomerNoteModel
from cse_whiteboard.todos.models import TodoModel

logger = logging.getLogger(__name__)

# Columns that cannot hold NULL; an explicit null in an update leaves them as-is.
_NON_NULLABLE = frozenset({"patch_frequency", "work_load", "cloud_manager", "product_set"})


class CustomerService:
    """Customer CRUD, always filtered by the owning user."""

    def __init__(self, settings: WhiteboardSettings, audit_service=None, invalidator=None):
        self.settings = settings
        self.audit_service = audit_service
        self.invalidator = invalidator

    def _invalidate(self) -> None:
        if self.invalidator is not None:
            self.invalidator.invalidate(DASHBOARD_PATH)

    async def _get_owned(
        self, session: AsyncSession, customer_id: int, user_id: str,
    ) -> CustomerModel:
        result = await session.execute(
            select(CustomerModel).where(
                CustomerModel.id == customer_id,
                CustomerModel.user_id == user_id,
            )
        )
        customer = result.scalar_one_or_none()
        if customer is None:
            raise NotFoundOrUnauthorizedError("Customer")
        return customer

    # ── Mutations ──

    async def create_customer(
        self, session: AsyncSession, user_id: str | None,
        data: Mapping[str, Any] | BaseModel,
    ) -> CustomerModel:
        user_id = require_user(user_id)
        validated = validate_input(CustomerCreate, data)

        customer = CustomerModel(**validated.model_dump(), user_id=user_id)
        session.add(customer)
        await session.flush()

        if self.audit_service:
            await self.audit_service.log_create(
                session, "customer", customer.id, row_to_dict(customer), user_id,
            )
        logger.info("customer created", extra={"customer_id": customer.id, "user_id": user_id})
        self._invalidate()
        return customer

    async def update_customer(
        self, session: AsyncSession, user_id: str | None,
        data: Mapping[str, Any] | BaseModel,
    ) -> CustomerModel:
        user_id = require_user(user_id)
        validated = validate_input(CustomerUpdate, data)

        customer = await self._get_owned(session, validated.id, user_id)
        old_state = row_to_dict(customer)

        changes = validated.model_dump(exclude_unset=True, exclude={"id"})
        changes = {
            field: value for field, value in changes.items()
            if not (value is None and field in _NON_NULLABLE)
        }
        for field, value in changes.items():
            setattr(customer, field, value)
        await session.flush()

        if self.audit_service:
            await self.audit_service.log_update(
                session, "customer", customer.id, old_state, changes, user_id,
            )
        logger.info("customer updated", extra={"customer_id": customer.id, "user_id": user_id})
        self._invalidate()
        return customer

    async def toggle_archive_customer(
        self, session: AsyncSession, user_id: str | None, customer_id: int,
    ) -> CustomerModel:
        user_id = require_user(user_id)
        customer = await self._get_owned(session, customer_id, user_id)

        customer.archived = not customer.archived
        await session.flush()

        if self.audit_service:
            await self.audit_service.log_archive(session, customer.id, customer.archived, user_id)
        logger.info(
            "customer archive toggled",
            extra={"customer_id": customer.id, "archived": customer.archived, "user_id": user_id},
        )
        self._invalidate()
        return customer

    # ── Queries ──

    async def get_customer(
        self, session: AsyncSession, user_id: str | None, customer_id: int,
    ) -> CustomerModel:
        user_id = require_user(user_id)
        return await self._get_owned(session, customer_id, user_id)

    async def list_customers(
        self, session: AsyncSession, user_id: str | None,
        include_archived: bool = True,
    ) -> list[tuple[CustomerModel, CustomerNoteModel | None]]:
        """Customers by name, each paired with its most recent note."""
        user_id = require_user(user_id)
        query = select(CustomerModel).where(CustomerModel.user_id == user_id)
        if not include_archived:
            query = query.where(CustomerModel.archived.is_(False))
        result = await session.execute(query.order_by(CustomerModel.name.asc()))
        customers = list(result.scalars().all())

        notes_result = await session.execute(
            select(CustomerNoteModel)
            .where(CustomerNoteModel.user_id == user_id)
            .order_by(CustomerNoteModel.created_at.desc(), CustomerNoteModel.id.desc())
        )
        latest: dict[int, CustomerNoteModel] = {}
        for note in notes_result.scalars().all():
            latest.setdefault(note.customer_id, note)

        return [(c, latest.get(c.id)) for c in customers]

    async def get_active_customers(
        self, session: AsyncSession, user_id: str | None,
    ) -> list[CustomerModel]:
        user_id = require_user(user_id)
        result = await session.execute(
            select(CustomerModel)
            .where(
                CustomerModel.user_id == user_id,
                CustomerModel.archived.is_(False),
            )
            .order_by(CustomerModel.name.asc())
        )
        return list(result.scalars().all())

    async def get_customer_notes(
        self, session: AsyncSession, user_id: str | None, customer_id: int,
    ) -> list[CustomerNoteModel]:
        """Notes for one customer, newest first."""
        user_id = require_user(user_id)
        await self._get_owned(session, customer_id, user_id)
        result = await session.execute(
            select(CustomerNoteModel)
            .where(
                CustomerNoteModel.customer_id == customer_id,
                CustomerNoteModel.user_id == user_id,
            )
            .order_by(CustomerNoteModel.created_at.desc(), CustomerNoteModel.id.desc())
        )
        return list(result.scalars().all())

    async def get_todos_by_customer(
        self, session: AsyncSession, user_id: str | None, customer_id: int,
    ) -> list[TodoModel]:
        user_id = require_user(user_id)
        await self._get_owned(session, customer_id, user_id)
        result = await session.execute(
            select(TodoModel)
            .where(
                TodoModel.customer_id == customer_id,
                TodoModel.user_id == user_id,
            )
            .order_by(TodoModel.created_at.desc(), TodoModel.id.desc())
        )
        return list(result.scalars().all())
