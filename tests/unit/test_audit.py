"""Tests for the audit log service and cascade behaviour."""

import pytest
from sqlalchemy import func, select

from cse_whiteboard.audit.models import CustomerAuditLogModel, CustomerNoteAuditLogModel
from cse_whiteboard.audit.service import AuditService
from cse_whiteboard.customers.models import CustomerModel
from cse_whiteboard.customers.service import CustomerService
from cse_whiteboard.notes.models import CustomerNoteModel
from cse_whiteboard.notes.service import NoteService
from cse_whiteboard.todos.models import TodoModel
from cse_whiteboard.todos.service import TodoService

from tests.conftest import USER_A, USER_B, make_settings


@pytest.fixture
def audit_svc():
    return AuditService(make_settings(default_audit_limit=5, max_audit_limit=10))


@pytest.fixture
def customer_svc(audit_svc):
    return CustomerService(make_settings(), audit_service=audit_svc)


async def _make_customer(db, customer_svc, user_id=USER_A, name="Acme"):
    async with db.get_session() as session:
        return await customer_svc.create_customer(session, user_id, {"name": name})


class TestWrite:
    async def test_unknown_kind(self, db, audit_svc):
        async with db.get_session() as session:
            with pytest.raises(ValueError, match="Unknown audit kind"):
                await audit_svc.log_create(session, "invoice", 1, {}, USER_A)

    async def test_update_writes_only_changed_fields(self, db, audit_svc, customer_svc):
        c = await _make_customer(db, customer_svc)
        async with db.get_session() as session:
            entries = await audit_svc.log_update(
                session, "customer", c.id,
                {"name": "Acme", "topology": "dev"},
                {"name": "Acme", "topology": "prod"},
                USER_A,
            )
        assert [(e.field_name, e.old_value, e.new_value) for e in entries] == [("topology", "dev", "prod")]

    async def test_customer_update_without_changes(self, db, audit_svc, customer_svc):
        c = await _make_customer(db, customer_svc)
        async with db.get_session() as session:
            entries = await audit_svc.log_update(
                session, "customer", c.id, {"name": "Acme"}, {"name": "Acme"}, USER_A,
            )
        assert entries == []


class TestRead:
    async def test_newest_first(self, db, audit_svc, customer_svc):
        c = await _make_customer(db, customer_svc)
        async with db.get_session() as session:
            await customer_svc.toggle_archive_customer(session, USER_A, c.id)
        async with db.get_session() as session:
            logs = await audit_svc.get_logs(session, "customer", c.id)
        assert [e.action for e in logs] == ["archive", "create"]

    async def test_action_filter(self, db, audit_svc, customer_svc):
        c = await _make_customer(db, customer_svc)
        async with db.get_session() as session:
            await customer_svc.toggle_archive_customer(session, USER_A, c.id)
            await customer_svc.toggle_archive_customer(session, USER_A, c.id)
        async with db.get_session() as session:
            logs = await audit_svc.get_logs(session, "customer", c.id, action="unarchive")
        assert [e.action for e in logs] == ["unarchive"]

    async def test_limit_default_and_clamp(self, db, audit_svc, customer_svc):
        c = await _make_customer(db, customer_svc)
        async with db.get_session() as session:
            for _ in range(12):
                await customer_svc.toggle_archive_customer(session, USER_A, c.id)
        async with db.get_session() as session:
            assert len(await audit_svc.get_logs(session, "customer", c.id)) == 5
            assert len(await audit_svc.get_logs(session, "customer", c.id, limit=100)) == 10
            assert len(await audit_svc.get_logs(session, "customer", c.id, limit=3, offset=11)) == 2

    async def test_entity_logs_for_one_user_fill_the_limit(self, db, audit_svc, customer_svc):
        c = await _make_customer(db, customer_svc)
        async with db.get_session() as session:
            for _ in range(3):
                await audit_svc.log_archive(session, c.id, True, USER_B)
        async with db.get_session() as session:
            await audit_svc.log_archive(session, c.id, False, USER_A)
        async with db.get_session() as session:
            for _ in range(3):
                await audit_svc.log_archive(session, c.id, True, USER_B)

        async with db.get_session() as session:
            logs = await audit_svc.get_logs(session, "customer", c.id, limit=2, user_id=USER_A)
        assert [(e.action, e.user_id) for e in logs] == [("unarchive", USER_A), ("create", USER_A)]

    async def test_user_logs(self, db, audit_svc, customer_svc):
        await _make_customer(db, customer_svc, USER_A, "A")
        await _make_customer(db, customer_svc, USER_B, "B")
        async with db.get_session() as session:
            alice = await audit_svc.get_user_logs(session, "customer", USER_A)
            creates = await audit_svc.get_user_logs(session, "customer", USER_B, action="create")
        assert len(alice) == 1
        assert alice[0].user_id == USER_A
        assert len(creates) == 1


class TestCascade:
    async def test_deleting_customer_removes_notes_and_history(self, db, audit_svc, customer_svc):
        notes = NoteService(make_settings(), audit_service=audit_svc)
        todos = TodoService(make_settings())
        c = await _make_customer(db, customer_svc)
        async with db.get_session() as session:
            note = await notes.add_note(session, USER_A, {"customer_id": c.id, "note": "one"})
            await notes.update_note(session, USER_A, {"id": note.id, "note": "two"})
            todo = await todos.create_todo(
                session, USER_A, {"title": "linked", "customer_id": c.id, "note_id": note.id},
            )

        async with db.get_session() as session:
            customer = await session.get(CustomerModel, c.id)
            await session.delete(customer)

        async with db.get_session() as session:
            for model in (CustomerNoteModel, CustomerNoteAuditLogModel, CustomerAuditLogModel):
                count = await session.execute(select(func.count()).select_from(model))
                assert count.scalar() == 0
            orphan = await session.get(TodoModel, todo.id)
            assert orphan is not None
            assert orphan.customer_id is None
            assert orphan.note_id is None
