"""Audit log API router.

History is only readable by the owner of the audited entity. Without a
``limit`` the configured default applies; larger values are clamped.
"""

from fastapi import APIRouter, Depends, Query

from cse_whiteboard.audit.schemas import AuditLogResponse
from cse_whiteboard.audit.service import AUDIT_TARGETS
from cse_whiteboard.common.security import resolve_caller

router = APIRouter()


def _get_service():
    from cse_whiteboard.deps import get_audit_service
    return get_audit_service()


def _get_db():
    from cse_whiteboard.deps import get_db
    return get_db()


async def _read_logs(session, kind, entity_id, action, limit, offset):
    entries = await _get_service().get_logs(
        session, kind, entity_id, action=action, limit=limit, offset=offset,
    )
    fk = AUDIT_TARGETS[kind].fk
    return [AuditLogResponse.from_entry(e, fk) for e in entries]


@router.get("/customers/{customer_id}/audit", response_model=list[AuditLogResponse])
async def get_customer_audit(
    customer_id: int,
    action: str | None = Query(None),
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    user_id=Depends(resolve_caller),
):
    from cse_whiteboard.deps import get_customer_service
    db = _get_db()
    async with db.get_session() as session:
        await get_customer_service().get_customer(session, user_id, customer_id)
        return await _read_logs(session, "customer", customer_id, action, limit, offset)


@router.get("/notes/{note_id}/audit", response_model=list[AuditLogResponse])
async def get_note_audit(
    note_id: int,
    action: str | None = Query(None),
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    user_id=Depends(resolve_caller),
):
    from cse_whiteboard.deps import get_note_service
    db = _get_db()
    async with db.get_session() as session:
        await get_note_service().get_note(session, user_id, note_id)
        return await _read_logs(session, "note", note_id, action, limit, offset)


@router.get("/todos/{todo_id}/audit", response_model=list[AuditLogResponse])
async def get_todo_audit(
    todo_id: int,
    action: str | None = Query(None),
    limit: int | None = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    user_id=Depends(resolve_caller),
):
    from cse_whiteboard.deps import get_todo_service
    db = _get_db()
    async with db.get_session() as session:
        await get_todo_service().get_todo(session, user_id, todo_id)
        return await _read_logs(session, "todo", todo_id, action, limit, offset)
