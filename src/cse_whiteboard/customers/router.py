"""Customer API router."""

from fastapi import APIRouter, Depends, Query, Response

from cse_whiteboard.common.invalidation import DASHBOARD_PATH
from cse_whiteboard.common.security import resolve_caller
from cse_whiteboard.customers.schemas import (
    ActiveCustomer,
    CustomerListItem,
    CustomerResponse,
)
from cse_whiteboard.notes.schemas import NoteResponse
from cse_whiteboard.todos.schemas import TodoResponse

router = APIRouter(prefix="/customers")

# Request bodies are taken as plain dicts: the services authenticate first and
# then validate, reporting the first failing field.


def _get_service():
    from cse_whiteboard.deps import get_customer_service
    return get_customer_service()


def _get_note_service():
    from cse_whiteboard.deps import get_note_service
    return get_note_service()


def _get_db():
    from cse_whiteboard.deps import get_db
    return get_db()


def _get_invalidator():
    from cse_whiteboard.deps import get_invalidator
    return get_invalidator()


@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(body: dict, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        customer = await svc.create_customer(session, user_id, body)
        return CustomerResponse.model_validate(customer)


@router.get("", response_model=list[CustomerListItem])
async def list_customers(
    response: Response,
    include_archived: bool = Query(True),
    user_id=Depends(resolve_caller),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        rows = await svc.list_customers(session, user_id, include_archived=include_archived)
        response.headers["ETag"] = _get_invalidator().etag(DASHBOARD_PATH)
        return [
            CustomerListItem(
                **CustomerResponse.model_validate(c).model_dump(),
                latest_note=note.note if note else None,
                latest_note_date=note.created_at if note else None,
            )
            for c, note in rows
        ]


@router.get("/active", response_model=list[ActiveCustomer])
async def get_active_customers(user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        customers = await svc.get_active_customers(session, user_id)
        return [ActiveCustomer(id=c.id, name=c.name) for c in customers]


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: int, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        customer = await svc.get_customer(session, user_id, customer_id)
        return CustomerResponse.model_validate(customer)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int, body: dict, user_id=Depends(resolve_caller),
):
    """Replace the editable form: name, temperament, topology and stage are required."""
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        customer = await svc.update_customer(session, user_id, {**body, "id": customer_id})
        return CustomerResponse.model_validate(customer)


@router.post("/{customer_id}/archive", response_model=CustomerResponse)
async def toggle_archive_customer(customer_id: int, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        customer = await svc.toggle_archive_customer(session, user_id, customer_id)
        return CustomerResponse.model_validate(customer)


@router.get("/{customer_id}/notes", response_model=list[NoteResponse])
async def get_customer_notes(customer_id: int, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        notes = await svc.get_customer_notes(session, user_id, customer_id)
        return [NoteResponse.model_validate(n) for n in notes]


@router.post("/{customer_id}/notes", response_model=NoteResponse, status_code=201)
async def add_note(customer_id: int, body: dict, user_id=Depends(resolve_caller)):
    svc = _get_note_service()
    db = _get_db()
    async with db.get_session() as session:
        note = await svc.add_note(session, user_id, {**body, "customer_id": customer_id})
        return NoteResponse.model_validate(note)


@router.get("/{customer_id}/todos", response_model=list[TodoResponse])
async def get_todos_by_customer(customer_id: int, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        todos = await svc.get_todos_by_customer(session, user_id, customer_id)
        return [TodoResponse.model_validate(t) for t in todos]
