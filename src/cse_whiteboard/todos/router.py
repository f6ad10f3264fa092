"""To-do API router."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from cse_whiteboard.common.invalidation import TODOS_PATH
from cse_whiteboard.common.schemas import SuccessResponse
from cse_whiteboard.common.security import resolve_caller
from cse_whiteboard.todos.schemas import TodoResponse

router = APIRouter(prefix="/todos")


def _get_service():
    from cse_whiteboard.deps import get_todo_service
    return get_todo_service()


def _get_db():
    from cse_whiteboard.deps import get_db
    return get_db()


def _get_invalidator():
    from cse_whiteboard.deps import get_invalidator
    return get_invalidator()


@router.post("", response_model=TodoResponse, status_code=201)
async def create_todo(body: dict, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        todo = await svc.create_todo(session, user_id, body)
        return TodoResponse.model_validate(todo)


@router.get("", response_model=list[TodoResponse])
async def list_todos(
    response: Response,
    customer_id: Optional[int] = Query(None),
    user_id=Depends(resolve_caller),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        todos = await svc.list_todos(session, user_id, customer_id=customer_id)
        response.headers["ETag"] = _get_invalidator().etag(TODOS_PATH)
        return [TodoResponse.model_validate(t) for t in todos]


@router.get("/{todo_id}", response_model=TodoResponse)
async def get_todo(todo_id: int, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        todo = await svc.get_todo(session, user_id, todo_id)
        return TodoResponse.model_validate(todo)


@router.patch("/{todo_id}", response_model=TodoResponse)
async def update_todo(todo_id: int, body: dict, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        todo = await svc.update_todo(session, user_id, {**body, "id": todo_id})
        return TodoResponse.model_validate(todo)


@router.post("/{todo_id}/toggle", response_model=TodoResponse)
async def toggle_todo_complete(todo_id: int, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        todo = await svc.toggle_todo_complete(session, user_id, todo_id)
        return TodoResponse.model_validate(todo)


@router.delete("/{todo_id}", response_model=SuccessResponse)
async def delete_todo(todo_id: int, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        await svc.delete_todo(session, user_id, {"id": todo_id})
        return SuccessResponse()
