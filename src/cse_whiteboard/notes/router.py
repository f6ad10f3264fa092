"""Customer note API router."""

from fastapi import APIRouter, Depends

from cse_whiteboard.common.security import resolve_caller
from cse_whiteboard.notes.schemas import NoteResponse

router = APIRouter(prefix="/notes")


def _get_service():
    from cse_whiteboard.deps import get_note_service
    return get_note_service()


def _get_db():
    from cse_whiteboard.deps import get_db
    return get_db()


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(note_id: int, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        note = await svc.get_note(session, user_id, note_id)
        return NoteResponse.model_validate(note)


@router.patch("/{note_id}", response_model=NoteResponse)
async def update_note(note_id: int, body: dict, user_id=Depends(resolve_caller)):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        note = await svc.update_note(session, user_id, {**body, "id": note_id})
        return NoteResponse.model_validate(note)
