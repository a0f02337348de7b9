from fastapi import APIRouter, Depends, HTTPException, status

from myknowledge.dependencies import get_repository
from myknowledge.notes.models import NoteCreate, NoteUpdate
from myknowledge.repository import EntityRepository
from myknowledge.utils import note_to_response

router = APIRouter(
    prefix="/api/notes",
    tags=["Notes"]
)


@router.get("")
async def get_all_notes(repo: EntityRepository = Depends(get_repository)):
    notes = await repo.list_notes()
    return [note_to_response(note) for note in notes]


@router.post("")
async def create_note(note: NoteCreate, repo: EntityRepository = Depends(get_repository)):
    note_doc = await repo.create_note(note.to_fields())
    return note_to_response(note_doc)


@router.get("/{note_id}")
async def get_note(note_id: str, repo: EntityRepository = Depends(get_repository)):
    note = await repo.get_note(note_id)
    if not note:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return note_to_response(note)


@router.put("/{note_id}")
async def update_note(note_id: str, note_update: NoteUpdate, repo: EntityRepository = Depends(get_repository)):
    updated_note = await repo.update_note(note_id, note_update.to_patch())
    if not updated_note:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return note_to_response(updated_note)


@router.delete("/{note_id}")
async def delete_note(note_id: str, repo: EntityRepository = Depends(get_repository)):
    if not await repo.delete_note(note_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return {"success": True}
