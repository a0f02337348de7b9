from fastapi import APIRouter, Depends, HTTPException, status

from myknowledge.dependencies import get_repository
from myknowledge.journals.models import JournalCreate, JournalUpdate
from myknowledge.repository import EntityRepository
from myknowledge.utils import note_to_response

router = APIRouter(
    prefix="/api/journals",
    tags=["Journals"]
)

# Journal entries are notes with is_journal set; every lookup below is
# restricted to them, so a plain note is "not found" on this path.


@router.get("")
async def get_all_journals(repo: EntityRepository = Depends(get_repository)):
    journals = await repo.list_notes(journal_only=True)
    return [note_to_response(journal) for journal in journals]


@router.post("")
async def create_journal(journal: JournalCreate, repo: EntityRepository = Depends(get_repository)):
    journal_doc = await repo.create_note(journal.to_fields(), journal=True)
    return note_to_response(journal_doc)


@router.get("/{journal_id}")
async def get_journal(journal_id: str, repo: EntityRepository = Depends(get_repository)):
    journal = await repo.get_note(journal_id, journal_only=True)
    if not journal:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found")
    return note_to_response(journal)


@router.put("/{journal_id}")
async def update_journal(journal_id: str, journal_update: JournalUpdate, repo: EntityRepository = Depends(get_repository)):
    updated = await repo.update_note(journal_id, journal_update.to_patch(), journal_only=True)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found")
    return note_to_response(updated)


@router.delete("/{journal_id}")
async def delete_journal(journal_id: str, repo: EntityRepository = Depends(get_repository)):
    if not await repo.delete_note(journal_id, journal_only=True):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal entry not found")
    return {"success": True}
