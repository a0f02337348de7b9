from fastapi import APIRouter, Depends, HTTPException, status

from myknowledge.dependencies import get_repository
from myknowledge.repository import EntityRepository
from myknowledge.tags.models import TagCreate, TagUpdate
from myknowledge.utils import tag_to_response

router = APIRouter(
    prefix="/api/tags",
    tags=["Tags"]
)


@router.get("")
async def get_all_tags(repo: EntityRepository = Depends(get_repository)):
    tags = await repo.list_tags()
    return [tag_to_response(tag) for tag in tags]


@router.post("")
async def create_tag(tag: TagCreate, repo: EntityRepository = Depends(get_repository)):
    tag_doc = await repo.create_tag(tag.name, tag.color)
    return tag_to_response(tag_doc)


@router.put("/{tag_id}")
async def update_tag(tag_id: str, tag_update: TagUpdate, repo: EntityRepository = Depends(get_repository)):
    updated = await repo.update_tag(tag_id, tag_update.to_patch())
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    return tag_to_response(updated)


@router.delete("/{tag_id}")
async def delete_tag(tag_id: str, repo: EntityRepository = Depends(get_repository)):
    """Deletes a tag and pulls its id from every note of the caller that references it."""
    if not await repo.delete_tag(tag_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tag not found")
    return {"success": True}
