# src/myknowledge/repository.py
"""
Owner-scoped access to notes and tags.

An EntityRepository is bound to exactly one owner (the verified ``sub`` of the
caller). Every query it issues goes through ``_scoped``, which adds the
``user_id`` filter, so a record belonging to somebody else can never be read,
changed or removed through it. A record that exists but belongs to another
owner looks exactly like one that does not exist: lookups return ``None`` and
deletes return ``False``.

Deleting a tag is a two step operation: the tag document is removed, then
its id is pulled from ``tag_ids`` of the owner's notes. The two steps are not
wrapped in a transaction. A crash between them, or a note write that races
with the delete, can leave a dangling tag id behind. Readers must tolerate
tag ids that no longer resolve.
"""
import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from myknowledge.config import DEFAULT_TAG_COLOR
from myknowledge.utils import parse_object_id, utc_now_iso

logger = logging.getLogger(__name__)

NOTE_PATCH_FIELDS = ("title", "content", "date", "tag_ids", "is_pinned", "is_journal")
JOURNAL_PATCH_FIELDS = ("title", "content", "date", "tag_ids", "is_pinned")
TAG_PATCH_FIELDS = ("name", "color")


class EntityRepository:
    def __init__(self, mongo_manager, owner_id: str):
        if not owner_id:
            raise ValueError("EntityRepository requires an owner id")
        self.owner_id = owner_id
        self.notes_collection = mongo_manager.notes_collection
        self.tags_collection = mongo_manager.tags_collection

    def _scoped(self, query: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        scoped_query = dict(query or {})
        scoped_query["user_id"] = self.owner_id
        return scoped_query

    def _note_query(self, object_id: ObjectId, journal_only: bool) -> Dict[str, Any]:
        query = {"_id": object_id}
        if journal_only:
            query["is_journal"] = True
        return self._scoped(query)

    @staticmethod
    def _clean_patch(patch: Dict[str, Any], allowed: tuple) -> Dict[str, Any]:
        return {key: value for key, value in patch.items() if key in allowed and value is not None}

    # --- Notes ---
    async def list_notes(self, journal_only: bool = False) -> List[Dict]:
        query = {"is_journal": True} if journal_only else {}
        cursor = self.notes_collection.find(self._scoped(query))
        return await cursor.to_list(length=None)

    async def get_note(self, note_id: str, journal_only: bool = False) -> Optional[Dict]:
        object_id = parse_object_id(note_id)
        if object_id is None:
            return None
        return await self.notes_collection.find_one(self._note_query(object_id, journal_only))

    async def create_note(self, fields: Dict[str, Any], journal: bool = False) -> Dict:
        note_doc = {
            "_id": ObjectId(),
            "title": fields.get("title"),
            "content": fields.get("content"),
            "date": fields.get("date") or utc_now_iso(),
            "tag_ids": list(fields.get("tag_ids") or []),
            "is_pinned": bool(fields.get("is_pinned", False)),
            "is_journal": True if journal else bool(fields.get("is_journal", False)),
            "user_id": self.owner_id,
        }
        await self.notes_collection.insert_one(note_doc)
        return note_doc

    async def update_note(self, note_id: str, patch: Dict[str, Any], journal_only: bool = False) -> Optional[Dict]:
        object_id = parse_object_id(note_id)
        if object_id is None:
            return None
        update_data = self._clean_patch(patch, JOURNAL_PATCH_FIELDS if journal_only else NOTE_PATCH_FIELDS)
        query = self._note_query(object_id, journal_only)
        if not update_data:
            return await self.notes_collection.find_one(query)
        return await self.notes_collection.find_one_and_update(
            query,
            {"$set": update_data},
            return_document=ReturnDocument.AFTER
        )

    async def delete_note(self, note_id: str, journal_only: bool = False) -> bool:
        object_id = parse_object_id(note_id)
        if object_id is None:
            return False
        result = await self.notes_collection.delete_one(self._note_query(object_id, journal_only))
        return result.deleted_count > 0

    # --- Tags ---
    async def list_tags(self) -> List[Dict]:
        cursor = self.tags_collection.find(self._scoped())
        return await cursor.to_list(length=None)

    async def create_tag(self, name: str, color: Optional[str] = None) -> Dict:
        tag_doc = {
            "_id": ObjectId(),
            "name": name,
            "color": color or DEFAULT_TAG_COLOR,
            "user_id": self.owner_id,
        }
        await self.tags_collection.insert_one(tag_doc)
        return tag_doc

    async def update_tag(self, tag_id: str, patch: Dict[str, Any]) -> Optional[Dict]:
        object_id = parse_object_id(tag_id)
        if object_id is None:
            return None
        update_data = self._clean_patch(patch, TAG_PATCH_FIELDS)
        query = self._scoped({"_id": object_id})
        if not update_data:
            return await self.tags_collection.find_one(query)
        return await self.tags_collection.find_one_and_update(
            query,
            {"$set": update_data},
            return_document=ReturnDocument.AFTER
        )

    async def delete_tag(self, tag_id: str) -> bool:
        object_id = parse_object_id(tag_id)
        if object_id is None:
            return False
        result = await self.tags_collection.delete_one(self._scoped({"_id": object_id}))
        if result.deleted_count == 0:
            return False

        tag_ref = str(object_id)
        cleanup = await self.notes_collection.update_many(
            self._scoped({"tag_ids": tag_ref}),
            {"$pull": {"tag_ids": tag_ref}}
        )
        logger.info(f"[TAG_DELETE] Removed tag {tag_ref} from {cleanup.modified_count} notes of user {self.owner_id}.")
        return True
