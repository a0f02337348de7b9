from pydantic import BaseModel, field_validator
from typing import Any, Dict, List, Optional

from myknowledge.notes.models import DateInput, NoteBase
from myknowledge.utils import NOTE_FIELDS, canonical_tag_ids, normalize_date, to_storage_fields, utc_now_iso


class JournalCreate(NoteBase):
    # Left untyped so a non-boolean value falls back to False instead of being rejected.
    isPinned: Any = None

    def to_fields(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "tag_ids": self.tagIds,
            "date": normalize_date(self.date) or utc_now_iso(),
            "is_pinned": self.isPinned if isinstance(self.isPinned, bool) else False,
            "is_journal": True,
        }


class JournalUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tagIds: Optional[List[str]] = None
    date: Optional[DateInput] = None
    isPinned: Optional[bool] = None

    @field_validator("tagIds")
    @classmethod
    def canonicalize_tag_ids(cls, value):
        return canonical_tag_ids(value)

    def to_patch(self) -> Dict[str, Any]:
        supplied = self.model_dump(exclude_unset=True)
        if "date" in supplied:
            supplied["date"] = normalize_date(supplied["date"])
        return to_storage_fields(supplied, NOTE_FIELDS)
