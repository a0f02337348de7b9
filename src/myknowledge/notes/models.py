from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional, Union

from myknowledge.utils import NOTE_FIELDS, canonical_tag_ids, normalize_date, to_storage_fields

DateInput = Union[str, int, float]


class NoteBase(BaseModel):
    title: str
    content: str
    tagIds: List[str] = Field(default_factory=list)
    date: Optional[DateInput] = None

    @field_validator("tagIds")
    @classmethod
    def canonicalize_tag_ids(cls, value):
        return canonical_tag_ids(value)


class NoteCreate(NoteBase):
    isPinned: Optional[bool] = None
    isJournal: Optional[bool] = None

    def to_fields(self) -> Dict[str, Any]:
        fields = to_storage_fields(self.model_dump(), NOTE_FIELDS)
        # An absent or unparsable date is left to the store-level default.
        fields["date"] = normalize_date(self.date)
        return fields


class NoteUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tagIds: Optional[List[str]] = None
    date: Optional[DateInput] = None
    isPinned: Optional[bool] = None
    isJournal: Optional[bool] = None

    @field_validator("tagIds")
    @classmethod
    def canonicalize_tag_ids(cls, value):
        return canonical_tag_ids(value)

    def to_patch(self) -> Dict[str, Any]:
        supplied = self.model_dump(exclude_unset=True)
        if "date" in supplied:
            supplied["date"] = normalize_date(supplied["date"])
        return to_storage_fields(supplied, NOTE_FIELDS)
