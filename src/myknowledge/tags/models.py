from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

from myknowledge.utils import TAG_FIELDS, to_storage_fields


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1)
    color: Optional[str] = None


class TagUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = None

    def to_patch(self) -> Dict[str, Any]:
        return to_storage_fields(self.model_dump(exclude_unset=True), TAG_FIELDS)
