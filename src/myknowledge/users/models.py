from pydantic import BaseModel
from typing import Any, Optional


class MetadataUpdateRequest(BaseModel):
    # Shape is checked in the route so a non-object gets the documented 400 message.
    metadata: Optional[Any] = None
