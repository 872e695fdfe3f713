# kvcache/schemas/commands.py

from pydantic import BaseModel, Field
from typing import Any, List, Optional


class SetCommand(BaseModel):
    key: str = Field(..., min_length=1, description="Key to (re)create as a string.")
    value: str = Field(..., description="String value.")


class PushCommand(BaseModel):
    key: str = Field(..., min_length=1, description="Key of the list.")
    value: List[str] = Field(..., description="Values appended in order.")


class HsetCommand(BaseModel):
    key: str = Field(..., min_length=1, description="Key of the dict.")
    field: str = Field(..., description="Dict field name.")
    value: str = Field(..., description="Value stored at the field.")


class TTLCommand(BaseModel):
    value: int = Field(..., description="Time to live in seconds; 0 is a no-op, negative is rejected.")


class ValueResponse(BaseModel):
    """
    Envelope shared by every route.
    Exactly one of value / error is set; the other is left out of the JSON.
    """
    value: Optional[Any] = None
    error: Optional[str] = None
