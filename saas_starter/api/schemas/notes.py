from __future__ import annotations

from pydantic import BaseModel, Field


class NoteContentRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)
