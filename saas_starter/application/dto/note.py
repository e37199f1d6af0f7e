from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NoteItemOutput:
    id: str
    content: str


@dataclass(frozen=True)
class ListNotesOutput:
    notes: list[NoteItemOutput]
    is_notes_threshold_reached: bool
    max_number_of_notes: int | None


@dataclass(frozen=True)
class CreateNoteInput:
    user_id: str
    content: str


@dataclass(frozen=True)
class UpdateNoteInput:
    id: str
    user_id: str
    content: str


@dataclass(frozen=True)
class DeleteNoteInput:
    id: str
    user_id: str


@dataclass(frozen=True)
class NoteWriteOutput:
    id: str
    updated_at: datetime
