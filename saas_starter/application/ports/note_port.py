from __future__ import annotations

from typing import Protocol

from saas_starter.domain.entities.note import Note


class NotePort(Protocol):
    def list_notes(self, *, user_id: str) -> list[Note]:
        ...

    def create_note(self, *, user_id: str, content: str) -> Note:
        ...

    def update_note(self, *, note_id: str, user_id: str, content: str) -> Note | None:
        ...

    def delete_note(self, *, note_id: str, user_id: str) -> bool:
        ...
