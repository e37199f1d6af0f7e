from __future__ import annotations

from saas_starter.application.dto.note import NoteWriteOutput, UpdateNoteInput
from saas_starter.application.ports.note_port import NotePort
from saas_starter.domain.exceptions import AppError, InternalError, NotFoundError
from saas_starter.shared.result import Result, failure, success


TAG = "note-service"


class UpdateNoteUseCase:
    def __init__(self, *, note_port: NotePort):
        self._note_port = note_port

    def execute(self, command: UpdateNoteInput) -> Result[NoteWriteOutput]:
        metadata = {"id": command.id, "user_id": command.user_id}
        try:
            note = self._note_port.update_note(
                note_id=command.id,
                user_id=command.user_id,
                content=command.content,
            )
        except AppError as exc:
            return failure(InternalError("Unable to update note", cause=exc, metadata=metadata, tag=TAG))

        if note is None:
            return failure(NotFoundError("Note not found", metadata=metadata, tag=TAG))
        return success(NoteWriteOutput(id=note.id, updated_at=note.updated_at))
