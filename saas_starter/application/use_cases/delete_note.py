from __future__ import annotations

from saas_starter.application.dto.note import DeleteNoteInput
from saas_starter.application.ports.note_port import NotePort
from saas_starter.domain.exceptions import AppError, InternalError, NotFoundError
from saas_starter.shared.result import Result, failure, success


TAG = "note-service"


class DeleteNoteUseCase:
    def __init__(self, *, note_port: NotePort):
        self._note_port = note_port

    def execute(self, command: DeleteNoteInput) -> Result[dict]:
        metadata = {"id": command.id, "user_id": command.user_id}
        try:
            deleted = self._note_port.delete_note(note_id=command.id, user_id=command.user_id)
        except AppError as exc:
            return failure(InternalError("Unable to delete note", cause=exc, metadata=metadata, tag=TAG))

        if not deleted:
            return failure(NotFoundError("Note not found", metadata=metadata, tag=TAG))
        return success({"id": command.id, "deleted": True})
