from __future__ import annotations

from saas_starter.application.dto.note import ListNotesOutput, NoteItemOutput
from saas_starter.application.ports.note_port import NotePort
from saas_starter.application.ports.user_port import UserPort
from saas_starter.domain.exceptions import AppError, InternalError, NotFoundError
from saas_starter.domain.services.tier_limits import is_notes_threshold_reached
from saas_starter.shared.result import Result, failure, success


TAG = "note-service"


class ListNotesUseCase:
    def __init__(self, *, note_port: NotePort, user_port: UserPort):
        self._note_port = note_port
        self._user_port = user_port

    def execute(self, *, user_id: str) -> Result[ListNotesOutput]:
        try:
            tier_limit = self._user_port.get_user_tier_limit(user_id=user_id)
            if tier_limit is None:
                raise NotFoundError(
                    "Unable to get tier limit",
                    metadata={"user_id": user_id},
                    tag=TAG,
                )
            notes = self._note_port.list_notes(user_id=user_id)
        except AppError as exc:
            return failure(
                InternalError(
                    "Unable to list notes",
                    cause=exc,
                    metadata={"user_id": user_id},
                    tag=TAG,
                )
            )

        return success(
            ListNotesOutput(
                notes=[NoteItemOutput(id=note.id, content=note.content) for note in notes],
                is_notes_threshold_reached=is_notes_threshold_reached(
                    notes_count=len(notes),
                    max_number_of_notes=tier_limit.max_number_of_notes,
                ),
                max_number_of_notes=tier_limit.max_number_of_notes,
            )
        )
