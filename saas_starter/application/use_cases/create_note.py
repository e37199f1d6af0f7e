from __future__ import annotations

import logging

from saas_starter.application.dto.note import CreateNoteInput, NoteWriteOutput
from saas_starter.application.ports.note_port import NotePort
from saas_starter.application.ports.user_port import UserPort
from saas_starter.domain.exceptions import AppError, InternalError, NotFoundError, ValidationError
from saas_starter.domain.services.tier_limits import is_notes_threshold_reached
from saas_starter.shared.result import Result, failure, success


logger = logging.getLogger(__name__)

TAG = "note-service"


class CreateNoteUseCase:
    """Create a note unless the user's tier limit is already reached."""

    def __init__(self, *, note_port: NotePort, user_port: UserPort):
        self._note_port = note_port
        self._user_port = user_port

    def execute(self, command: CreateNoteInput) -> Result[NoteWriteOutput]:
        try:
            tier_limit = self._user_port.get_user_tier_limit(user_id=command.user_id)
            if tier_limit is None:
                raise NotFoundError(
                    "Unable to get tier limit",
                    metadata={"user_id": command.user_id},
                    tag=TAG,
                )
            notes = self._note_port.list_notes(user_id=command.user_id)
        except AppError as exc:
            return failure(
                InternalError(
                    "Unable to create note",
                    cause=exc,
                    metadata={"user_id": command.user_id},
                    tag=TAG,
                )
            )

        if is_notes_threshold_reached(
            notes_count=len(notes),
            max_number_of_notes=tier_limit.max_number_of_notes,
        ):
            return failure(
                ValidationError(
                    "You have reached your notes limit",
                    metadata={
                        "user_id": command.user_id,
                        "tier_id": tier_limit.tier_id,
                        "max_number_of_notes": tier_limit.max_number_of_notes,
                    },
                    tag=TAG,
                )
            )

        try:
            note = self._note_port.create_note(user_id=command.user_id, content=command.content)
        except AppError as exc:
            return failure(
                InternalError(
                    "Unable to create note",
                    cause=exc,
                    metadata={"user_id": command.user_id},
                    tag=TAG,
                )
            )

        logger.info("create_note: created note_id=%s user_id=%s", note.id, note.user_id)
        return success(NoteWriteOutput(id=note.id, updated_at=note.updated_at))
