from __future__ import annotations

from fastapi import APIRouter, Depends

from saas_starter.api.deps import (
    get_auth_session,
    get_create_note_use_case,
    get_delete_note_use_case,
    get_list_notes_use_case,
    get_update_note_use_case,
)
from saas_starter.api.responses import error_response, ok
from saas_starter.api.schemas.notes import NoteContentRequest
from saas_starter.api.session import SessionWithCookie
from saas_starter.application.dto.note import CreateNoteInput, DeleteNoteInput, UpdateNoteInput
from saas_starter.application.use_cases.create_note import CreateNoteUseCase
from saas_starter.application.use_cases.delete_note import DeleteNoteUseCase
from saas_starter.application.use_cases.list_notes import ListNotesUseCase
from saas_starter.application.use_cases.update_note import UpdateNoteUseCase
from saas_starter.domain.entities.user import AuthSession
from saas_starter.shared.result import Failure


router = APIRouter(prefix="/app/notes")


@router.get("")
def list_notes(
    auth_session: SessionWithCookie[AuthSession] = Depends(get_auth_session),
    use_case: ListNotesUseCase = Depends(get_list_notes_use_case),
):
    result = use_case.execute(user_id=auth_session.value.user_id)
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=auth_session)
    return ok(result.data, auth_session=auth_session)


@router.post("")
def create_note(
    req: NoteContentRequest,
    auth_session: SessionWithCookie[AuthSession] = Depends(get_auth_session),
    use_case: CreateNoteUseCase = Depends(get_create_note_use_case),
):
    result = use_case.execute(CreateNoteInput(user_id=auth_session.value.user_id, content=req.content))
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=auth_session)
    return ok(result.data, auth_session=auth_session, status_code=201)


@router.patch("/{note_id}")
def update_note(
    note_id: str,
    req: NoteContentRequest,
    auth_session: SessionWithCookie[AuthSession] = Depends(get_auth_session),
    use_case: UpdateNoteUseCase = Depends(get_update_note_use_case),
):
    result = use_case.execute(
        UpdateNoteInput(id=note_id, user_id=auth_session.value.user_id, content=req.content)
    )
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=auth_session)
    return ok(result.data, auth_session=auth_session)


@router.delete("/{note_id}")
def delete_note(
    note_id: str,
    auth_session: SessionWithCookie[AuthSession] = Depends(get_auth_session),
    use_case: DeleteNoteUseCase = Depends(get_delete_note_use_case),
):
    result = use_case.execute(DeleteNoteInput(id=note_id, user_id=auth_session.value.user_id))
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=auth_session)
    return ok(result.data, auth_session=auth_session)
