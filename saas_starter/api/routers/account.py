from __future__ import annotations

from fastapi import APIRouter, Depends

from saas_starter.api.deps import (
    get_auth_session,
    get_delete_user_account_use_case,
    get_session_manager,
)
from saas_starter.api.responses import error_response
from saas_starter.api.session import SessionManager, SessionWithCookie
from saas_starter.application.use_cases.delete_user_account import DeleteUserAccountUseCase
from saas_starter.domain.entities.user import AuthSession
from saas_starter.shared.result import Failure


router = APIRouter()


@router.delete("/account")
def delete_account(
    auth_session: SessionWithCookie[AuthSession] = Depends(get_auth_session),
    session_manager: SessionManager = Depends(get_session_manager),
    use_case: DeleteUserAccountUseCase = Depends(get_delete_user_account_use_case),
):
    result = use_case.execute(user_id=auth_session.value.user_id)
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=auth_session)
    return session_manager.destroy_session()
