from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from saas_starter.api.deps import (
    get_create_user_account_use_case,
    get_session_manager,
    get_sign_in_use_case,
)
from saas_starter.api.responses import error_response, ok
from saas_starter.api.schemas.auth import JoinRequest, LoginRequest
from saas_starter.api.session import SessionManager
from saas_starter.application.dto.auth import CreateUserAccountInput, SignInInput
from saas_starter.application.use_cases.create_user_account import CreateUserAccountUseCase
from saas_starter.application.use_cases.sign_in import SignInUseCase
from saas_starter.shared.result import Failure


router = APIRouter()

APP_PATH = "/app"


@router.get("/join")
def join_page(
    request: Request,
    session_manager: SessionManager = Depends(get_session_manager),
):
    if not session_manager.is_anonymous(request):
        return session_manager.redirect(APP_PATH)
    return ok({"authenticated": False}, auth_session=None)


@router.post("/join")
def join(
    req: JoinRequest,
    session_manager: SessionManager = Depends(get_session_manager),
    use_case: CreateUserAccountUseCase = Depends(get_create_user_account_use_case),
):
    result = use_case.execute(
        CreateUserAccountInput(email=req.email, password=req.password, name=req.name)
    )
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=None)
    return session_manager.create_session(result.data, redirect_to=req.redirect_to)


@router.get("/login")
def login_page(
    request: Request,
    session_manager: SessionManager = Depends(get_session_manager),
):
    if not session_manager.is_anonymous(request):
        return session_manager.redirect(APP_PATH)
    flash = session_manager.consume_flash_error(request)
    return ok({"error": flash.value}, auth_session=flash)


@router.post("/login")
def login(
    req: LoginRequest,
    session_manager: SessionManager = Depends(get_session_manager),
    use_case: SignInUseCase = Depends(get_sign_in_use_case),
):
    result = use_case.execute(SignInInput(email=req.email, password=req.password))
    if isinstance(result, Failure):
        return error_response(result.error, auth_session=None)
    return session_manager.create_session(result.data, redirect_to=req.redirect_to)


@router.post("/logout")
def logout(session_manager: SessionManager = Depends(get_session_manager)):
    return session_manager.destroy_session()


@router.get("/logout")
def logout_page(session_manager: SessionManager = Depends(get_session_manager)):
    return session_manager.redirect("/")
