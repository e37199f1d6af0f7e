from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from .api.responses import error_response
from .api.routers import account, auth, billing, notes
from .api.session import AuthRedirectError
from .domain.exceptions import AppError, InternalError, ValidationError
from .shared.config import get_settings


logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="SaaS Starter API")

app.include_router(auth.router)
app.include_router(notes.router)
app.include_router(billing.router)
app.include_router(account.router)


@app.exception_handler(AuthRedirectError)
def handle_auth_redirect(request: Request, exc: AuthRedirectError):
    return exc.to_response()


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError):
    issues = [
        {
            "path": [str(part) for part in issue["loc"]],
            "message": issue["msg"],
            "type": issue["type"],
        }
        for issue in exc.errors()
    ]
    error = ValidationError(
        "Invalid request",
        metadata={"issues": issues, "path": request.url.path},
        tag="request-validation",
    )
    return error_response(error, auth_session=None)


@app.exception_handler(AppError)
def handle_app_error(request: Request, exc: AppError):
    return error_response(exc, auth_session=None)


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception):
    error = InternalError(
        "Something went wrong",
        cause=exc,
        metadata={"path": request.url.path, "method": request.method},
        tag="unexpected-error",
    )
    return error_response(error, auth_session=None)


@app.get("/health")
def health():
    return {"status": "ok"}
