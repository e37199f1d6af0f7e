from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from saas_starter.api.session import SessionWithCookie
from saas_starter.domain.exceptions import AppError, new_trace_id


TRACE_ID_HEADER = "X-Trace-Id"


def _envelope(
    *,
    data: Any,
    error: AppError | None,
    status_code: int,
    auth_session: SessionWithCookie | None,
) -> JSONResponse:
    trace_id = error.trace_id if error is not None else new_trace_id()
    response = JSONResponse(
        status_code=status_code,
        content={
            "data": jsonable_encoder(data) if error is None else None,
            "error": error.to_public() if error is not None else None,
        },
        headers={TRACE_ID_HEADER: trace_id},
    )
    if auth_session is not None:
        auth_session.apply(response)
    return response


def ok(data: Any, *, auth_session: SessionWithCookie | None, status_code: int = 200) -> JSONResponse:
    return _envelope(data=data, error=None, status_code=status_code, auth_session=auth_session)


def error_response(error: AppError, *, auth_session: SessionWithCookie | None) -> JSONResponse:
    return _envelope(data=None, error=error, status_code=error.status, auth_session=auth_session)
