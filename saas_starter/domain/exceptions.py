from __future__ import annotations

import logging
from typing import Any, Mapping
from uuid import uuid4


logger = logging.getLogger(__name__)

REDACTED = "[redacted]"
_SENSITIVE_KEY_PARTS = ("password", "secret", "token")


def new_trace_id() -> str:
    return uuid4().hex


def sanitize_metadata(value: Any) -> Any:
    """Return a copy of ``value`` with password-like fields redacted."""
    if isinstance(value, Mapping):
        sanitized = {}
        for key, item in value.items():
            key_l = str(key).lower()
            if any(part in key_l for part in _SENSITIVE_KEY_PARTS):
                sanitized[key] = REDACTED
            else:
                sanitized[key] = sanitize_metadata(item)
        return sanitized
    if isinstance(value, (list, tuple)):
        return [sanitize_metadata(item) for item in value]
    return value


class DomainError(Exception):
    """Base for domain errors."""


class AppError(DomainError):
    """Normalized application error.

    ``message`` is safe to show to the user. ``cause`` is kept for logs only
    and never serialized. ``metadata`` is sanitized before being logged or
    returned. ``trace_id`` correlates a client-visible error with the log line
    written when the error was built.
    """

    default_status = 500
    default_tag = "untagged"
    log_level = logging.ERROR

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        metadata: Mapping[str, Any] | None = None,
        tag: str | None = None,
        trace_id: str | None = None,
        status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.metadata = sanitize_metadata(dict(metadata)) if metadata else None
        self.tag = tag or self.default_tag
        self.trace_id = trace_id or new_trace_id()
        if isinstance(cause, AppError):
            self.status = cause.status
        else:
            self.status = status or self.default_status
        if cause is not None:
            self.__cause__ = cause

        logger.log(
            self.log_level,
            "%s: %s trace_id=%s status=%s metadata=%s cause=%r",
            self.tag,
            self.message,
            self.trace_id,
            self.status,
            self.metadata,
            cause,
        )

    def to_public(self) -> dict:
        return {
            "message": self.message,
            "metadata": self.metadata,
            "traceId": self.trace_id,
        }


class ValidationError(AppError):
    """Malformed input or provider payload."""

    default_status = 400
    default_tag = "payload-validation"
    log_level = logging.WARNING


class AuthError(AppError):
    """Missing, invalid or expired credentials. Handled with a redirect."""

    default_status = 401
    default_tag = "auth-session"
    log_level = logging.INFO

    def __init__(self, message: str, *, code: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.code = code


class UpstreamProviderError(AppError):
    """Identity or billing provider call failed."""

    default_tag = "upstream-provider"


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    default_status = 404
    default_tag = "not-found"
    log_level = logging.WARNING


class InternalError(AppError):
    """Unexpected failure."""
