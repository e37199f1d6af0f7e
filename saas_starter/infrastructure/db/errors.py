from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping

from sqlalchemy.exc import SQLAlchemyError

from saas_starter.domain.exceptions import InternalError


@contextmanager
def translate_db_errors(
    message: str,
    *,
    metadata: Mapping[str, Any] | None = None,
    tag: str = "database",
) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise InternalError(message, cause=exc, metadata=metadata, tag=tag) from exc
