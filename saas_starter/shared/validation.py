from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from saas_starter.domain.exceptions import ValidationError


TModel = TypeVar("TModel", bound=BaseModel)


def parse_data(
    data: Any,
    model: type[TModel],
    message: str,
    *,
    trace_id: str | None = None,
) -> TModel:
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        issues = [
            {
                "path": [str(part) for part in issue["loc"]],
                "message": issue["msg"],
                "type": issue["type"],
            }
            for issue in exc.errors()
        ]
        raise ValidationError(
            message,
            cause=exc,
            metadata={"issues": issues, "data": data if isinstance(data, dict) else None},
            tag="payload-validation",
            trace_id=trace_id,
        ) from exc
