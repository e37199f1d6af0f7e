"""Tagged success/failure values returned by use cases.

Use cases never let expected failures escape as exceptions: they return a
``Success`` holding the value or a ``Failure`` holding the ``AppError``.
Exactly one of ``data`` / ``error`` is set, so callers branch on ``error``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from saas_starter.domain.exceptions import AppError


T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T
    error: None = None


@dataclass(frozen=True)
class Failure:
    error: AppError
    data: None = None


Result = Union[Success[T], Failure]


def success(data: T) -> Success[T]:
    return Success(data=data)


def failure(error: AppError) -> Failure:
    return Failure(error=error)
