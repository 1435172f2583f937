"""Explicit success/failure values returned by domain services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, Optional, TypeVar, Union

from dofire.schemas.errors import ApiError, ErrorCode

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T
    ok: bool = True


@dataclass(frozen=True)
class Err:
    error: ApiError
    ok: bool = False


Result = Union[Ok[T], Err]


def err(code: ErrorCode, message: str, fields: Optional[Dict[str, str]] = None) -> Err:
    return Err(ApiError(code=code, message=message, fields=fields))
