"""Shared API error envelope."""

from typing import Dict, Literal, Optional

from pydantic import BaseModel

ErrorCode = Literal[
    "bad_request",
    "unauthorized",
    "forbidden",
    "not_found",
    "conflict",
    "too_many_requests",
    "internal",
]


class ApiError(BaseModel):
    code: ErrorCode
    message: str
    fields: Optional[Dict[str, str]] = None

    def envelope(self) -> Dict[str, object]:
        return {"error": self.model_dump(exclude_none=True)}
