"""Pydantic schemas for the health and session endpoints."""

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    time: datetime
    db: Literal["reachable", "degraded", "down"]


class SessionResponse(BaseModel):
    user_id: str
    roles: List[str]
    iat: int
