"""
Supabase (PostgREST) implementation of the storage interface.

The client is built once by the application factory and passed in. Queries
always filter by user_id explicitly instead of relying on a per-request
JWT, so one client can be shared safely across requests.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
import structlog
from postgrest.exceptions import APIError
from pydantic import BaseModel, ValidationError
from supabase import Client, create_client

from dofire.config import SupabaseSettings
from dofire.core.cursor import CursorData, keyset_filter
from dofire.models import Investment, PortfolioAgg, Profile
from dofire.schemas.investment import CreateInvestmentCommand, InvestmentListQuery
from dofire.schemas.profile import CreateProfileCommand
from dofire.storage.interface import (
    ConflictError,
    ConstraintViolationError,
    Repository,
    StorageError,
)

PROFILES = "profiles"
INVESTMENTS = "investments"
PORTFOLIO_VIEW = "v_investments_agg"

UNIQUE_VIOLATION = "23505"
CHECK_VIOLATION = "23514"

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def create_supabase_client(settings: SupabaseSettings) -> Client:
    return create_client(settings.url, settings.key)


def _jsonable(values: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, (date, datetime)):
            value = value.isoformat()
        out[key] = value
    return out


def _constraint_field(message: str) -> Optional[str]:
    for column in ("amount", "acquired_at", "monthly_expense", "withdrawal_rate_pct", "expected_return_pct", "birth_date"):
        if column in message:
            return column
    return None


def _translate(exc: APIError, action: str) -> StorageError:
    message = exc.message or str(exc)
    if exc.code == UNIQUE_VIOLATION:
        return ConflictError(f"{action}: {message}", original=exc)
    if exc.code == CHECK_VIOLATION:
        return ConstraintViolationError(f"{action}: {message}", field=_constraint_field(message), original=exc)
    return StorageError(f"{action}: {message}", original=exc)


class SupabaseRepository(Repository):
    def __init__(self, client: Client):
        self._client = client

    def _execute(self, request: Any, action: str) -> List[Dict[str, Any]]:
        try:
            response = request.execute()
        except APIError as exc:
            logger.warning("supabase_request_failed", action=action, code=exc.code, message=exc.message)
            raise _translate(exc, action) from exc
        except httpx.HTTPError as exc:
            # connection refused, timeouts and other transport failures
            logger.warning("supabase_transport_failed", action=action, error=str(exc))
            raise StorageError(f"{action}: {exc}", original=exc) from exc
        return list(response.data or [])

    @staticmethod
    def _parse(model: Type[M], row: Dict[str, Any], action: str) -> M:
        try:
            return model.model_validate(row)
        except ValidationError as exc:
            logger.error("supabase_row_invalid", action=action, error=str(exc))
            raise StorageError(f"{action}: unexpected row shape", original=exc) from exc

    # --- profiles ---

    def get_profile(self, user_id: str) -> Optional[Profile]:
        rows = self._execute(
            self._client.table(PROFILES).select("*").eq("user_id", user_id).limit(1),
            "get profile",
        )
        return self._parse(Profile, rows[0], "get profile") if rows else None

    def create_profile(self, user_id: str, command: CreateProfileCommand) -> Profile:
        payload = _jsonable({"user_id": user_id, **command.model_dump()})
        rows = self._execute(self._client.table(PROFILES).insert(payload), "create profile")
        if not rows:
            raise StorageError("create profile: no data returned")
        return self._parse(Profile, rows[0], "create profile")

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Optional[Profile]:
        payload = _jsonable({**changes, "updated_at": datetime.now(timezone.utc)})
        rows = self._execute(
            self._client.table(PROFILES).update(payload).eq("user_id", user_id),
            "update profile",
        )
        return self._parse(Profile, rows[0], "update profile") if rows else None

    # --- investments ---

    def list_investments(
        self,
        user_id: str,
        query: InvestmentListQuery,
        cursor: Optional[CursorData],
        limit: int,
    ) -> List[Investment]:
        request = self._client.table(INVESTMENTS).select("*").eq("user_id", user_id)
        if query.type is not None:
            request = request.eq("type", query.type.value)
        if query.acquired_at_from is not None:
            request = request.gte("acquired_at", query.acquired_at_from.isoformat())
        if query.acquired_at_to is not None:
            request = request.lte("acquired_at", query.acquired_at_to.isoformat())
        if cursor is not None:
            request = request.or_(keyset_filter(query.sort, cursor))

        sort = query.sort
        request = request.order(sort.column, desc=sort.descending).order("id", desc=sort.descending).limit(limit)
        rows = self._execute(request, "list investments")
        return [self._parse(Investment, row, "list investments") for row in rows]

    def get_investment(self, user_id: str, investment_id: str) -> Optional[Investment]:
        rows = self._execute(
            self._client.table(INVESTMENTS).select("*").eq("id", investment_id).eq("user_id", user_id).limit(1),
            "get investment",
        )
        return self._parse(Investment, rows[0], "get investment") if rows else None

    def create_investment(self, user_id: str, command: CreateInvestmentCommand) -> Investment:
        payload = _jsonable({"user_id": user_id, **command.model_dump()})
        rows = self._execute(self._client.table(INVESTMENTS).insert(payload), "create investment")
        if not rows:
            raise StorageError("create investment: no data returned")
        return self._parse(Investment, rows[0], "create investment")

    def update_investment(
        self, user_id: str, investment_id: str, changes: Dict[str, Any]
    ) -> Optional[Investment]:
        payload = _jsonable({**changes, "updated_at": datetime.now(timezone.utc)})
        rows = self._execute(
            self._client.table(INVESTMENTS).update(payload).eq("id", investment_id).eq("user_id", user_id),
            "update investment",
        )
        return self._parse(Investment, rows[0], "update investment") if rows else None

    def delete_investment(self, user_id: str, investment_id: str) -> bool:
        rows = self._execute(
            self._client.table(INVESTMENTS).delete().eq("id", investment_id).eq("user_id", user_id),
            "delete investment",
        )
        return bool(rows)

    # --- aggregation / health ---

    def get_portfolio_agg(self, user_id: str) -> PortfolioAgg:
        rows = self._execute(
            self._client.table(PORTFOLIO_VIEW).select("*").eq("user_id", user_id).limit(1),
            "get portfolio aggregation",
        )
        if not rows:
            return PortfolioAgg.empty(user_id)
        return self._parse(PortfolioAgg, {**rows[0], "user_id": user_id}, "get portfolio aggregation")

    def ping(self) -> None:
        self._execute(self._client.table(PROFILES).select("id").limit(1), "ping")
