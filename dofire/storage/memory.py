"""In-memory repository for local development and tests."""

from __future__ import annotations

import threading
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from dofire.core.cursor import CursorData, is_after, sort_value_of
from dofire.core.portfolio import aggregate_portfolio
from dofire.models import Investment, PortfolioAgg, Profile
from dofire.schemas.investment import CreateInvestmentCommand, InvestmentListQuery
from dofire.schemas.profile import CreateProfileCommand
from dofire.storage.interface import ConflictError, ConstraintViolationError, Repository


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_investment(investment: Investment) -> None:
    # mirrors the table's CHECK constraints
    if investment.amount <= 0:
        raise ConstraintViolationError("amount must be positive", field="amount")
    if investment.acquired_at > date.today():
        raise ConstraintViolationError("acquired_at cannot be in the future", field="acquired_at")


class InMemoryRepository(Repository):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._profiles: Dict[str, Profile] = {}
        self._investments: Dict[str, Investment] = {}

    def get_profile(self, user_id: str) -> Optional[Profile]:
        with self._lock:
            return self._profiles.get(user_id)

    def create_profile(self, user_id: str, command: CreateProfileCommand) -> Profile:
        with self._lock:
            if user_id in self._profiles:
                raise ConflictError(f"profile already exists for user {user_id}")
            now = _now()
            profile = Profile(
                id=str(uuid4()),
                user_id=user_id,
                created_at=now,
                updated_at=now,
                **command.model_dump(),
            )
            self._profiles[user_id] = profile
            return profile

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Optional[Profile]:
        with self._lock:
            existing = self._profiles.get(user_id)
            if existing is None:
                return None
            updated = existing.model_copy(update={**changes, "updated_at": _now()})
            self._profiles[user_id] = updated
            return updated

    def list_investments(
        self,
        user_id: str,
        query: InvestmentListQuery,
        cursor: Optional[CursorData],
        limit: int,
    ) -> List[Investment]:
        with self._lock:
            candidates = [inv for inv in self._investments.values() if inv.user_id == user_id]

        if query.type is not None:
            candidates = [inv for inv in candidates if inv.type == query.type]
        if query.acquired_at_from is not None:
            candidates = [inv for inv in candidates if inv.acquired_at >= query.acquired_at_from]
        if query.acquired_at_to is not None:
            candidates = [inv for inv in candidates if inv.acquired_at <= query.acquired_at_to]

        sort = query.sort
        rows = [(inv, inv.to_row()) for inv in candidates]
        if cursor is not None:
            rows = [(inv, row) for inv, row in rows if is_after(row, sort, cursor)]

        rows.sort(key=lambda pair: (sort_value_of(pair[1], sort), pair[0].id), reverse=sort.descending)
        return [inv for inv, _ in rows[:limit]]

    def get_investment(self, user_id: str, investment_id: str) -> Optional[Investment]:
        with self._lock:
            investment = self._investments.get(investment_id)
        if investment is None or investment.user_id != user_id:
            return None
        return investment

    def create_investment(self, user_id: str, command: CreateInvestmentCommand) -> Investment:
        now = _now()
        investment = Investment(
            id=str(uuid4()),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **command.model_dump(),
        )
        _check_investment(investment)
        with self._lock:
            self._investments[investment.id] = investment
        return investment

    def update_investment(
        self, user_id: str, investment_id: str, changes: Dict[str, Any]
    ) -> Optional[Investment]:
        with self._lock:
            existing = self._investments.get(investment_id)
            if existing is None or existing.user_id != user_id:
                return None
            updated = existing.model_copy(update={**changes, "updated_at": _now()})
            _check_investment(updated)
            self._investments[investment_id] = updated
            return updated

    def delete_investment(self, user_id: str, investment_id: str) -> bool:
        with self._lock:
            existing = self._investments.get(investment_id)
            if existing is None or existing.user_id != user_id:
                return False
            del self._investments[investment_id]
            return True

    def get_portfolio_agg(self, user_id: str) -> PortfolioAgg:
        with self._lock:
            owned = [inv for inv in self._investments.values() if inv.user_id == user_id]
        return aggregate_portfolio(user_id, owned)

    def ping(self) -> None:
        return None
