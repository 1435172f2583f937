from __future__ import annotations

from typing import Optional
from uuid import UUID

from dofire.core.cursor import cursor_for, decode_cursor, encode_cursor, matches_sort
from dofire.domain.result import Err, Ok, Result, err
from dofire.schemas.investment import (
    CreateInvestmentCommand,
    InvestmentListQuery,
    InvestmentOut,
    InvestmentPage,
    UpdateInvestmentCommand,
)
from dofire.storage import ConstraintViolationError, Repository

NOT_FOUND_MESSAGE = "Investment not found or access denied"

# check constraint column -> field error code
CONSTRAINT_CODES = {
    "amount": "amount_must_be_positive",
    "acquired_at": "acquired_at_cannot_be_future",
}


def _parse_id(raw_id: str) -> Optional[str]:
    try:
        return str(UUID(raw_id))
    except (TypeError, ValueError):
        return None


def _constraint_error(exc: ConstraintViolationError) -> Err:
    fields = None
    if exc.field:
        fields = {exc.field: CONSTRAINT_CODES.get(exc.field, "constraint_violation")}
    return err("bad_request", "Validation failed", fields)


def list_investments(repo: Repository, user_id: str, query: InvestmentListQuery) -> Result[InvestmentPage]:
    """
    One page of the user's investments.

    Fetches limit + 1 rows: the extra row only tells whether another page
    exists, in which case next_cursor points at the last returned item.
    """
    cursor = None
    if query.cursor is not None:
        cursor = decode_cursor(query.cursor)
        if cursor is None or not matches_sort(cursor, query.sort):
            return err("bad_request", "Invalid cursor format", {"cursor": "invalid_cursor_format"})

    rows = repo.list_investments(user_id, query, cursor, query.limit + 1)
    page = rows[: query.limit]

    next_cursor = None
    if len(rows) > query.limit:
        next_cursor = encode_cursor(cursor_for(page[-1].to_row(), query.sort))

    return Ok(
        InvestmentPage(
            items=[InvestmentOut.from_entity(investment) for investment in page],
            next_cursor=next_cursor,
        )
    )


def get_investment(repo: Repository, user_id: str, raw_id: str) -> Result[InvestmentOut]:
    investment_id = _parse_id(raw_id)
    investment = repo.get_investment(user_id, investment_id) if investment_id else None
    if investment is None:
        return err("not_found", NOT_FOUND_MESSAGE)
    return Ok(InvestmentOut.from_entity(investment))


def create_investment(repo: Repository, user_id: str, command: CreateInvestmentCommand) -> Result[InvestmentOut]:
    try:
        investment = repo.create_investment(user_id, command)
    except ConstraintViolationError as exc:
        return _constraint_error(exc)
    return Ok(InvestmentOut.from_entity(investment))


def update_investment(
    repo: Repository, user_id: str, raw_id: str, command: UpdateInvestmentCommand
) -> Result[InvestmentOut]:
    investment_id = _parse_id(raw_id)
    if investment_id is None:
        return err("not_found", NOT_FOUND_MESSAGE)
    try:
        investment = repo.update_investment(user_id, investment_id, command.changes())
    except ConstraintViolationError as exc:
        return _constraint_error(exc)
    if investment is None:
        return err("not_found", NOT_FOUND_MESSAGE)
    return Ok(InvestmentOut.from_entity(investment))


def delete_investment(repo: Repository, user_id: str, raw_id: str) -> Result[None]:
    investment_id = _parse_id(raw_id)
    if investment_id is None or not repo.delete_investment(user_id, investment_id):
        return err("not_found", NOT_FOUND_MESSAGE)
    return Ok(None)
