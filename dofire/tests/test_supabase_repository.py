from __future__ import annotations

from unittest.mock import MagicMock, call

import httpx
import pytest
from postgrest.exceptions import APIError

from dofire.app import create_app
from dofire.auth import AuthUser, Authenticator
from dofire.config import AppSettings
from dofire.core.cursor import CursorData, SortOption
from dofire.schemas.investment import CreateInvestmentCommand, InvestmentListQuery
from dofire.storage import ConflictError, ConstraintViolationError, StorageError
from dofire.storage.supabase import SupabaseRepository

USER = "8f14e45f-ceea-467f-a0e6-3d8c2e1b6a01"
INVESTMENT_ROW = {
    "id": "1b4e28ba-2fa1-11d2-883f-0016d3cca427",
    "user_id": USER,
    "type": "etf",
    "amount": 1000,
    "acquired_at": "2024-01-15",
    "notes": None,
    "created_at": "2024-01-15T10:00:00+00:00",
    "updated_at": "2024-01-15T10:00:00+00:00",
}


def fake_client(data=None, error: APIError = None):
    query = MagicMock(name="query")
    for method in ("select", "eq", "gte", "lte", "or_", "order", "limit", "insert", "update", "delete"):
        getattr(query, method).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data or [])
    client = MagicMock(name="client")
    client.table.return_value = query
    return client, query


def api_error(code: str, message: str) -> APIError:
    return APIError({"code": code, "message": message, "details": None, "hint": None})


def test_list_applies_filters_keyset_and_order():
    client, query = fake_client([INVESTMENT_ROW])
    repo = SupabaseRepository(client)
    list_query = InvestmentListQuery.model_validate(
        {"type": "etf", "acquired_at_from": "2024-01-01", "sort": "amount_asc"}
    )

    items = repo.list_investments(USER, list_query, CursorData(INVESTMENT_ROW["id"], 500), limit=11)

    client.table.assert_called_with("investments")
    assert call("user_id", USER) in query.eq.call_args_list
    assert call("type", "etf") in query.eq.call_args_list
    query.gte.assert_called_once_with("acquired_at", "2024-01-01")
    query.or_.assert_called_once_with(
        f"amount.gt.500,and(amount.eq.500,id.gt.{INVESTMENT_ROW['id']})"
    )
    assert query.order.call_args_list == [call("amount", desc=False), call("id", desc=False)]
    query.limit.assert_called_once_with(11)
    assert items[0].amount == 1000


def test_get_investment_missing_returns_none():
    client, _ = fake_client([])

    assert SupabaseRepository(client).get_investment(USER, INVESTMENT_ROW["id"]) is None


def test_create_investment_sends_json_payload():
    client, query = fake_client([INVESTMENT_ROW])
    command = CreateInvestmentCommand.model_validate(
        {"type": "etf", "amount": 1000, "acquired_at": "2024-01-15"}
    )

    created = SupabaseRepository(client).create_investment(USER, command)

    query.insert.assert_called_once_with(
        {"user_id": USER, "type": "etf", "amount": 1000.0, "acquired_at": "2024-01-15", "notes": None}
    )
    assert created.id == INVESTMENT_ROW["id"]


def test_delete_reports_whether_a_row_went_away():
    client, _ = fake_client([INVESTMENT_ROW])
    assert SupabaseRepository(client).delete_investment(USER, INVESTMENT_ROW["id"]) is True

    client, _ = fake_client([])
    assert SupabaseRepository(client).delete_investment(USER, INVESTMENT_ROW["id"]) is False


def test_portfolio_without_rows_is_zero_filled():
    client, _ = fake_client([])

    agg = SupabaseRepository(client).get_portfolio_agg(USER)

    client.table.assert_called_with("v_investments_agg")
    assert agg.total_amount == 0
    assert agg.user_id == USER


def test_unique_violation_is_conflict():
    client, _ = fake_client(error=api_error("23505", "duplicate key value violates unique constraint"))

    with pytest.raises(ConflictError):
        SupabaseRepository(client).get_profile(USER)


def test_check_violation_names_the_field():
    client, _ = fake_client(
        error=api_error("23514", 'new row violates check constraint "investments_amount_check"')
    )

    with pytest.raises(ConstraintViolationError) as excinfo:
        SupabaseRepository(client).update_investment(USER, INVESTMENT_ROW["id"], {"amount": -1})

    assert excinfo.value.field == "amount"


def test_other_errors_are_storage_errors():
    client, _ = fake_client(error=api_error("08006", "connection failure"))

    with pytest.raises(StorageError) as excinfo:
        SupabaseRepository(client).ping()

    assert not isinstance(excinfo.value, ConflictError)
    assert isinstance(excinfo.value.original, APIError)


def test_sort_option_descending_order():
    client, query = fake_client([])

    SupabaseRepository(client).list_investments(
        USER, InvestmentListQuery(sort=SortOption.ACQUIRED_AT_DESC), None, limit=26
    )

    assert query.order.call_args_list == [call("acquired_at", desc=True), call("id", desc=True)]
    query.or_.assert_not_called()


def test_transport_failure_is_storage_error():
    client, _ = fake_client(error=httpx.ConnectError("connection refused"))

    with pytest.raises(StorageError) as excinfo:
        SupabaseRepository(client).ping()

    assert isinstance(excinfo.value.original, httpx.ConnectError)


def test_malformed_row_is_storage_error():
    client, _ = fake_client([{**INVESTMENT_ROW, "amount": "not a number"}])

    with pytest.raises(StorageError):
        SupabaseRepository(client).get_investment(USER, INVESTMENT_ROW["id"])


def test_malformed_stored_profile_is_internal_error():
    client, _ = fake_client([{"id": "p-1", "user_id": USER}])
    authenticator = MagicMock(spec=Authenticator)
    authenticator.authenticate.return_value = AuthUser(id=USER, roles=["authenticated"], iat=1)
    app = create_app(
        AppSettings(log_json=False, log_level="WARNING"),
        repository=SupabaseRepository(client),
        authenticator=authenticator,
    )

    with app.test_client() as test_client:
        response = test_client.get("/api/v1/me/profile", headers={"Authorization": "Bearer t"})

    assert response.status_code == 500
    assert response.get_json()["error"]["code"] == "internal"
