from __future__ import annotations

from datetime import date, timedelta

import pytest
from flask.testing import FlaskClient

from dofire.core.cursor import CursorData, encode_cursor

BASE = "/api/v1/investments"


def create(client: FlaskClient, headers, **overrides) -> dict:
    payload = {"type": "etf", "amount": 1000, "acquired_at": "2024-01-15"}
    payload.update(overrides)
    response = client.post(BASE, json=payload, headers=headers)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def test_requires_authentication(client: FlaskClient):
    assert client.get(BASE).status_code == 401


def test_create_returns_location_and_idempotency_key(client: FlaskClient, auth_headers):
    response = client.post(
        BASE,
        json={"type": "stock", "amount": 250.5, "acquired_at": "2024-03-01", "notes": "  "},
        headers={**auth_headers, "Idempotency-Key": "abc-123"},
    )

    assert response.status_code == 201
    body = response.get_json()
    assert response.headers["Location"].endswith(f"{BASE}/{body['id']}")
    assert response.headers["Idempotency-Key"] == "abc-123"
    assert body["notes"] is None
    assert "user_id" not in body


def test_create_validation_codes(client: FlaskClient, auth_headers):
    response = client.post(
        BASE,
        json={"type": "gold", "amount": 0, "acquired_at": (date.today() + timedelta(days=2)).isoformat()},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.get_json()["error"]["fields"] == {
        "type": "must_be_one_of_etf_bond_stock_cash",
        "amount": "amount_must_be_positive",
        "acquired_at": "acquired_at_cannot_be_future",
    }


def test_get_update_delete(client: FlaskClient, auth_headers):
    created = create(client, auth_headers)
    url = f"{BASE}/{created['id']}"

    assert client.get(url, headers=auth_headers).get_json() == created

    patched = client.patch(url, json={"amount": 2000, "notes": "rebalanced"}, headers=auth_headers)
    assert patched.status_code == 200
    assert patched.get_json()["amount"] == 2000
    assert patched.get_json()["notes"] == "rebalanced"
    assert patched.get_json()["type"] == "etf"

    assert client.delete(url, headers=auth_headers).status_code == 204
    assert client.get(url, headers=auth_headers).status_code == 404
    assert client.delete(url, headers=auth_headers).status_code == 404


def test_non_uuid_id_is_not_found(client: FlaskClient, auth_headers):
    response = client.get(f"{BASE}/not-a-uuid", headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == "not_found"


def test_other_users_investment_is_not_found(client: FlaskClient, auth_headers, other_auth_headers):
    created = create(client, auth_headers)
    url = f"{BASE}/{created['id']}"

    assert client.get(url, headers=other_auth_headers).status_code == 404
    assert client.patch(url, json={"amount": 1}, headers=other_auth_headers).status_code == 404
    assert client.delete(url, headers=other_auth_headers).status_code == 404


def test_patch_requires_a_field(client: FlaskClient, auth_headers):
    created = create(client, auth_headers)

    response = client.patch(f"{BASE}/{created['id']}", json={}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["error"]["fields"] == {"body": "at_least_one_field_required"}


def test_first_page_is_cacheable(client: FlaskClient, auth_headers):
    create(client, auth_headers)

    response = client.get(BASE, headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["Cache-Control"] == "private, max-age=60"
    body = response.get_json()
    assert len(body["items"]) == 1
    assert body["next_cursor"] is None


def test_paginates_without_gaps_or_duplicates(client: FlaskClient, auth_headers):
    # shared dates force the id tie-break
    for day in (1, 1, 2, 2, 2, 3, 4):
        create(client, auth_headers, acquired_at=f"2024-05-{day:02d}")

    seen = []
    url = f"{BASE}?limit=3"
    pages = 0
    while True:
        response = client.get(url, headers=auth_headers)
        assert response.status_code == 200
        body = response.get_json()
        seen.extend(item["id"] for item in body["items"])
        pages += 1
        if pages > 1:
            assert response.headers["Cache-Control"] == "private, no-cache, no-store, must-revalidate"
        if not body["next_cursor"]:
            break
        url = f"{BASE}?limit=3&cursor={body['next_cursor']}"

    assert pages == 3
    assert len(seen) == 7 == len(set(seen))

    listed = client.get(f"{BASE}?limit=200", headers=auth_headers).get_json()["items"]
    assert [item["id"] for item in listed] == seen
    dates = [item["acquired_at"] for item in listed]
    assert dates == sorted(dates, reverse=True)


def test_sort_by_amount_ascending(client: FlaskClient, auth_headers):
    for amount in (300, 100, 200):
        create(client, auth_headers, amount=amount)

    items = client.get(f"{BASE}?sort=amount_asc", headers=auth_headers).get_json()["items"]

    assert [item["amount"] for item in items] == [100, 200, 300]


def test_filters(client: FlaskClient, auth_headers):
    create(client, auth_headers, type="bond", acquired_at="2024-01-01")
    create(client, auth_headers, type="etf", acquired_at="2024-02-01")
    create(client, auth_headers, type="bond", acquired_at="2024-03-01")

    bonds = client.get(f"{BASE}?type=bond", headers=auth_headers).get_json()["items"]
    window = client.get(
        f"{BASE}?acquired_at_from=2024-01-15&acquired_at_to=2024-03-01", headers=auth_headers
    ).get_json()["items"]

    assert {item["type"] for item in bonds} == {"bond"}
    assert len(bonds) == 2
    assert [item["acquired_at"] for item in window] == ["2024-03-01", "2024-02-01"]


@pytest.mark.parametrize(
    "cursor",
    [
        "garbage",
        encode_cursor(CursorData(last_id="x", last_sort_value=100)),
    ],
)
def test_invalid_cursor(client: FlaskClient, auth_headers, cursor):
    response = client.get(f"{BASE}?cursor={cursor}", headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["error"]["fields"] == {"cursor": "invalid_cursor_format"}


def test_invalid_limit(client: FlaskClient, auth_headers):
    response = client.get(f"{BASE}?limit=500", headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["error"]["fields"] == {"limit": "must_be_between_1_and_200"}
