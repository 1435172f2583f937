from __future__ import annotations

from flask.testing import FlaskClient

PROFILE = {
    "monthly_expense": 5000,
    "withdrawal_rate_pct": 4,
    "expected_return_pct": 7,
    "birth_date": "1990-05-15",
}


def test_get_missing_profile(client: FlaskClient, auth_headers):
    response = client.get("/api/v1/me/profile", headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json() == {"error": {"code": "not_found", "message": "Profile not found"}}


def test_create_then_get_profile(client: FlaskClient, auth_headers):
    created = client.post("/api/v1/me/profile", json=PROFILE, headers=auth_headers)

    assert created.status_code == 201
    body = created.get_json()
    assert body["monthly_expense"] == 5000
    assert body["birth_date"] == "1990-05-15"

    fetched = client.get("/api/v1/me/profile", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.get_json()["id"] == body["id"]


def test_second_create_conflicts(client: FlaskClient, auth_headers):
    client.post("/api/v1/me/profile", json=PROFILE, headers=auth_headers)

    response = client.post("/api/v1/me/profile", json=PROFILE, headers=auth_headers)

    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "conflict"


def test_create_profile_validation(client: FlaskClient, auth_headers):
    response = client.post(
        "/api/v1/me/profile",
        json={**PROFILE, "withdrawal_rate_pct": 150, "extra": 1},
        headers=auth_headers,
    )

    assert response.status_code == 400
    error = response.get_json()["error"]
    assert error["code"] == "bad_request"
    assert error["fields"] == {"withdrawal_rate_pct": "must_be_lte_100", "extra": "unknown_field"}


def test_malformed_json_is_bad_request(client: FlaskClient, auth_headers):
    response = client.post(
        "/api/v1/me/profile",
        data="{not json",
        content_type="application/json",
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "bad_request"


def test_patch_profile(client: FlaskClient, auth_headers):
    client.post("/api/v1/me/profile", json=PROFILE, headers=auth_headers)

    response = client.patch(
        "/api/v1/me/profile",
        json={"monthly_expense": 6000.129, "birth_date": None},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["monthly_expense"] == 6000.13
    assert body["birth_date"] is None
    assert body["withdrawal_rate_pct"] == 4


def test_patch_missing_profile(client: FlaskClient, auth_headers):
    response = client.patch("/api/v1/me/profile", json={"monthly_expense": 1}, headers=auth_headers)

    assert response.status_code == 404


def test_patch_requires_a_field(client: FlaskClient, auth_headers):
    client.post("/api/v1/me/profile", json=PROFILE, headers=auth_headers)

    response = client.patch("/api/v1/me/profile", json={}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()["error"]["fields"] == {"body": "at_least_one_field_required"}


def test_profiles_are_per_user(client: FlaskClient, auth_headers, other_auth_headers):
    client.post("/api/v1/me/profile", json=PROFILE, headers=auth_headers)

    response = client.get("/api/v1/me/profile", headers=other_auth_headers)

    assert response.status_code == 404
