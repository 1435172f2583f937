from __future__ import annotations

from typing import Dict, Optional

import pytest
from flask import Flask
from flask.testing import FlaskClient

from dofire.app import create_app
from dofire.auth import Authenticator, AuthUser
from dofire.config import AppSettings
from dofire.storage import InMemoryRepository

USER_ID = "8f14e45f-ceea-467f-a0e6-3d8c2e1b6a01"
OTHER_USER_ID = "c9f0f895-fb98-4b91-9e1d-0a6f2d9f3b02"
TOKEN = "user-token"
OTHER_TOKEN = "other-token"


class FakeAuthenticator(Authenticator):
    def __init__(self, users: Dict[str, AuthUser]):
        self._users = users

    def authenticate(self, token: str) -> Optional[AuthUser]:
        return self._users.get(token)


@pytest.fixture()
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture()
def app(repository: InMemoryRepository) -> Flask:
    authenticator = FakeAuthenticator(
        {
            TOKEN: AuthUser(id=USER_ID, roles=["authenticated"], iat=1700000000),
            OTHER_TOKEN: AuthUser(id=OTHER_USER_ID, roles=["authenticated"], iat=1700000000),
        }
    )
    settings = AppSettings(storage_backend="memory", log_json=False, log_level="WARNING")
    flask_app = create_app(settings, repository=repository, authenticator=authenticator)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture()
def other_auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {OTHER_TOKEN}"}
