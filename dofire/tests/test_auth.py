from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

from dofire.auth import SupabaseAuthenticator, bearer_token


def fake_client(user):
    client = MagicMock(name="client")
    client.auth.get_user.return_value = SimpleNamespace(user=user)
    return client


def test_bearer_token():
    assert bearer_token("Bearer abc.def") == "abc.def"
    assert bearer_token("Basic abc") is None
    assert bearer_token("Bearer   ") is None
    assert bearer_token(None) is None


def test_user_role_becomes_roles():
    user = SimpleNamespace(id="u-1", role="service_role")

    auth_user = SupabaseAuthenticator(fake_client(user)).authenticate("token")

    assert auth_user.id == "u-1"
    assert auth_user.roles == ["service_role"]


def test_missing_role_defaults_to_authenticated():
    user = SimpleNamespace(id="u-1", role=None)

    auth_user = SupabaseAuthenticator(fake_client(user)).authenticate("token")

    assert auth_user.roles == ["authenticated"]


def test_unknown_token_has_no_user():
    assert SupabaseAuthenticator(fake_client(None)).authenticate("token") is None
