"""Bearer-token verification against the managed auth provider."""

from __future__ import annotations

import base64
import binascii
import json
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

import structlog
from supabase import AuthError, Client

logger = structlog.get_logger(__name__)

DEFAULT_ROLE = "authenticated"


@dataclass(frozen=True)
class AuthUser:
    id: str
    roles: List[str] = field(default_factory=list)
    iat: Optional[int] = None


def bearer_token(header: Optional[str]) -> Optional[str]:
    """Token from an ``Authorization: Bearer <token>`` header."""
    if not header or not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    return token or None


def token_issued_at(token: str) -> int:
    """``iat`` claim of a JWT; now when the payload can't be read."""
    try:
        payload_segment = token.split(".")[1]
        padded = payload_segment + "=" * (-len(payload_segment) % 4)
        claims = json.loads(base64.urlsafe_b64decode(padded))
        return int(claims["iat"])
    except (IndexError, KeyError, TypeError, ValueError, binascii.Error):
        return int(time.time())


class Authenticator(ABC):
    @abstractmethod
    def authenticate(self, token: str) -> Optional[AuthUser]:
        """The user a token belongs to, or None for an invalid/expired token."""


class SupabaseAuthenticator(Authenticator):
    def __init__(self, client: Client):
        self._client = client

    def authenticate(self, token: str) -> Optional[AuthUser]:
        try:
            response = self._client.auth.get_user(token)
        except AuthError as exc:
            logger.warning("token_verification_failed", error=str(exc))
            return None

        user = response.user if response else None
        if user is None:
            return None

        roles = [user.role] if getattr(user, "role", None) else [DEFAULT_ROLE]
        return AuthUser(id=str(user.id), roles=roles, iat=token_issued_at(token))
