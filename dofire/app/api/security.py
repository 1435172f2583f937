"""Bearer-token guard for the authenticated endpoints."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable

import structlog
from flask import g, request

from dofire.app.api.errors import error_response
from dofire.app.extensions import services
from dofire.auth import AuthUser, bearer_token
from dofire.schemas.errors import ApiError


def login_required(view: Callable[..., Any]) -> Callable[..., Any]:
    """Resolve the caller from the Authorization header into ``g.user``, or answer 401."""

    @wraps(view)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        token = bearer_token(request.headers.get("Authorization"))
        if token is None:
            return error_response(
                ApiError(code="unauthorized", message="Missing or invalid Authorization header")
            )

        user = services().authenticator.authenticate(token)
        if user is None:
            return error_response(ApiError(code="unauthorized", message="Invalid or expired token"))

        g.user = user
        structlog.contextvars.bind_contextvars(user_id=user.id)
        return view(*args, **kwargs)

    return wrapper


def current_user() -> AuthUser:
    return g.user
