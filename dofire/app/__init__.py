"""Application factory and app-wide configuration."""

from __future__ import annotations

from typing import Optional, Tuple
from uuid import uuid4

import structlog
from flask import Flask, g, request
from flask_cors import CORS

from dofire.app.api.errors import register_error_handlers
from dofire.app.api.routes import api_bp
from dofire.app.extensions import EXTENSION_KEY, Services
from dofire.auth import Authenticator, SupabaseAuthenticator
from dofire.config import AppSettings, SupabaseSettings
from dofire.log import configure_logging
from dofire.storage import InMemoryRepository, Repository
from dofire.storage.supabase import SupabaseRepository, create_supabase_client

REQUEST_ID_HEADER = "X-Request-Id"

logger = structlog.get_logger(__name__)


def _build_backends(
    settings: AppSettings,
    repository: Optional[Repository],
    authenticator: Optional[Authenticator],
) -> Tuple[Repository, Authenticator]:
    if repository is None and settings.storage_backend == "memory":
        repository = InMemoryRepository()

    if repository is not None and authenticator is not None:
        return repository, authenticator

    client = create_supabase_client(SupabaseSettings())
    return (
        repository or SupabaseRepository(client),
        authenticator or SupabaseAuthenticator(client),
    )


def _bind_request_id() -> None:
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    g.request_id = request_id
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)


def _echo_request_id(response):
    response.headers[REQUEST_ID_HEADER] = g.get("request_id", "")
    return response


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    repository: Optional[Repository] = None,
    authenticator: Optional[Authenticator] = None,
) -> Flask:
    """
    Build the Flask app instance.

    Storage and token verification are injected when given; otherwise they
    are built from the environment (Supabase, or in-process storage when
    DOFIRE_STORAGE_BACKEND=memory).
    """
    settings = settings or AppSettings()
    configure_logging(settings.log_level, json=settings.log_json)

    app = Flask(__name__)

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
        expose_headers=[REQUEST_ID_HEADER, "Location", "Idempotency-Key"],
    )

    repository, authenticator = _build_backends(settings, repository, authenticator)
    app.extensions[EXTENSION_KEY] = Services(
        settings=settings,
        repository=repository,
        authenticator=authenticator,
    )

    app.before_request(_bind_request_id)
    app.after_request(_echo_request_id)
    register_error_handlers(app)

    app.register_blueprint(api_bp, url_prefix="/api/v1")

    logger.info(
        "app_created",
        environment=settings.environment,
        storage=type(repository).__name__,
    )
    return app
