"""Per-app service container, reachable from request handlers."""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from dofire.auth import Authenticator
from dofire.config import AppSettings
from dofire.storage import Repository

EXTENSION_KEY = "dofire"


@dataclass(frozen=True)
class Services:
    settings: AppSettings
    repository: Repository
    authenticator: Authenticator


def services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
