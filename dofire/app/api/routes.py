"""HTTP routes for the Flask API."""

import time
from datetime import datetime, timezone
from typing import Any

from flask import Blueprint, jsonify

from dofire.app.api.investments import investments_bp
from dofire.app.api.me import me_bp
from dofire.app.api.security import current_user, login_required
from dofire.app.extensions import services
from dofire.domain.health import check_database
from dofire.schemas.health import HealthResponse, SessionResponse

api_bp = Blueprint("api", __name__)


@api_bp.get("/health")
def health() -> Any:
    """Liveness plus a timed database round trip; always 200."""
    app_services = services()
    response = HealthResponse(
        time=datetime.now(timezone.utc),
        db=check_database(app_services.repository, app_services.settings),
    )
    return jsonify(response.model_dump(mode="json"))


@api_bp.get("/auth/session")
@login_required
def session() -> Any:
    user = current_user()
    response = SessionResponse(
        user_id=user.id,
        roles=user.roles,
        iat=user.iat if user.iat is not None else int(time.time()),
    )
    return jsonify(response.model_dump(mode="json"))


api_bp.register_blueprint(me_bp)
api_bp.register_blueprint(investments_bp)
