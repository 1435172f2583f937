"""Endpoints scoped to the authenticated user: profile, portfolio, metrics, hint."""

from http import HTTPStatus
from typing import Any

from flask import Blueprint, jsonify, request

from dofire.app.api.errors import err_response
from dofire.app.api.payload import json_body, query_args
from dofire.app.api.security import current_user, login_required
from dofire.app.extensions import services
from dofire.domain import metrics, portfolio, profiles
from dofire.domain.result import Err
from dofire.schemas.metrics import MetricsQuery
from dofire.schemas.profile import CreateProfileCommand, UpdateProfileCommand

me_bp = Blueprint("me", __name__, url_prefix="/me")


@me_bp.get("/profile")
@login_required
def get_profile() -> Any:
    result = profiles.get_profile(services().repository, current_user().id)
    if isinstance(result, Err):
        return err_response(result)
    return jsonify(result.data.model_dump(mode="json"))


@me_bp.post("/profile")
@login_required
def create_profile() -> Any:
    command = CreateProfileCommand.model_validate(json_body())
    result = profiles.create_profile(services().repository, current_user().id, command)
    if isinstance(result, Err):
        return err_response(result)
    return jsonify(result.data.model_dump(mode="json")), HTTPStatus.CREATED


@me_bp.patch("/profile")
@login_required
def update_profile() -> Any:
    command = UpdateProfileCommand.model_validate(json_body())
    result = profiles.update_profile(services().repository, current_user().id, command)
    if isinstance(result, Err):
        return err_response(result)
    return jsonify(result.data.model_dump(mode="json"))


@me_bp.get("/portfolio-agg")
@login_required
def portfolio_agg() -> Any:
    agg = portfolio.get_portfolio(services().repository, current_user().id)
    return jsonify(agg.model_dump(mode="json"))


@me_bp.get("/metrics")
@login_required
def fire_metrics() -> Any:
    """FIRE metrics; query parameters override profile/portfolio values for what-if runs."""
    overrides = MetricsQuery.model_validate(query_args())
    result = metrics.compute_metrics(services().repository, current_user().id, overrides)
    if isinstance(result, Err):
        return err_response(result)
    return jsonify(result.data.model_dump(mode="json"))


@me_bp.get("/ai-hint")
@login_required
def ai_hint() -> Any:
    hint = portfolio.get_hint(
        services().repository,
        current_user().id,
        request.headers.get("Accept-Language"),
    )
    return jsonify(hint.model_dump(mode="json"))
