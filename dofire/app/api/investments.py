"""Investment CRUD and keyset-paginated listing."""

from http import HTTPStatus
from typing import Any

from flask import Blueprint, jsonify, request, url_for

from dofire.app.api.errors import err_response
from dofire.app.api.payload import json_body, query_args
from dofire.app.api.security import current_user, login_required
from dofire.app.extensions import services
from dofire.domain import investments
from dofire.domain.result import Err
from dofire.schemas.investment import (
    CreateInvestmentCommand,
    InvestmentListQuery,
    UpdateInvestmentCommand,
)

investments_bp = Blueprint("investments", __name__, url_prefix="/investments")

IDEMPOTENCY_HEADER = "Idempotency-Key"
FIRST_PAGE_CACHE = "private, max-age=60"
CURSOR_PAGE_CACHE = "private, no-cache, no-store, must-revalidate"


@investments_bp.get("")
@login_required
def list_investments() -> Any:
    query = InvestmentListQuery.model_validate(query_args())
    result = investments.list_investments(services().repository, current_user().id, query)
    if isinstance(result, Err):
        return err_response(result)

    response = jsonify(result.data.model_dump(mode="json"))
    # later pages depend on a moving cursor and must not be cached
    response.headers["Cache-Control"] = CURSOR_PAGE_CACHE if query.cursor else FIRST_PAGE_CACHE
    return response


@investments_bp.post("")
@login_required
def create_investment() -> Any:
    command = CreateInvestmentCommand.model_validate(json_body())
    result = investments.create_investment(services().repository, current_user().id, command)
    if isinstance(result, Err):
        return err_response(result)

    created = result.data
    response = jsonify(created.model_dump(mode="json"))
    response.status_code = HTTPStatus.CREATED
    response.headers["Location"] = url_for(".get_investment", investment_id=created.id)
    idempotency_key = request.headers.get(IDEMPOTENCY_HEADER)
    if idempotency_key:
        response.headers[IDEMPOTENCY_HEADER] = idempotency_key
    return response


@investments_bp.get("/<investment_id>")
@login_required
def get_investment(investment_id: str) -> Any:
    result = investments.get_investment(services().repository, current_user().id, investment_id)
    if isinstance(result, Err):
        return err_response(result)
    return jsonify(result.data.model_dump(mode="json"))


@investments_bp.patch("/<investment_id>")
@login_required
def update_investment(investment_id: str) -> Any:
    command = UpdateInvestmentCommand.model_validate(json_body())
    result = investments.update_investment(
        services().repository, current_user().id, investment_id, command
    )
    if isinstance(result, Err):
        return err_response(result)
    return jsonify(result.data.model_dump(mode="json"))


@investments_bp.delete("/<investment_id>")
@login_required
def delete_investment(investment_id: str) -> Any:
    result = investments.delete_investment(services().repository, current_user().id, investment_id)
    if isinstance(result, Err):
        return err_response(result)
    return "", HTTPStatus.NO_CONTENT
