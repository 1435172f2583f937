"""
Error rendering for the HTTP API.

Every failure leaves the API as ``{"error": {"code", "message", "fields?"}}``.
Pydantic validation errors are flattened into one machine-readable code per
field so the frontend can look up its own wording.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Dict, Mapping

import structlog
from flask import Flask, jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from dofire.domain.result import Err
from dofire.schemas.errors import ApiError, ErrorCode
from dofire.storage import StorageError

logger = structlog.get_logger(__name__)

STATUS_BY_CODE: Dict[str, HTTPStatus] = {
    "bad_request": HTTPStatus.BAD_REQUEST,
    "unauthorized": HTTPStatus.UNAUTHORIZED,
    "forbidden": HTTPStatus.FORBIDDEN,
    "not_found": HTTPStatus.NOT_FOUND,
    "conflict": HTTPStatus.CONFLICT,
    "too_many_requests": HTTPStatus.TOO_MANY_REQUESTS,
    "internal": HTTPStatus.INTERNAL_SERVER_ERROR,
}

CODE_BY_STATUS: Dict[int, ErrorCode] = {int(status): code for code, status in STATUS_BY_CODE.items()}

# (field, pydantic error type) pairs with a dedicated code
FIELD_OVERRIDES: Dict[tuple, str] = {
    ("amount", "greater_than"): "amount_must_be_positive",
    ("amount", "less_than_equal"): "exceeds_maximum_value",
    ("notes", "string_too_long"): "must_not_exceed_1000_characters",
    ("type", "enum"): "must_be_one_of_etf_bond_stock_cash",
    ("limit", "greater_than_equal"): "must_be_between_1_and_200",
    ("limit", "less_than_equal"): "must_be_between_1_and_200",
    ("sort", "enum"): "must_be_one_of_acquired_at_desc_acquired_at_asc_amount_desc_amount_asc",
}

INVALID_TYPE_ERRORS = {
    "missing",
    "model_type",
    "model_attributes_type",
    "float_type",
    "float_parsing",
    "int_type",
    "int_parsing",
    "int_from_float",
    "string_type",
    "date_type",
}

INVALID_DATE_ERRORS = {"date_parsing", "date_from_datetime_parsing", "date_from_datetime_inexact"}


def _bound(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if value == 0:
        return "zero"
    if isinstance(value, (int, float)) and value < 0:
        return f"minus_{-value}"
    return str(value)


def _error_code(field: str, error: Mapping[str, Any]) -> str:
    kind = error["type"]
    ctx = error.get("ctx") or {}

    override = FIELD_OVERRIDES.get((field, kind))
    if override:
        return override
    if kind == "value_error" and "error" in ctx:
        return str(ctx["error"])
    if kind in INVALID_TYPE_ERRORS:
        return "invalid_type"
    if kind in INVALID_DATE_ERRORS:
        return "invalid_date"
    if kind == "finite_number":
        return "must_be_finite"
    if kind == "extra_forbidden":
        return "unknown_field"
    if kind == "greater_than_equal":
        return f"must_be_gte_{_bound(ctx['ge'])}"
    if kind == "greater_than":
        return f"must_be_gt_{_bound(ctx['gt'])}"
    if kind == "less_than_equal":
        return f"must_be_lte_{_bound(ctx['le'])}"
    if kind == "string_too_long":
        return f"must_not_exceed_{ctx['max_length']}_characters"
    return "invalid_value"


def field_errors(exc: ValidationError) -> Dict[str, str]:
    """First error per field; model-level errors are reported under ``body``."""
    fields: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "body"
        fields.setdefault(field, _error_code(field, error))
    return fields


def error_response(error: ApiError):
    return jsonify(error.envelope()), STATUS_BY_CODE[error.code]


def err_response(result: Err):
    return error_response(result.error)


def _handle_validation_error(exc: ValidationError):
    return error_response(
        ApiError(code="bad_request", message="Validation failed", fields=field_errors(exc))
    )


def _handle_storage_error(exc: StorageError):
    logger.error("storage_error", error=str(exc), exc_info=exc.original or exc)
    return error_response(ApiError(code="internal", message="Internal server error"))


def _handle_http_error(exc: HTTPException):
    status = exc.code or 500
    code = CODE_BY_STATUS.get(status, "bad_request" if status < 500 else "internal")
    return jsonify(ApiError(code=code, message=exc.description or exc.name).envelope()), status


def _handle_unexpected_error(exc: Exception):
    logger.exception("unhandled_error", error=str(exc))
    return error_response(ApiError(code="internal", message="Internal server error"))


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(ValidationError, _handle_validation_error)
    app.register_error_handler(StorageError, _handle_storage_error)
    app.register_error_handler(HTTPException, _handle_http_error)
    app.register_error_handler(Exception, _handle_unexpected_error)
