from typing import Any, Dict

from flask import abort, request


def json_body() -> Any:
    """Parsed JSON request body; 400 when it is missing or malformed."""
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        abort(400, description="Malformed JSON body")
    return payload


def query_args() -> Dict[str, str]:
    return request.args.to_dict()
