"""Helpers shared by the JSON blueprints."""

from __future__ import annotations

from typing import Any

from flask import jsonify, request

from songclash.core.context import RequestContext

TRACE_HEADER = "X-Trace-Id"


def json_body() -> dict[str, Any]:
    """Return the JSON object sent with the request, or an empty dict."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def request_context(function_name: str) -> RequestContext:
    """Build the context of one request, honouring a caller-supplied trace ID."""
    return RequestContext.create(
        function_name, trace_id=request.headers.get(TRACE_HEADER) or None
    )


def success(message: str, status_code: int = 200, **data: Any) -> Any:
    """Build the standard success response."""
    return jsonify({"success": True, "message": message, **data}), status_code
