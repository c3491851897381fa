from flask import Blueprint, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .errors import AppError, InternalError

error_handlers_bp = Blueprint("error_handlers", __name__)


@error_handlers_bp.app_errorhandler(AppError)
def handle_app_error(error):
    """Render application errors as JSON with their mapped status."""
    if error.status_code >= 500:
        current_app.logger.error(f"Application Error: {error.message}")
    else:
        current_app.logger.warning(f"{type(error).__name__}: {error.message}")
    return jsonify({"error": error.to_dict()}), error.status_code


@error_handlers_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    """Handles routing errors such as unknown URLs or wrong methods."""
    code = "not-found" if e.code == 404 else "invalid-argument"
    return jsonify({"error": {"code": code, "message": e.description}}), e.code


@error_handlers_bp.app_errorhandler(Exception)
def handle_unexpected_error(e):
    """Handles unexpected server errors."""
    current_app.logger.error(f"Internal Server Error: {e}", exc_info=e)
    return jsonify({"error": InternalError().to_dict()}), 500
