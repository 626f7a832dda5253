"""
Standardized error handling utilities for the Maps Gateway.
Provides the consistent `{"error": message}` envelope across all endpoints.
"""

import re
import logging
import traceback
from typing import Dict, Any, Tuple
from flask import jsonify
from werkzeug.exceptions import HTTPException

# Setup logging
logger = logging.getLogger(__name__)

# `key=<value>` as it appears in upstream URLs quoted by requests exceptions
_API_KEY_PARAM = re.compile(r"(?<![\w.-])key=[^&\s'\"#]+")

def redact_secrets(text: str) -> str:
    """Replace API key query parameter values in text."""
    return _API_KEY_PARAM.sub("key=[Filtered]", text)

def format_exception_redacted(error: BaseException) -> str:
    """Format an exception with its traceback, API keys redacted."""
    return redact_secrets("".join(traceback.format_exception(type(error), error, error.__traceback__)))

class APIError(Exception):
    """
    Custom API exception with the gateway's error envelope.

    Attributes:
        message: Human-readable error message returned to the caller
        status_code: HTTP status code
    """

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {'error': self.message}

class MissingParameterError(APIError):
    """Required query parameter absent (400)"""
    def __init__(self, message: str):
        super().__init__(message, 400)

class InvalidRangeError(APIError):
    """Bounded query parameter outside its allowed range (400)"""
    def __init__(self, message: str):
        super().__init__(message, 400)

class PolicyDeniedError(APIError):
    """Origin rejected by the CORS policy (403)"""
    def __init__(self, message: str = 'Not allowed by CORS'):
        super().__init__(message, 403)

class UpstreamError(APIError):
    """Outbound call to Google failed (500)"""
    def __init__(self, message: str):
        super().__init__(message, 500)

def handle_api_error(error: APIError) -> Tuple[Dict[str, Any], int]:
    """
    Handle custom API errors.

    Args:
        error: APIError instance

    Returns:
        Tuple of (error_dict, status_code)
    """
    if error.status_code >= 500:
        logger.error(f"API Error {error.status_code}: {error.message}")
    else:
        logger.warning(f"API Error {error.status_code}: {error.message}")
    return error.to_dict(), error.status_code

def handle_http_exception(error: HTTPException) -> Tuple[Dict[str, Any], int]:
    """
    Handle standard HTTP exceptions (unknown routes, wrong methods).

    Args:
        error: HTTPException instance

    Returns:
        Tuple of (error_dict, status_code)
    """
    logger.warning(f"HTTP Exception {error.code}: {error.name}")

    error_map = {
        400: 'Bad request',
        404: 'Not found',
        405: 'Method not allowed',
        500: 'Internal server error',
    }

    return {'error': error_map.get(error.code, error.name)}, error.code

def handle_generic_exception(error: Exception) -> Tuple[Dict[str, Any], int]:
    """
    Handle unexpected exceptions.

    The cause is logged with its traceback but never echoed to the caller.
    """
    logger.error(f"Unexpected error: {format_exception_redacted(error)}")
    return {'error': 'Internal server error'}, 500

def register_error_handlers(app):
    """
    Register error handlers with Flask application.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(APIError)
    def handle_api_error_route(error):
        response_data, status_code = handle_api_error(error)
        return jsonify(response_data), status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception_route(error):
        response_data, status_code = handle_http_exception(error)
        return jsonify(response_data), status_code

    @app.errorhandler(Exception)
    def handle_generic_exception_route(error):
        response_data, status_code = handle_generic_exception(error)
        return jsonify(response_data), status_code

# Context manager for handling upstream errors in routes
class upstream_errors:
    """
    Context manager converting any failure of an outbound call into an
    UpstreamError carrying the route's fixed message.

    Usage:
        with upstream_errors('Failed to fetch weather data'):
            data = client.current_conditions(latitude, longitude)
    """

    def __init__(self, message: str):
        self.message = message

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            return False

        if isinstance(exc_val, APIError):
            # Already carries a caller-facing message
            return False

        if not isinstance(exc_val, Exception):
            # KeyboardInterrupt, SystemExit and friends
            return False

        # Upstream URLs carry the API key; never log the raw exception
        logger.error(f"{self.message}: {format_exception_redacted(exc_val)}")
        raise UpstreamError(self.message) from exc_val

def require_params(args, names, message: str) -> Tuple[str, ...]:
    """
    Fetch required query parameters, raising MissingParameterError when any
    is absent or empty.

    Args:
        args: Request query arguments (werkzeug MultiDict)
        names: Parameter names to fetch
        message: Error message returned to the caller

    Returns:
        Tuple of parameter values in the order requested
    """
    values = tuple(args.get(name) for name in names)
    if not all(values):
        raise MissingParameterError(message)
    return values
