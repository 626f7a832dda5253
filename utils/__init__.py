"""
Shared utilities for the Maps Gateway.
"""

from .error_handlers import (
    APIError,
    MissingParameterError,
    InvalidRangeError,
    PolicyDeniedError,
    UpstreamError,
    register_error_handlers,
    upstream_errors,
    require_params,
)

__all__ = [
    'APIError',
    'MissingParameterError',
    'InvalidRangeError',
    'PolicyDeniedError',
    'UpstreamError',
    'register_error_handlers',
    'upstream_errors',
    'require_params',
]
