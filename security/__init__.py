"""
Security module for the Maps Gateway.
Handles the origin policy, CORS headers and response security headers.
"""

from flask import Flask, request
from flask_cors import CORS

from .origin_policy import (
    OriginPolicy,
    OriginRule,
    AbsentOriginRule,
    PatternOriginRule,
    localhost_rule,
    subdomain_rule,
)

def init_security(app: Flask, policy: OriginPolicy = None) -> OriginPolicy:
    """
    Initialize security components for the Flask app.

    Origins are checked before any route runs, preflight requests included.
    Allowed origins get credentials-enabled CORS headers from Flask-CORS.

    Args:
        app: Flask application instance
        policy: Origin policy; built from ALLOWED_ORIGIN_DOMAIN when omitted

    Returns:
        The policy in effect
    """
    if policy is None:
        policy = OriginPolicy.default(app.config['ALLOWED_ORIGIN_DOMAIN'])

    app.extensions['origin_policy'] = policy

    @app.before_request
    def enforce_origin_policy():
        """Reject requests from origins outside the policy."""
        policy.check(request.headers.get('Origin'))

    CORS(app, origins=policy.cors_origins, supports_credentials=True)

    # Configure security headers
    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        return response

    return policy

__all__ = [
    'OriginPolicy',
    'OriginRule',
    'AbsentOriginRule',
    'PatternOriginRule',
    'localhost_rule',
    'subdomain_rule',
    'init_security',
]
