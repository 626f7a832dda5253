"""
Monitoring and observability configuration for the Maps Gateway.
Integrates with Sentry and adds request tracking headers.
"""

import time
import uuid
import logging
from typing import Dict, Any, Optional
from urllib.parse import parse_qsl, urlencode

import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from flask import Flask, request, g

from utils.error_handlers import redact_secrets

logger = logging.getLogger(__name__)

SENSITIVE_PARAMS = ('key',)
SENSITIVE_HEADERS = ('X-Goog-Api-Key', 'Authorization', 'Cookie')

def _scrub_query(query: str) -> str:
    pairs = [
        (name, '[Filtered]' if name in SENSITIVE_PARAMS else value)
        for name, value in parse_qsl(query, keep_blank_values=True)
    ]
    return urlencode(pairs)

def _scrub_strings(value: Any) -> Any:
    """Redact API keys from every string nested in a Sentry payload section."""
    if isinstance(value, str):
        return redact_secrets(value)
    if isinstance(value, dict):
        return {name: _scrub_strings(item) for name, item in value.items()}
    if isinstance(value, list):
        return [_scrub_strings(item) for item in value]
    return value

def filter_sentry_event(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Filter and sanitize Sentry events.

    Exception values, log records, messages and breadcrumbs can quote the
    upstream URL, which carries the API key in its query string.

    Args:
        event: Sentry event data
        hint: Sentry hint data

    Returns:
        Filtered event data or None to drop the event
    """
    request_data = event.get('request')

    # Don't send health check errors
    if request_data and request_data.get('url', '').endswith('/health'):
        return None

    for section in ('exception', 'logentry', 'message', 'breadcrumbs', 'threads', 'extra'):
        if section in event:
            event[section] = _scrub_strings(event[section])

    if not request_data:
        return event

    headers = request_data.get('headers')
    if isinstance(headers, dict):
        for name in list(headers):
            if name.lower() in (h.lower() for h in SENSITIVE_HEADERS):
                headers[name] = '[Filtered]'

    query = request_data.get('query_string')
    if isinstance(query, str) and query:
        request_data['query_string'] = _scrub_query(query)

    if isinstance(request_data.get('url'), str):
        request_data['url'] = redact_secrets(request_data['url'])

    return event

def init_sentry(app: Flask) -> bool:
    """
    Initialize Sentry error tracking when SENTRY_DSN is configured.

    Returns:
        True if Sentry was initialized
    """
    sentry_dsn = app.config.get('SENTRY_DSN')

    if not sentry_dsn:
        logger.info("SENTRY_DSN not configured, skipping Sentry initialization")
        return False

    sentry_sdk.init(
        dsn=sentry_dsn,
        integrations=[FlaskIntegration(transaction_style='endpoint')],
        traces_sample_rate=0.1,
        send_default_pii=False,
        # Frame locals hold the API key (client attributes, outbound params)
        include_local_variables=False,
        environment=app.config.get('ENVIRONMENT', 'development'),
        release=app.config.get('VERSION', 'unknown'),
        before_send=filter_sentry_event,
    )

    logger.info("Sentry error tracking initialized")
    return True

def setup_request_tracking(app: Flask) -> None:
    """Setup request/response logging and tracking headers."""

    @app.before_request
    def track_request_start():
        """Track request start time and id."""
        g.start_time = time.time()
        g.request_id = str(uuid.uuid4())[:8]

        if request.endpoint != 'health':
            # Path only; query strings carry user input
            logger.info(f"Request {g.request_id}: {request.method} {request.path}")

    @app.after_request
    def track_request_end(response):
        """Add tracking headers and log completion."""
        if hasattr(g, 'start_time'):
            response_time = (time.time() - g.start_time) * 1000
            response.headers['X-Response-Time'] = f"{response_time:.2f}ms"

            if request.endpoint != 'health':
                logger.info(
                    f"Response {g.request_id}: {response.status_code} for "
                    f"{request.method} {request.path} ({response_time:.2f}ms)"
                )

        if hasattr(g, 'request_id'):
            response.headers['X-Request-ID'] = g.request_id

        return response

def init_monitoring(app: Flask) -> None:
    """
    Initialize monitoring with Flask app.

    Args:
        app: Flask application instance
    """
    init_sentry(app)
    setup_request_tracking(app)

    @app.route('/health')
    def health():
        """Health check endpoint for load balancers."""
        return {
            'status': 'healthy',
            'service': 'maps-gateway',
            'version': app.config.get('VERSION', 'unknown'),
            'environment': app.config.get('ENVIRONMENT', 'unknown'),
        }
