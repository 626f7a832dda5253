#!/usr/bin/env python3
"""
Maps Gateway
Flask application proxying browser requests to Google Maps Platform
(Places autocomplete, Place Details, Weather) without exposing the API key.
"""

import logging
from typing import Dict, Any, Optional
from flask import Flask

from config.settings import Config, load_settings, validate_config, get_config_summary
from config.monitoring import init_monitoring
from gateway import gateway_bp, GoogleMapsClient
from security import init_security, OriginPolicy
from utils.error_handlers import register_error_handlers

logger = logging.getLogger(__name__)

def configure_logging(config: Dict[str, Any]) -> None:
    """Configure root logging from LOG_LEVEL and LOG_FORMAT."""
    logging.basicConfig(
        level=getattr(logging, config.get('LOG_LEVEL', 'INFO'), logging.INFO),
        format=config.get('LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
        handlers=[logging.StreamHandler()]
    )

def create_app(config: Optional[Dict[str, Any]] = None, policy: Optional[OriginPolicy] = None) -> Flask:
    """
    Application factory pattern for creating Flask app instances.

    Building the app never opens a socket.

    Args:
        config: Settings dictionary; loaded from the environment when omitted
        policy: Origin policy override; built from ALLOWED_ORIGIN_DOMAIN when omitted

    Returns:
        Configured Flask application instance
    """
    if config is None:
        config = load_settings()

    app = Flask(__name__)

    # Relay upstream bodies with their key order intact
    app.json.sort_keys = False

    # Load configuration
    load_config(app, config)

    # Initialize monitoring and error handling
    init_monitoring(app)
    register_error_handlers(app)

    # Origin policy and CORS
    init_security(app, policy)

    # Upstream client shared by all requests; it holds no mutable state
    app.extensions['maps_client'] = GoogleMapsClient(
        app.config['GOOGLE_MAPS_API_KEY'],
        timeout=app.config['UPSTREAM_TIMEOUT'],
    )

    # Register blueprints
    app.register_blueprint(gateway_bp, url_prefix='/api')

    logger.info("Maps Gateway initialized")
    return app

def load_config(app: Flask, config: Dict[str, Any]) -> None:
    """Load application configuration over the base defaults."""
    for key in dir(Config):
        if key.isupper():
            app.config[key] = getattr(Config, key)

    app.config.update(config)
    validate_config(app.config)

def main() -> None:
    """Load settings, build the app and serve it."""
    config = load_settings()
    configure_logging(config)

    app = create_app(config)

    port = app.config['PORT']
    logger.info(f"Starting Maps Gateway on port {port}")
    logger.info(f"Configuration: {get_config_summary(app.config)}")

    app.run(host='0.0.0.0', port=port, debug=app.config.get('DEBUG', False), threaded=True)

if __name__ == '__main__':
    main()
