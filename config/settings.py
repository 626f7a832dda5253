"""
Environment configuration for the Maps Gateway.
Handles .env loading, environment selection and settings validation.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent

TESTING_ENVIRONMENTS = ('test', 'testing')

class Config:
    """Base configuration class."""

    ENVIRONMENT = 'development'
    DEBUG = False
    TESTING = False

    # Google Maps Platform
    GOOGLE_MAPS_API_KEY = None
    UPSTREAM_TIMEOUT = None  # seconds; None leaves requests' default (no timeout)

    # Server
    PORT = 3000

    # CORS: subdomains of this domain may call the gateway
    ALLOWED_ORIGIN_DOMAIN = 'afi.dev'

    # Logging
    LOG_LEVEL = 'INFO'
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    # Monitoring
    SENTRY_DSN = None

    VERSION = '1.0.0'

    @classmethod
    def from_env(cls) -> Dict[str, Any]:
        """
        Build a settings dictionary from class defaults overridden by the
        process environment.

        Returns:
            Dictionary of upper-case settings
        """
        settings = {key: getattr(cls, key) for key in dir(cls) if key.isupper()}

        # Werkzeug debugger and reloader only on explicit request
        settings['DEBUG'] = os.environ.get('DEBUG', 'false').lower() == 'true'
        settings['GOOGLE_MAPS_API_KEY'] = os.environ.get('GOOGLE_MAPS_API_KEY', cls.GOOGLE_MAPS_API_KEY)
        settings['PORT'] = int(os.environ.get('PORT') or cls.PORT)
        settings['ALLOWED_ORIGIN_DOMAIN'] = os.environ.get('ALLOWED_ORIGIN_DOMAIN', cls.ALLOWED_ORIGIN_DOMAIN)
        settings['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', cls.LOG_LEVEL).upper()
        settings['SENTRY_DSN'] = os.environ.get('SENTRY_DSN') or cls.SENTRY_DSN
        settings['VERSION'] = os.environ.get('APP_VERSION', cls.VERSION)

        timeout = os.environ.get('UPSTREAM_TIMEOUT')
        if timeout:
            settings['UPSTREAM_TIMEOUT'] = float(timeout)

        return settings

class DevelopmentConfig(Config):
    """Development configuration."""

    LOG_LEVEL = 'DEBUG'

class TestingConfig(Config):
    """Testing configuration."""

    ENVIRONMENT = 'testing'
    TESTING = True

    # Never track errors from test runs
    SENTRY_DSN = None

    @classmethod
    def from_env(cls) -> Dict[str, Any]:
        settings = super().from_env()
        settings['SENTRY_DSN'] = None
        return settings

class ProductionConfig(Config):
    """Production configuration."""

    ENVIRONMENT = 'production'
    DEBUG = False

# Configuration mapping
config_mapping = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}

def resolve_environment(environment: Optional[str] = None) -> str:
    """
    Normalise the environment selector.

    `ENVIRONMENT` wins over `FLASK_ENV`; `test` is accepted as an alias of
    `testing`.
    """
    if environment is None:
        environment = os.environ.get('ENVIRONMENT') or os.environ.get('FLASK_ENV') or 'development'

    environment = environment.strip().lower()
    if environment in TESTING_ENVIRONMENTS:
        return 'testing'
    return environment

def env_file_for(environment: str) -> Path:
    """Return the dotenv file holding settings for an environment."""
    name = '.env.test' if resolve_environment(environment) == 'testing' else '.env'
    return PROJECT_ROOT / name

def load_environment_file(environment: str) -> bool:
    """
    Load the environment's dotenv file into the process environment.

    Variables already set in the environment take precedence.

    Returns:
        True if a file was found and loaded
    """
    env_file = env_file_for(environment)
    if not env_file.exists():
        logger.debug(f"No environment file at {env_file}")
        return False

    loaded = load_dotenv(env_file, override=False)
    logger.debug(f"Loaded environment file {env_file.name}")
    return loaded

def get_config(environment: Optional[str] = None) -> type:
    """
    Get configuration class based on environment.

    Args:
        environment: Environment name

    Returns:
        Configuration class
    """
    return config_mapping.get(resolve_environment(environment), DevelopmentConfig)

def load_settings(environment: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the dotenv file for the environment and build the settings value
    handed to `create_app`.

    Args:
        environment: Environment name; read from the process environment when omitted

    Returns:
        Settings dictionary
    """
    environment = resolve_environment(environment)
    load_environment_file(environment)
    return get_config(environment).from_env()

def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate required configuration.

    Raises:
        ValueError: if a required setting is missing
    """
    if config.get('TESTING'):
        return

    required_configs = ['GOOGLE_MAPS_API_KEY']
    missing_configs = [key for key in required_configs if not config.get(key)]

    if missing_configs:
        raise ValueError(f"Missing required configuration: {', '.join(missing_configs)}")

def get_config_summary(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Get configuration summary (without sensitive values).

    Returns:
        Dictionary with configuration summary
    """
    return {
        'environment': config.get('ENVIRONMENT'),
        'debug': bool(config.get('DEBUG')),
        'port': config.get('PORT'),
        'allowed_origin_domain': config.get('ALLOWED_ORIGIN_DOMAIN'),
        'api_key_configured': bool(config.get('GOOGLE_MAPS_API_KEY')),
        'upstream_timeout': config.get('UPSTREAM_TIMEOUT'),
        'sentry_configured': bool(config.get('SENTRY_DSN')),
    }
