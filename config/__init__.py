"""
Configuration package for the Maps Gateway.
"""

from .settings import (
    Config,
    DevelopmentConfig,
    TestingConfig,
    ProductionConfig,
    get_config,
    get_config_summary,
    load_settings,
    resolve_environment,
    validate_config,
)

__all__ = [
    'Config',
    'DevelopmentConfig',
    'TestingConfig',
    'ProductionConfig',
    'get_config',
    'get_config_summary',
    'load_settings',
    'resolve_environment',
    'validate_config',
]
