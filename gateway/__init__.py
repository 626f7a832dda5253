"""
Gateway module for the Maps Gateway.
Handles request proxying to Google Maps Platform.
"""

from flask import Blueprint

from .places_proxy import places_proxy_bp
from .weather_proxy import weather_proxy_bp
from .upstream import GoogleMapsClient

# Create combined blueprint for external registration
gateway_bp = Blueprint('gateway', __name__)

# Register sub-blueprints
gateway_bp.register_blueprint(places_proxy_bp)
gateway_bp.register_blueprint(weather_proxy_bp)

__all__ = ['gateway_bp', 'GoogleMapsClient']
