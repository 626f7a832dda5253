"""
Weather proxy for the Maps Gateway.
Forwards current conditions and forecast lookups to the Google Weather API.
"""

import re
import logging
from typing import Optional, Tuple
from flask import Blueprint, request, jsonify, current_app

from utils.error_handlers import InvalidRangeError, upstream_errors, require_params

# Setup logging
logger = logging.getLogger(__name__)

# Create blueprint
weather_proxy_bp = Blueprint('weather_proxy', __name__)

COORDINATES_REQUIRED = 'Latitude and longitude are required'

MIN_FORECAST_DAYS = 1
MAX_FORECAST_DAYS = 7
DEFAULT_FORECAST_DAYS = 1
DEFAULT_FORECAST_HOURS = 24

_LEADING_INT = re.compile(r'\s*([+-]?[0-9]+)')

def parse_leading_int(value: Optional[str]) -> Optional[int]:
    """
    Parse the integer at the start of a string, ignoring leading whitespace
    and anything after the digits ("3", " 3", "3days" all give 3).

    Returns:
        The integer, or None when the string does not start with one
    """
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    if match is None:
        return None
    return int(match.group(1))

def get_coordinates() -> Tuple[str, str]:
    """Fetch the required latitude/longitude query parameters."""
    return require_params(request.args, ['latitude', 'longitude'], COORDINATES_REQUIRED)

def resolve_forecast_days(value: Optional[str]) -> int:
    """
    Resolve the requested number of forecast days.

    Unparsable or absent values fall back to the default; parsed values
    outside [1, 7] are rejected.

    Raises:
        InvalidRangeError: if the value is outside the allowed range
    """
    days = parse_leading_int(value)
    if days is None:
        days = DEFAULT_FORECAST_DAYS

    if days < MIN_FORECAST_DAYS or days > MAX_FORECAST_DAYS:
        raise InvalidRangeError(
            f'Days parameter must be between {MIN_FORECAST_DAYS} and {MAX_FORECAST_DAYS}'
        )
    return days

@weather_proxy_bp.route('/current-conditions', methods=['GET'])
def current_conditions():
    """
    Proxy current weather conditions for a location.

    Returns:
        200: Upstream body verbatim
        400: coordinates missing
        500: upstream failure
    """
    latitude, longitude = get_coordinates()
    client = current_app.extensions['maps_client']

    with upstream_errors('Failed to fetch weather data'):
        data = client.current_conditions(latitude, longitude)

    return jsonify(data), 200

@weather_proxy_bp.route('/forecast', methods=['GET'])
def forecast():
    """
    Proxy the daily forecast for a location.

    Query:
        latitude, longitude: required
        days: 1-7, defaults to 1

    Returns:
        200: Upstream body verbatim
        400: coordinates missing or days out of range
        500: upstream failure
    """
    latitude, longitude = get_coordinates()
    days = resolve_forecast_days(request.args.get('days'))
    logger.debug(f"Forecast requested for {days} day(s)")
    client = current_app.extensions['maps_client']

    with upstream_errors('Failed to fetch forecast data'):
        data = client.daily_forecast(latitude, longitude, days)

    return jsonify(data), 200

@weather_proxy_bp.route('/hourly-forecast', methods=['GET'])
def hourly_forecast():
    """
    Proxy the hourly forecast for a location.

    `hours` is forwarded as given; Google validates it.
    """
    latitude, longitude = get_coordinates()
    hours = request.args.get('hours') or DEFAULT_FORECAST_HOURS
    client = current_app.extensions['maps_client']

    with upstream_errors('Failed to fetch hourly forecast data'):
        data = client.hourly_forecast(latitude, longitude, hours)

    return jsonify(data), 200
