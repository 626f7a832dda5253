"""
Google Maps Platform client for the Maps Gateway.
Issues the outbound calls and attaches the API key.
"""

import logging
from typing import Dict, Any, Optional

import requests

# Setup logging
logger = logging.getLogger(__name__)

PLACES_AUTOCOMPLETE_URL = 'https://places.googleapis.com/v1/places:autocomplete'
CURRENT_CONDITIONS_URL = 'https://weather.googleapis.com/v1/currentConditions:lookup'
DAILY_FORECAST_URL = 'https://weather.googleapis.com/v1/forecast/days:lookup'
HOURLY_FORECAST_URL = 'https://weather.googleapis.com/v1/forecast/hours:lookup'
PLACE_DETAILS_URL = 'https://maps.googleapis.com/maps/api/place/details/json'

# Restricts autocomplete responses to the fields the gateway reshapes
AUTOCOMPLETE_FIELD_MASK = ','.join([
    'suggestions.placePrediction.text.text',
    'suggestions.placePrediction.placeId',
    'suggestions.placePrediction.types',
])

PLACE_DETAILS_FIELDS = 'geometry,name,formatted_address'

class GoogleMapsClient:
    """
    Stateless client for the Places, Weather and Place Details APIs.

    Every method issues exactly one HTTP call, raises
    `requests.HTTPError` on a non-2xx status and returns the decoded JSON body.
    """

    def __init__(self, api_key: Optional[str], timeout: Optional[float] = None):
        """
        Args:
            api_key: Google Maps Platform API key
            timeout: Per-call timeout in seconds; None waits indefinitely
        """
        self.api_key = api_key
        self.timeout = timeout

    def _get(self, url: str, params: Dict[str, Any]) -> Any:
        query = {'key': self.api_key}
        query.update(params)

        response = requests.get(url, params=query, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _post(self, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> Any:
        response = requests.post(url, json=payload, headers=headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def autocomplete(self, text: str, primary_type: Optional[str] = None) -> Dict[str, Any]:
        """
        Query Places Autocomplete (New).

        Args:
            text: Partial text typed by the user
            primary_type: Optional primary place type to restrict results to

        Returns:
            Raw upstream response with `suggestions[].placePrediction`
        """
        payload = {'input': text}
        if primary_type:
            payload['includedPrimaryTypes'] = [primary_type]

        headers = {
            'Content-Type': 'application/json',
            'X-Goog-Api-Key': self.api_key,
            'X-Goog-FieldMask': AUTOCOMPLETE_FIELD_MASK,
        }

        logger.debug("Calling Places autocomplete")
        return self._post(PLACES_AUTOCOMPLETE_URL, payload, headers)

    def current_conditions(self, latitude: str, longitude: str) -> Any:
        logger.debug("Calling Weather current conditions")
        return self._get(CURRENT_CONDITIONS_URL, {
            'location.latitude': latitude,
            'location.longitude': longitude,
        })

    def daily_forecast(self, latitude: str, longitude: str, days: int) -> Any:
        logger.debug(f"Calling Weather daily forecast for {days} day(s)")
        return self._get(DAILY_FORECAST_URL, {
            'location.latitude': latitude,
            'location.longitude': longitude,
            'days': days,
        })

    def hourly_forecast(self, latitude: str, longitude: str, hours: Any) -> Any:
        logger.debug("Calling Weather hourly forecast")
        return self._get(HOURLY_FORECAST_URL, {
            'location.latitude': latitude,
            'location.longitude': longitude,
            'hours': hours,
        })

    def place_details(self, place_id: str) -> Any:
        logger.debug("Calling Place Details")
        return self._get(PLACE_DETAILS_URL, {
            'place_id': place_id,
            'fields': PLACE_DETAILS_FIELDS,
        })
