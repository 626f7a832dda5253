"""
Places proxy for the Maps Gateway.
Forwards autocomplete and place details lookups to Google Maps Platform.
"""

import logging
from typing import Dict, Any, List
from flask import Blueprint, request, jsonify, current_app

from utils.error_handlers import upstream_errors, require_params

# Setup logging
logger = logging.getLogger(__name__)

# Create blueprint
places_proxy_bp = Blueprint('places_proxy', __name__)

def flatten_suggestions(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Reshape Places Autocomplete (New) suggestions into the legacy
    prediction shape consumed by existing clients.

    Args:
        data: Upstream body with `suggestions[].placePrediction`

    Returns:
        List of `{description, place_id, types}` dictionaries
    """
    predictions = []
    # A body without `suggestions` is malformed and fails the request
    for suggestion in data['suggestions']:
        prediction = suggestion['placePrediction']
        item = {
            'description': prediction['text']['text'],
            'place_id': prediction['placeId'],
        }
        if 'types' in prediction:
            item['types'] = prediction['types']
        predictions.append(item)
    logger.debug(f"Reshaped {len(predictions)} autocomplete suggestion(s)")
    return predictions

@places_proxy_bp.route('/places', methods=['GET'])
def places_autocomplete():
    """
    Proxy place autocomplete.

    Query:
        input: Text typed by the user (required)
        types: Primary place type filter (optional)

    Returns:
        200: {"predictions": [{"description", "place_id", "types"}]}
        400: input missing
        500: upstream failure
    """
    (text,) = require_params(request.args, ['input'], 'Input query parameter is required')
    primary_type = request.args.get('types')

    client = current_app.extensions['maps_client']

    with upstream_errors('Failed to fetch places data'):
        data = client.autocomplete(text, primary_type)
        predictions = flatten_suggestions(data)

    return jsonify({'predictions': predictions}), 200

@places_proxy_bp.route('/place-details', methods=['GET'])
def place_details():
    """
    Proxy place details for a place identifier.

    Returns:
        200: Upstream body verbatim
        400: placeId missing
        500: upstream failure
    """
    (place_id,) = require_params(request.args, ['placeId'], 'placeId query parameter is required')

    client = current_app.extensions['maps_client']

    with upstream_errors('Failed to fetch place details'):
        data = client.place_details(place_id)

    return jsonify(data), 200
