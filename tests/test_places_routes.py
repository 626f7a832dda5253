"""
Tests for the places proxy routes: autocomplete and place details.

Upstream calls are patched at `gateway.upstream.requests`, so nothing leaves
the process.
"""

from __future__ import annotations

import requests

from gateway.places_proxy import flatten_suggestions
from gateway.upstream import (
    AUTOCOMPLETE_FIELD_MASK,
    PLACE_DETAILS_URL,
    PLACES_AUTOCOMPLETE_URL,
)

from .conftest import TEST_API_KEY

PARIS_SUGGESTIONS = {
    "suggestions": [
        {
            "placePrediction": {
                "text": {"text": "Paris"},
                "placeId": "p1",
                "types": ["locality"],
            }
        }
    ]
}


class TestPlacesAutocomplete:
    def test_missing_input_returns_400(self, client, mock_post):
        response = client.get("/api/places")

        assert response.status_code == 400
        assert response.get_json() == {"error": "Input query parameter is required"}
        mock_post.assert_not_called()

    def test_empty_input_returns_400(self, client, mock_post):
        response = client.get("/api/places?input=")

        assert response.status_code == 400
        assert response.get_json() == {"error": "Input query parameter is required"}
        mock_post.assert_not_called()

    def test_flattens_suggestions_into_predictions(self, client, mock_post, upstream_response):
        mock_post.return_value = upstream_response(PARIS_SUGGESTIONS)

        response = client.get("/api/places?input=Par")

        assert response.status_code == 200
        assert response.get_json() == {
            "predictions": [{"description": "Paris", "place_id": "p1", "types": ["locality"]}]
        }

    def test_outbound_call_shape_without_types(self, client, mock_post, upstream_response):
        mock_post.return_value = upstream_response(PARIS_SUGGESTIONS)

        client.get("/api/places?input=Par")

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args[0] == PLACES_AUTOCOMPLETE_URL
        assert kwargs["json"] == {"input": "Par"}
        assert kwargs["headers"] == {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": TEST_API_KEY,
            "X-Goog-FieldMask": AUTOCOMPLETE_FIELD_MASK,
        }

    def test_types_become_included_primary_types(self, client, mock_post, upstream_response):
        mock_post.return_value = upstream_response(PARIS_SUGGESTIONS)

        client.get("/api/places?input=Par&types=locality")

        _, kwargs = mock_post.call_args
        assert kwargs["json"] == {"input": "Par", "includedPrimaryTypes": ["locality"]}

    def test_body_without_suggestions_returns_500(self, client, mock_post, upstream_response):
        mock_post.return_value = upstream_response({})

        response = client.get("/api/places?input=zzzzzz")

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to fetch places data"}

    def test_empty_suggestions_gives_empty_predictions(self, client, mock_post, upstream_response):
        mock_post.return_value = upstream_response({"suggestions": []})

        response = client.get("/api/places?input=zzzzzz")

        assert response.status_code == 200
        assert response.get_json() == {"predictions": []}

    def test_prediction_keys_keep_their_order(self, client, mock_post, upstream_response):
        mock_post.return_value = upstream_response(PARIS_SUGGESTIONS)

        response = client.get("/api/places?input=Par")

        prediction = response.get_json()["predictions"][0]
        assert list(prediction) == ["description", "place_id", "types"]

    def test_network_error_returns_500(self, client, mock_post):
        mock_post.side_effect = requests.ConnectionError("connection refused")

        response = client.get("/api/places?input=Par")

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to fetch places data"}

    def test_non_2xx_returns_500(self, client, mock_post, upstream_response):
        mock_post.return_value = upstream_response({"error": {"message": "API key invalid"}}, 403)

        response = client.get("/api/places?input=Par")

        assert response.status_code == 500
        body = response.get_json()
        assert body == {"error": "Failed to fetch places data"}
        assert "API key" not in response.get_data(as_text=True)

    def test_malformed_body_returns_500(self, client, mock_post, upstream_response):
        mock_post.return_value = upstream_response({"suggestions": [{"queryPrediction": {}}]})

        response = client.get("/api/places?input=Par")

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to fetch places data"}

    def test_repeated_requests_are_identical(self, client, mock_post, upstream_response):
        mock_post.side_effect = lambda *a, **kw: upstream_response(PARIS_SUGGESTIONS)

        first = client.get("/api/places?input=Par")
        second = client.get("/api/places?input=Par")

        assert first.status_code == second.status_code == 200
        assert first.get_data() == second.get_data()


class TestFlattenSuggestions:
    def test_preserves_order(self):
        data = {
            "suggestions": [
                {"placePrediction": {"text": {"text": "Paris"}, "placeId": "p1", "types": ["locality"]}},
                {"placePrediction": {"text": {"text": "Parma"}, "placeId": "p2", "types": ["locality", "political"]}},
            ]
        }

        assert [p["place_id"] for p in flatten_suggestions(data)] == ["p1", "p2"]

    def test_missing_types_is_omitted(self):
        data = {"suggestions": [{"placePrediction": {"text": {"text": "Paris"}, "placeId": "p1"}}]}

        assert flatten_suggestions(data) == [{"description": "Paris", "place_id": "p1"}]

    def test_null_types_is_kept(self):
        data = {"suggestions": [{"placePrediction": {"text": {"text": "Paris"}, "placeId": "p1", "types": None}}]}

        assert flatten_suggestions(data) == [{"description": "Paris", "place_id": "p1", "types": None}]


class TestPlaceDetails:
    def test_missing_place_id_returns_400(self, client, mock_get):
        response = client.get("/api/place-details")

        assert response.status_code == 400
        assert response.get_json() == {"error": "placeId query parameter is required"}
        mock_get.assert_not_called()

    def test_relays_upstream_body(self, client, mock_get, upstream_response):
        payload = {
            "result": {
                "name": "Eiffel Tower",
                "formatted_address": "Champ de Mars, Paris",
                "geometry": {"location": {"lat": 48.858, "lng": 2.294}},
            },
            "status": "OK",
        }
        mock_get.return_value = upstream_response(payload)

        response = client.get("/api/place-details?placeId=abc123")

        assert response.status_code == 200
        assert response.get_json() == payload

    def test_outbound_call_shape(self, client, mock_get, upstream_response):
        mock_get.return_value = upstream_response({"status": "OK"})

        client.get("/api/place-details?placeId=abc123")

        args, kwargs = mock_get.call_args
        assert args[0] == PLACE_DETAILS_URL
        assert kwargs["params"] == {
            "key": TEST_API_KEY,
            "place_id": "abc123",
            "fields": "geometry,name,formatted_address",
        }

    def test_upstream_failure_returns_500(self, client, mock_get):
        mock_get.side_effect = requests.Timeout("timed out")

        response = client.get("/api/place-details?placeId=abc123")

        assert response.status_code == 500
        assert response.get_json() == {"error": "Failed to fetch place details"}

    def test_upstream_key_order_is_preserved(self, client, mock_get, upstream_response):
        mock_get.return_value = upstream_response({"status": "OK", "result": {"name": "Louvre", "geometry": {}}})

        response = client.get("/api/place-details?placeId=abc123")

        body = response.get_json()
        assert list(body) == ["status", "result"]
        assert list(body["result"]) == ["name", "geometry"]
