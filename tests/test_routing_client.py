"""Tests for the openrouteservice client."""

import json

import httpx
import pytest

from closure_routing import RecomputationFailure, buffer_segment, build_route_request
from closure_routing.config import Settings
from closure_routing.routing_client import OpenRouteServiceClient, parse_directions

ORIGIN = (-73.95, 40.70)
DESTINATION = (-73.93, 40.71)

DIRECTIONS = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "geometry": {"type": "LineString", "coordinates": [[-73.95, 40.70], [-73.94, 40.705], [-73.93, 40.71]]},
            "properties": {
                "segments": [{"distance": 2345.6, "duration": 321.0}],
                "summary": {"distance": 2345.6, "duration": 321.0},
            },
        }
    ],
}


def _client(handler, **settings):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenRouteServiceClient(Settings(ors_api_key="secret", **settings), http=http)


@pytest.mark.asyncio
class TestOpenRouteServiceClient:
    async def test_posts_payload_and_parses(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=DIRECTIONS)

        polygon = buffer_segment((-73.94, 40.705), (-73.945, 40.706))
        client = _client(handler)
        result = await client.route(build_route_request(ORIGIN, DESTINATION, [polygon]))

        assert seen["url"] == "https://api.openrouteservice.org/v2/directions/driving-car/geojson"
        assert seen["auth"] == "secret"
        assert seen["body"]["coordinates"] == [list(ORIGIN), list(DESTINATION)]
        assert seen["body"]["options"]["avoid_polygons"]["type"] == "MultiPolygon"
        assert result.path[0] == ORIGIN
        assert result.distance_m == 2345.6
        assert result.duration_s == 321.0

    async def test_unconstrained_body_has_no_options(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=DIRECTIONS)

        await _client(handler).route(build_route_request(ORIGIN, DESTINATION, []))
        assert "options" not in bodies[0]

    async def test_profile_and_base_url(self):
        urls = []

        def handler(request):
            urls.append(str(request.url))
            return httpx.Response(200, json=DIRECTIONS)

        client = _client(handler, ors_base_url="http://ors.local/", ors_profile="driving-hgv")
        await client.route(build_route_request(ORIGIN, DESTINATION, []))
        assert urls == ["http://ors.local/v2/directions/driving-hgv/geojson"]

    async def test_http_error_status(self):
        client = _client(lambda request: httpx.Response(403, json={"error": "quota"}))
        with pytest.raises(RecomputationFailure):
            await client.route(build_route_request(ORIGIN, DESTINATION, []))

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(RecomputationFailure):
            await _client(handler).route(build_route_request(ORIGIN, DESTINATION, []))

    async def test_non_json_body(self):
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(RecomputationFailure):
            await client.route(build_route_request(ORIGIN, DESTINATION, []))


class TestParseDirections:
    def test_falls_back_to_summary(self):
        data = json.loads(json.dumps(DIRECTIONS))
        del data["features"][0]["properties"]["segments"]
        assert parse_directions(data).distance_m == 2345.6

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"features": []},
            {"features": [{"geometry": {"coordinates": [[0, 0]]}, "properties": {"summary": {}}}]},
            {"features": [{"geometry": {"coordinates": "bad"}, "properties": {"summary": {}}}]},
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(RecomputationFailure):
            parse_directions(data)
