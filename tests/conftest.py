"""Shared test fixtures and configuration for the airq test suite."""

import json

import httpx
import pytest

from airq.ingestion.http_client import HttpClient
from airq.models import Geopoint

PARIS = Geopoint(resolved_name="Paris", lat=48.85, lon=2.35)

PARIS_GEOCODE = [{"name": "Paris", "lat": 48.85, "lon": 2.35, "country": "FR"}]

PARIS_COMPONENTS = {
    "co": 230, "no": 0.1, "no2": 12, "o3": 60,
    "so2": 2, "nh3": 1, "pm2_5": 8, "pm10": 15,
}


def pollution_payload(aqi=2, **overrides) -> dict:
    """Air pollution response body with optional component overrides."""
    components = dict(PARIS_COMPONENTS)
    components.update(overrides)
    return {
        "coord": {"lon": 2.35, "lat": 48.85},
        "list": [{"main": {"aqi": aqi}, "components": components, "dt": 1700000000}],
    }


class FakeUpstream:
    """
    Scripted OpenWeatherMap stand-in for httpx.MockTransport.

    Each endpoint pops (status, body) answers from its queue; the last answer
    repeats once the queue is down to one entry.
    """

    def __init__(self, geocode=None, pollution=None):
        self.geocode = list(geocode or [(200, PARIS_GEOCODE)])
        self.pollution = list(pollution or [(200, pollution_payload())])
        self.requests = []

    def _next(self, queue):
        status, body = queue[0] if len(queue) == 1 else queue.pop(0)
        content = body if isinstance(body, bytes) else json.dumps(body).encode()
        return httpx.Response(status, content=content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/geo/1.0/direct":
            return self._next(self.geocode)
        if request.url.path == "/data/2.5/air_pollution":
            return self._next(self.pollution)
        return httpx.Response(404, content=b'{"message":"unknown endpoint"}')

    def count(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == path)


@pytest.fixture()
def upstream():
    return FakeUpstream()


@pytest.fixture()
def make_client():
    """Factory for HttpClients backed by a FakeUpstream; all are closed after the test."""
    clients = []

    def _make(fake, **kwargs):
        client = HttpClient(transport=httpx.MockTransport(fake), **kwargs)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture()
def no_sleep(monkeypatch):
    """Record geocoder backoff delays instead of sleeping."""
    delays = []
    monkeypatch.setattr("airq.ingestion.geocoder.sleep", delays.append)
    return delays
