"""
OpenWeatherMap Geocoding Connector.

Resolves a free-form city name to the server's spelling plus coordinates.
The upstream service intermittently answers with an empty array for valid
cities, so lookups are retried with exponential backoff (1, 2, 4, 8 s).
"""

import json
import logging
from time import sleep
from typing import Any, Optional

from airq.errors import NonSuccessStatus, NotFound, RemoteError, TransportError
from airq.ingestion.http_client import HttpClient
from airq.ingestion.validator import extract_message, is_placeholder_point, validate_geocode_entry
from airq.models import Geopoint

logger = logging.getLogger(__name__)

GEOCODING_URL = "http://api.openweathermap.org/geo/1.0/direct"
MAX_ATTEMPTS = 5
BACKOFF_BASE = 1  # seconds


def backoff_delay(attempt: int) -> int:
    """Seconds to wait after the given (1-based) failed attempt."""
    return BACKOFF_BASE * 2 ** (attempt - 1)


def resolve(client: HttpClient, city: str, api_key: str) -> Geopoint:
    """
    Resolve a city name to a Geopoint.

    Args:
        client: Open HttpClient.
        city: City name as typed by the user.
        api_key: OpenWeatherMap key (never logged).

    Returns:
        Geopoint carrying the server's spelling of the name.

    Raises:
        NotFound: No usable entry after all attempts, or a (0, 0) placeholder.
        RemoteError: The last answer carried an upstream ``message``.
        TransportError: The last attempt failed at the transport level.
    """
    params = [("q", city), ("limit", "1"), ("appid", api_key)]
    last_payload: Any = None
    last_error: Optional[Exception] = None

    for attempt in range(1, MAX_ATTEMPTS + 1):
        if attempt > 1:
            delay = backoff_delay(attempt - 1)
            logger.info("Geocoding attempt %d/%d in %ds", attempt, MAX_ATTEMPTS, delay)
            sleep(delay)

        last_payload, last_error = None, None
        try:
            body = client.get(GEOCODING_URL, params).body
        except NonSuccessStatus as e:
            body, last_error = e.body, e
        except TransportError as e:
            last_error = e
            continue

        try:
            payload = json.loads(body)
        except ValueError:
            logger.warning("Geocoding returned malformed JSON (attempt %d)", attempt)
            continue
        last_payload = payload

        if last_error is not None:
            continue
        if not isinstance(payload, list) or not payload:
            logger.info("Geocoding returned no match (attempt %d)", attempt)
            continue
        entry = payload[0]
        if not validate_geocode_entry(entry).is_valid:
            continue

        if is_placeholder_point(entry["lat"], entry["lon"]):
            logger.warning("Geocoding returned placeholder coordinates for %s", entry["name"])
            raise NotFound()

        point = Geopoint(
            resolved_name=entry["name"],
            lat=float(entry["lat"]),
            lon=float(entry["lon"]),
        )
        logger.info("Resolved city %s at %.2f,%.2f", point.resolved_name, point.lat, point.lon)
        return point

    message = extract_message(last_payload)
    if message:
        raise RemoteError(message)
    if isinstance(last_error, TransportError):
        raise last_error
    raise NotFound()
