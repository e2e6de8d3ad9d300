"""
OpenWeatherMap Air Pollution Connector.

Fetches the latest AQI and pollutant concentrations for a Geopoint.
Single attempt; any missing key or wrong JSON type raises Malformed.
"""

import json
import logging

from airq.errors import Malformed, NonSuccessStatus, RemoteError
from airq.ingestion.http_client import HttpClient
from airq.ingestion.validator import extract_message, validate_aqi, validate_components
from airq.models import Geopoint, PollutantKind, PollutantReading, Report

logger = logging.getLogger(__name__)

POLLUTION_URL = "http://api.openweathermap.org/data/2.5/air_pollution"
FETCH_FAILED_MESSAGE = "Failed to fetch pollution report"


def parse_report(point: Geopoint, payload) -> Report:
    """
    Build a Report from a decoded air_pollution payload.

    Raises:
        Malformed: Wrong shape, missing keys, wrong types or AQI outside [1, 5].
    """
    try:
        entry = payload["list"][0]
        aqi = entry["main"]["aqi"]
        components = entry["components"]
    except (KeyError, IndexError, TypeError) as e:
        logger.warning("Pollution response missing %s", e)
        raise Malformed()

    aqi_check = validate_aqi(aqi)
    if not aqi_check.is_valid:
        logger.warning("Pollution response rejected: %s", aqi_check)
        raise Malformed("Incorrect AQI index")

    keys = [kind.component_key for kind in PollutantKind]
    if not validate_components(components, keys).is_valid:
        raise Malformed()

    readings = tuple(
        PollutantReading(kind=kind, value=float(components[kind.component_key]))
        for kind in PollutantKind
    )
    return Report(point=point, aqi=aqi, readings=readings)


def fetch(client: HttpClient, point: Geopoint, api_key: str) -> Report:
    """
    Fetch the current pollution report for a Geopoint.

    Args:
        client: Open HttpClient.
        point: Resolved location.
        api_key: OpenWeatherMap key (never logged).

    Returns:
        Report with readings in canonical PollutantKind order.

    Raises:
        RemoteError: Non-200 answer; carries the upstream message when present.
        Malformed: 200 answer whose body is not the expected shape.
        TransportError: Network failure or oversized body.
    """
    params = [("lat", point.lat), ("lon", point.lon), ("appid", api_key)]

    try:
        resp = client.get(POLLUTION_URL, params)
    except NonSuccessStatus as e:
        try:
            message = extract_message(json.loads(e.body))
        except ValueError:
            message = None
        raise RemoteError(message or FETCH_FAILED_MESSAGE)

    try:
        payload = json.loads(resp.body)
    except ValueError:
        logger.warning("Pollution response is not valid JSON")
        raise Malformed()

    report = parse_report(point, payload)
    logger.info("Pollution report fetched for %s: AQI=%d", point.resolved_name, report.aqi)
    return report
