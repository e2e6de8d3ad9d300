"""
Error kinds surfaced by the air quality pipeline.

Components raise; only the orchestrator in airq.main catches and turns an
AirQualityError into a one-line diagnostic and exit status 1.
"""

from typing import Optional


class AirQualityError(Exception):
    """Base class. ``message`` is what the user sees."""
    default_message = "Unexpected failure."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredential(AirQualityError):
    default_message = "Please provide API_KEY"


class MissingCity(AirQualityError):
    default_message = "No city name provided."


class TransportError(AirQualityError):
    default_message = "Cannot reach the remote host, please try again."


class NonSuccessStatus(AirQualityError):
    """Upstream answered with a status other than 200. The body is kept for message extraction."""

    def __init__(self, status: int, body: bytes = b""):
        self.status = status
        self.body = body
        super().__init__(f"The remote host responded with the error status code {status}")


class RemoteError(AirQualityError):
    """Carries an upstream-supplied message."""
    default_message = "The remote service reported an error."


class NotFound(AirQualityError):
    default_message = "Cannot fetch geodata, please try again."


class Malformed(AirQualityError):
    default_message = "Cannot fetch pollution data, please try again."


class InternalSetup(AirQualityError):
    default_message = "Failed to initialize HTTP client."
