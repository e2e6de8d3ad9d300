"""
HTTP Client Wrapper.

Issues GET requests with an encoded query string and returns the fully
buffered body and status. Transport failures (timeouts, connection errors,
oversized bodies) raise TransportError; any status other than 200 raises
NonSuccessStatus with the body preserved.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union
from urllib.parse import quote

import httpx

from airq.errors import InternalSetup, NonSuccessStatus, TransportError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10  # seconds
MAX_BODY_BYTES = 512 * 1024

QueryValue = Union[str, float]
QueryParams = Sequence[Tuple[str, QueryValue]]


@dataclass(frozen=True)
class HttpResponse:
    body: bytes
    status: int


def format_query_value(value: QueryValue) -> str:
    """Text is passed through; numbers get exactly two fractional digits with a '.' separator."""
    if isinstance(value, bool):
        raise TypeError("Boolean query values are not supported")
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return f"{float(value):.2f}"
    raise TypeError(f"Unsupported query value type: {type(value).__name__}")


def encode_query(params: QueryParams) -> str:
    """Percent-encode each (key, value) pair and join them with '&', keeping their order."""
    return "&".join(
        f"{quote(key, safe='')}={quote(format_query_value(value), safe='')}"
        for key, value in params
    )


def build_url(base_url: str, params: QueryParams) -> str:
    query = encode_query(params)
    return f"{base_url}?{query}" if query else base_url


class HttpClient:
    """
    Thin wrapper around a single httpx.Client.

    Use as a context manager, or call close() when done.
    """

    def __init__(
        self,
        timeout: float = REQUEST_TIMEOUT,
        max_body_bytes: int = MAX_BODY_BYTES,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.max_body_bytes = max_body_bytes
        try:
            self._client = httpx.Client(timeout=timeout, transport=transport)
        except Exception as exc:
            logger.error("HTTP client initialisation failed: %s", exc)
            raise InternalSetup() from exc

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _read_body(self, resp: httpx.Response, base_url: str) -> bytes:
        body = bytearray()
        for chunk in resp.iter_bytes():
            body.extend(chunk)
            if len(body) > self.max_body_bytes:
                logger.warning(
                    "Response from %s exceeds %d bytes, aborting", base_url, self.max_body_bytes
                )
                raise TransportError(
                    f"The remote host sent more than {self.max_body_bytes // 1024} KiB."
                )
        return bytes(body)

    def get(self, base_url: str, params: QueryParams = ()) -> HttpResponse:
        """
        GET base_url with the encoded query and return the buffered response.

        Args:
            base_url: Absolute URL without a query string.
            params: Ordered (key, value) pairs; values are text or numbers.

        Returns:
            HttpResponse with status 200.

        Raises:
            TransportError: Network failure, timeout, or body above the size limit.
            NonSuccessStatus: Any status other than 200.
        """
        url = build_url(base_url, params)
        # The query carries the API key; only the base URL is ever logged.
        logger.debug("GET %s", base_url)

        try:
            with self._client.stream("GET", url) as resp:
                status = resp.status_code
                body = self._read_body(resp, base_url)
        except httpx.TimeoutException:
            logger.warning("Request to %s timed out", base_url)
            raise TransportError("The remote host did not answer in time, please try again.")
        except httpx.RequestError as e:
            logger.warning("Network error for %s: %s", base_url, type(e).__name__)
            raise TransportError()

        if status != 200:
            logger.warning("HTTP error %s from %s", status, base_url)
            raise NonSuccessStatus(status, body)

        logger.debug("Received %d bytes from %s", len(body), base_url)
        return HttpResponse(body=body, status=status)
