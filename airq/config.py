"""
Runtime configuration.

Values come from a local .env file (via python-dotenv) and the process
environment. The API key is sensitive: it is never logged or echoed.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from airq.errors import InternalSetup, MissingCredential

load_dotenv()

logger = logging.getLogger(__name__)

MAX_PARAM_BYTES = 512
DEFAULT_TIMEOUT = 10.0  # seconds
DEFAULT_LOG_LEVEL = "ERROR"


@dataclass(frozen=True)
class Settings:
    api_key: str = field(repr=False)
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def _read_timeout(raw: Optional[str]) -> float:
    if raw is None or raw.strip() == "":
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise InternalSetup(f"AIRQ_TIMEOUT_SECONDS must be a number, got {raw!r}")
    if value <= 0:
        raise InternalSetup("AIRQ_TIMEOUT_SECONDS must be greater than zero")
    return value


def read_log_level(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the configured log level name, falling back to ERROR for unknown names."""
    env = os.environ if environ is None else environ
    level = env.get("AIRQ_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return DEFAULT_LOG_LEVEL
    return level


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    Raises:
        MissingCredential: API_KEY is absent, empty or longer than 512 bytes.
        InternalSetup: AIRQ_TIMEOUT_SECONDS is not a positive number.
    """
    env = os.environ if environ is None else environ

    api_key = env.get("API_KEY", "")
    if not api_key:
        raise MissingCredential()
    if len(api_key.encode("utf-8")) > MAX_PARAM_BYTES:
        raise MissingCredential(f"API_KEY must not exceed {MAX_PARAM_BYTES} bytes")

    settings = Settings(
        api_key=api_key,
        timeout=_read_timeout(env.get("AIRQ_TIMEOUT_SECONDS")),
        log_level=read_log_level(env),
    )
    logger.debug("Settings loaded: timeout=%.1fs log_level=%s", settings.timeout, settings.log_level)
    return settings


def clip_city(city: str) -> str:
    """Clip a city name to 512 UTF-8 bytes without splitting a character."""
    raw = city.encode("utf-8")
    if len(raw) <= MAX_PARAM_BYTES:
        return city
    logger.warning("City name longer than %d bytes, truncating", MAX_PARAM_BYTES)
    return raw[:MAX_PARAM_BYTES].decode("utf-8", errors="ignore")
