"""
airq: Command Line Entry Point

Usage:
    API_KEY=<key> airq <city>

Pipeline (single foreground thread plus the spinner thread):
  1. Validate API_KEY and the city argument
  2. Start the spinner on stdout
  3. Resolve the city (geocoding, with retry/backoff)
  4. Fetch the pollution report for the coordinates
  5. Stop the spinner, classify and render the report

Every exit path runs the same teardown: stop the spinner, restore the
cursor, close the HTTP client. Failures print one red line on stderr and
exit with status 1.
"""

import argparse
import logging
import sys
from typing import List, Mapping, Optional, TextIO

from airq.config import clip_city, load_settings, read_log_level
from airq.errors import AirQualityError, MissingCity
from airq.ingestion import geocoder, pollution_connector
from airq.ingestion.http_client import HttpClient
from airq.reports.renderer import render_report
from airq.terminal.ansi import RED, SHOW_CURSOR, colorize
from airq.terminal.spinner import Spinner, stream_lock

logger = logging.getLogger("airq.main")


class _ArgumentParser(argparse.ArgumentParser):
    """argparse that raises instead of exiting with status 2."""

    def error(self, message):
        raise MissingCity(f"Usage: {self.prog} <city>")


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="airq",
        description="Report the current air quality for a city.",
        add_help=False,
    )
    parser.add_argument("city", nargs="*", help="City name, e.g. paris")
    return parser


def parse_city(argv: List[str]) -> str:
    """Return the single positional city argument, clipped to 512 bytes."""
    args = _build_parser().parse_args(argv)
    if not args.city or not args.city[0]:
        raise MissingCity()
    if len(args.city) > 1:
        raise MissingCity("Expected exactly one city name.")
    return clip_city(args.city[0])


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [AIRQ] %(levelname)s %(name)s — %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )


def report_failure(message: str, stream: TextIO) -> None:
    stream.write(colorize(message, RED) + "\n")
    stream.flush()


def run(
    argv: List[str],
    environ: Optional[Mapping[str, str]] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """
    Run the pipeline once.

    Returns:
        Exit status: 0 after a rendered report, 1 on any failure.
    """
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr

    failure: Optional[str] = None
    spinner: Optional[Spinner] = None
    client: Optional[HttpClient] = None

    try:
        settings = load_settings(environ)
        city = parse_city(argv)

        client = HttpClient(timeout=settings.timeout)
        spinner = Spinner(stream=out)
        spinner.start()

        point = geocoder.resolve(client, city, settings.api_key)
        report = pollution_connector.fetch(client, point, settings.api_key)

        spinner.stop()
        with stream_lock(out):
            render_report(report, out)
    except AirQualityError as e:
        logger.debug("Pipeline failed: %s", type(e).__name__)
        failure = e.message
    except KeyboardInterrupt:
        failure = "Interrupted."
    finally:
        # ── Teardown: spinner first, HTTP client last ─────────────────────────
        if spinner is not None:
            spinner.stop()
        if failure is not None:
            with stream_lock(out):
                out.write(SHOW_CURSOR)
                out.flush()
        if client is not None:
            client.close()

    if failure is not None:
        report_failure(failure, err)
        return 1
    return 0


def main() -> None:
    configure_logging(read_log_level())
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
