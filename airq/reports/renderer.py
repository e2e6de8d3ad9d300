"""
Report Renderer.

Writes the colorized air quality report to a terminal stream:
header with the overall AQI dot, the AQI line, one row per pollutant in
canonical order, and the band legend. Numbers use two fractional digits
with a '.' separator regardless of locale.
"""

import logging
import sys
from typing import List, Optional, TextIO

from airq.classification.classifier import ClassifiedReading, classify_report
from airq.models import Report
from airq.rules.thresholds import BAND_COUNT, POLLUTANT_LABELS, band_color, band_label
from airq.terminal.ansi import DOT, colorize

logger = logging.getLogger(__name__)

LABEL_WIDTH = max(len(label) for label in POLLUTANT_LABELS.values())


def color_dot(band: int) -> str:
    return colorize(DOT, band_color(band))


def format_row(classified: ClassifiedReading) -> str:
    reading = classified.reading
    label = POLLUTANT_LABELS[reading.kind].ljust(LABEL_WIDTH)
    return f"\t{label}\t{color_dot(classified.band)} {reading.value:.2f} {reading.unit}"


def format_legend() -> str:
    return "\t" + "  ".join(f"{color_dot(band)} {band_label(band)}" for band in range(BAND_COUNT))


def format_report(report: Report, classified: Optional[List[ClassifiedReading]] = None) -> str:
    """Return the full report text, ready to be written to a terminal."""
    if classified is None:
        classified = classify_report(report)
    band = report.aqi - 1

    lines = [
        f"Air quality in {report.point.resolved_name} {color_dot(band)}",
        "",
        f"\tAQI {report.aqi} ({band_label(band)})",
        "",
    ]
    lines.extend(format_row(c) for c in classified)
    lines.extend(["", "", format_legend(), "", ""])
    return "\n".join(lines)


def render_report(report: Report, stream: Optional[TextIO] = None) -> None:
    """Write the report to ``stream`` (stdout by default)."""
    out = stream if stream is not None else sys.stdout
    out.write(format_report(report))
    out.flush()
    logger.debug("Report rendered for %s", report.point.resolved_name)
