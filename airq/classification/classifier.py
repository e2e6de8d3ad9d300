"""
Severity Band Classifier.

Maps a pollutant concentration to one of five severity bands:
  0 Good, 1 Fair, 2 Moderate, 3 Poor, 4 Very Poor

The value is truncated toward zero before comparison, so a reading of
threshold + 0.9 still falls in the lower band. Negative and NaN values
classify as band 0.
"""

import logging
import math
from dataclasses import dataclass
from typing import List

from airq.models import PollutantKind, PollutantReading, Report
from airq.rules.thresholds import BAND_COUNT, band_label, get_thresholds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifiedReading:
    """A pollutant reading tagged with its severity band."""
    reading: PollutantReading
    band: int

    @property
    def label(self) -> str:
        return band_label(self.band)


def classify(kind: PollutantKind, value: float) -> int:
    """
    Classify a pollutant value into a severity band.

    Args:
        kind: Pollutant whose threshold row applies.
        value: Concentration in µg/m³.

    Returns:
        Band index in [0, 4].
    """
    if math.isnan(value) or value < 0:
        logger.debug("Out-of-domain value %r for %s, classifying as band 0", value, kind.name)
        return 0
    if math.isinf(value):
        return BAND_COUNT - 1

    truncated = int(value)
    band = 0
    for threshold in get_thresholds(kind):
        if truncated <= threshold:
            break
        band += 1
    return band


def classify_report(report: Report) -> List[ClassifiedReading]:
    """Tag every reading of a report with its band, preserving canonical order."""
    tagged = [ClassifiedReading(reading=r, band=classify(r.kind, r.value)) for r in report.readings]
    logger.info(
        "Classification complete for %s: %s",
        report.point.resolved_name,
        ", ".join(f"{c.reading.kind.name}={c.band}" for c in tagged),
    )
    return tagged
