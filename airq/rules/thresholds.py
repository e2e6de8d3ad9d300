"""
Pollutant Threshold Table.

Band boundaries (µg/m³) for each pollutant, the five band labels and their
terminal colors. Rows follow PollutantKind order. Stateless, no side effects.
"""

import logging
from typing import Dict, Tuple

from airq.models import PollutantKind
from airq.terminal.ansi import CYAN, GREEN, MAGENTA, RED, YELLOW

logger = logging.getLogger(__name__)

BAND_COUNT = 5

# Upper bound (inclusive) of bands 0..3; anything above the last is band 4.
THRESHOLD_TABLE: Tuple[Tuple[int, int, int, int], ...] = (
    (4400, 9400, 12400, 15400),  # CO
    (20,   40,   60,    80),     # NO
    (40,   70,   150,   200),    # NO₂
    (60,   100,  140,   180),    # O₃
    (20,   80,   250,   350),    # SO₂
    (40,   80,   120,   160),    # NH₃
    (10,   25,   50,    75),     # PM2.5
    (20,   50,   100,   200),    # PM10
)

BAND_LABELS: Tuple[str, ...] = ("Good", "Fair", "Moderate", "Poor", "Very Poor")
BAND_COLORS: Tuple[str, ...] = (CYAN, GREEN, YELLOW, RED, MAGENTA)

POLLUTANT_LABELS: Dict[PollutantKind, str] = {
    PollutantKind.CO:    "Carbon monoxide (CO)",
    PollutantKind.NO:    "Nitrogen monoxide (NO)",
    PollutantKind.NO2:   "Nitrogen dioxide (NO₂)",
    PollutantKind.O3:    "Ozone (O₃)",
    PollutantKind.SO2:   "Sulphur dioxide (SO₂)",
    PollutantKind.NH3:   "Ammonia (NH₃)",
    PollutantKind.PM2_5: "Particulate matter 2.5µm",
    PollutantKind.PM10:  "Particulate matter 10µm",
}


def get_thresholds(kind: PollutantKind) -> Tuple[int, int, int, int]:
    """Return the four ascending band boundaries for a pollutant."""
    return THRESHOLD_TABLE[int(kind)]


def band_label(band: int) -> str:
    """Label for a severity band (0..4) or AQI minus one."""
    if not 0 <= band < BAND_COUNT:
        raise ValueError(f"Severity band must be in [0, {BAND_COUNT - 1}], got {band}")
    return BAND_LABELS[band]


def band_color(band: int) -> str:
    """ANSI color escape for a severity band (0..4)."""
    if not 0 <= band < BAND_COUNT:
        raise ValueError(f"Severity band must be in [0, {BAND_COUNT - 1}], got {band}")
    return BAND_COLORS[band]
