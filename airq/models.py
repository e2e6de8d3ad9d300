"""
Typed containers shared by the ingestion, classification and reporting layers.

A Report is built by the pollution connector, handed to the renderer once and
then discarded. All containers are frozen.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

UNIT = "µg/m³"


class PollutantKind(IntEnum):
    """Pollutants in canonical report order. The value indexes the threshold table."""
    CO = 0
    NO = 1
    NO2 = 2
    O3 = 3
    SO2 = 4
    NH3 = 5
    PM2_5 = 6
    PM10 = 7

    @property
    def component_key(self) -> str:
        """Key of this pollutant in the upstream ``components`` object."""
        return self.name.lower()


@dataclass(frozen=True)
class Geopoint:
    """A resolved city: the server's spelling plus coordinates."""
    resolved_name: str
    lat: float
    lon: float


@dataclass(frozen=True)
class PollutantReading:
    """A single pollutant concentration."""
    kind: PollutantKind
    value: float
    unit: str = UNIT


@dataclass(frozen=True)
class Report:
    """Latest air quality at a Geopoint: overall AQI plus one reading per PollutantKind."""
    point: Geopoint
    aqi: int
    readings: Tuple[PollutantReading, ...]

    def __post_init__(self):
        kinds = tuple(r.kind for r in self.readings)
        if kinds != tuple(PollutantKind):
            raise ValueError(
                f"Report readings must follow canonical pollutant order, got {kinds}"
            )
