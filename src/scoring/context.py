"""
Condition context dataclasses for candidate scoring.

Defines the snapshot of environmental conditions that every scoring rule
reads. Built once per request by ContextResolver and passed unchanged to
the scorer for each candidate.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ConditionContext:
    """
    Canonical environmental snapshot. Built once per request.

    Temperatures are Fahrenheit, flow rate is cfs. Every field apart from
    ``location`` and ``coordinates`` is optional; rules that need a missing
    field simply contribute nothing.
    """
    location: str
    coordinates: Coordinates
    water_temperature_f: Optional[float] = None
    air_temperature_f: Optional[float] = None
    flow_rate: Optional[float] = None
    weather_description: Optional[str] = None   # "cloudy", "light rain", ...
    water_flow_qualitative: Optional[str] = None  # "slow", "moderate", "fast"
    weather_qualitative: Optional[str] = None     # "sunny", "overcast", ...
    water_clarity: Optional[str] = None           # "clear", "murky", ...
    season: Optional[str] = None
    time_of_day: Optional[str] = None
    observed_at: Optional[datetime] = None

    def numeric_field(self, name: str) -> Optional[float]:
        """Look up a numeric reading by its catalog field name."""
        attr = NUMERIC_FIELD_ALIASES.get(name)
        if attr is None:
            return None
        return getattr(self, attr)


# Catalog field name -> ConditionContext attribute.
NUMERIC_FIELD_ALIASES = {
    "flowRate": "flow_rate",
    "flow_rate": "flow_rate",
    "streamFlow": "flow_rate",
    "stream_flow": "flow_rate",
    "waterTemperature": "water_temperature_f",
    "water_temperature": "water_temperature_f",
    "airTemp": "air_temperature_f",
    "air_temp": "air_temperature_f",
    "airTemperature": "air_temperature_f",
    "air_temperature": "air_temperature_f",
}
