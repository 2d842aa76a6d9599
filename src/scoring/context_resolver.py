"""
Context Resolver: builds ConditionContext from a partial snapshot.

Accepted input shapes (any mix of them):

**Flat**
    ``{"location": "Rv", "latitude": 1, "longitude": 1, "waterTemperatureF": 55}``

**Nested readings**
    ``{"water_data": {"waterTemperature": 55, "flowRate": 60},
    "weather_data": {"temperature": 70, "weather_description": "cloudy"}}``

Both camelCase and snake_case keys are read. Numeric readings are passed
through unchanged (no unit conversion happens here). The only hard
requirement is a location plus coordinates; everything else is optional.

When ``observedAt`` is supplied and ``season`` / ``timeOfDay`` are not,
they are derived from the timestamp.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from scoring.context import ConditionContext, Coordinates
from scoring.errors import InsufficientContextError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextResolution:
    context: Optional[ConditionContext]
    can_perform: bool
    error: Optional[str] = None


class ContextResolver:
    """
    Validates and shapes a raw environmental snapshot.

    Stateless; safe to share across threads / reuse across requests.
    """

    def resolve(
        self, partial: Union[Mapping[str, Any], ConditionContext, None],
    ) -> ContextResolution:
        """
        Build a :class:`ContextResolution`.

        Never raises: a missing location is reported through
        ``can_perform=False`` with a guidance message.
        """
        try:
            context = self.build(partial)
        except InsufficientContextError as exc:
            return ContextResolution(context=None, can_perform=False, error=str(exc))
        return ContextResolution(context=context, can_perform=True)

    def build(
        self, partial: Union[Mapping[str, Any], ConditionContext, None],
    ) -> ConditionContext:
        """Like :meth:`resolve` but raises ``InsufficientContextError``."""
        if isinstance(partial, ConditionContext):
            if not partial.location or partial.coordinates is None:
                raise InsufficientContextError()
            return partial

        data = dict(partial or {})
        water = _as_mapping(_pick(data, "water_data", "waterData"))
        weather = _as_mapping(_pick(data, "weather_data", "weatherData"))

        location = _pick(data, "location", "location_name", "locationName")
        coordinates = _extract_coordinates(data)
        if not location or coordinates is None:
            raise InsufficientContextError()

        observed_at = _parse_timestamp(_pick(data, "observedAt", "observed_at", "date"))
        season = _pick(data, "season", "time_of_year", "timeOfYear")
        time_of_day = _pick(data, "timeOfDay", "time_of_day")
        if observed_at is not None:
            season = season or season_from_date(observed_at)
            time_of_day = time_of_day or time_of_day_from_hour(observed_at.hour)

        return ConditionContext(
            location=str(location),
            coordinates=coordinates,
            water_temperature_f=_as_float(
                _first(
                    _pick(data, "waterTemperatureF", "water_temperature_f", "water_temperature"),
                    _pick(water, "waterTemperature", "water_temperature"),
                ),
                "water_temperature_f",
            ),
            air_temperature_f=_as_float(
                _first(
                    _pick(data, "airTemperatureF", "air_temperature_f"),
                    _pick(weather, "temperature"),
                ),
                "air_temperature_f",
            ),
            flow_rate=_as_float(
                _first(
                    _pick(data, "flowRate", "flow_rate"),
                    _pick(water, "flowRate", "flow_rate"),
                ),
                "flow_rate",
            ),
            weather_description=(
                _pick(data, "weatherDescription", "weather_description")
                or _pick(weather, "weather_description", "weatherDescription")
            ),
            water_flow_qualitative=_pick(
                data, "waterFlowQualitative", "water_flow_qualitative", "water_flow",
            ),
            weather_qualitative=_pick(
                data, "weatherQualitative", "weather_qualitative", "weather_conditions",
            ),
            water_clarity=_pick(data, "waterClarity", "water_clarity"),
            season=season,
            time_of_day=time_of_day,
            observed_at=observed_at,
        )


# ── Pure helpers (no I/O, easily testable) ────────────────────────

def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _first(*values: Any) -> Any:
    return next((v for v in values if v is not None), None)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_float(value: Any, name: str) -> Optional[float]:
    """Numeric reading or ``None``. Unparseable readings count as missing."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric %s reading %r", name, value)
        return None
    if not math.isfinite(number):
        logger.debug("Ignoring non-finite %s reading %r", name, value)
        return None
    return number


def _extract_coordinates(data: Mapping[str, Any]) -> Optional[Coordinates]:
    """
    Read coordinates from any of::

        {"coordinates": {"latitude": 1, "longitude": 2}}
        {"coordinates": (1, 2)}
        {"latitude": 1, "longitude": 2}
    """
    raw = _pick(data, "coordinates", "coords")
    lat = lon = None
    if isinstance(raw, Coordinates):
        return raw
    if isinstance(raw, Mapping):
        lat = _pick(raw, "latitude", "lat")
        lon = _pick(raw, "longitude", "lon", "lng")
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        lat, lon = raw
    else:
        lat = _pick(data, "latitude", "lat")
        lon = _pick(data, "longitude", "lon", "lng")

    lat = _as_float(lat, "latitude")
    lon = _as_float(lon, "longitude")
    if lat is None or lon is None:
        return None
    return Coordinates(latitude=lat, longitude=lon)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        logger.debug("Invalid observedAt %r", value)
        return None


def time_of_day_from_hour(hour: int) -> str:
    """Map a 0-23 hour to a coarse time-of-day tag."""
    if 5 <= hour < 8:
        return "dawn"
    elif 8 <= hour < 12:
        return "morning"
    elif 12 <= hour < 17:
        return "midday"
    elif 17 <= hour < 20:
        return "afternoon"
    elif 20 <= hour < 22:
        return "dusk"
    return "night"


_MONTH_SEASONS = {
    12: "winter", 1: "winter", 2: "winter",
    3: "early_spring", 4: "spring", 5: "late_spring",
    6: "early_summer", 7: "summer", 8: "late_summer",
    9: "early_fall", 10: "fall", 11: "late_fall",
}


def season_from_date(when: datetime) -> str:
    """Fishing-calendar season for a date (northern hemisphere)."""
    return _MONTH_SEASONS[when.month]
