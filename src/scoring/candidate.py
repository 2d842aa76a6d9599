"""
Candidate catalog entries and their condition descriptions.

A candidate carries up to four independent, partially overlapping
descriptions of the conditions it performs best in. Each one is optional;
``None`` means "this candidate has no such description" and the matching
scoring rule contributes nothing.

Conversion helpers accept the camelCase keys used by curated catalog files
as well as snake_case keys.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

BoostValue = Union[float, str]


@dataclass(frozen=True)
class NumericRange:
    min: float
    max: float


@dataclass(frozen=True)
class IdealConditions:
    """Numeric ranges the candidate performs best within."""
    water_temperature: Optional[NumericRange] = None
    air_temperature: Optional[NumericRange] = None
    flow_rate: Optional[NumericRange] = None
    weather_descriptions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchedPhenomenon:
    """The natural event the candidate imitates."""
    active_seasons: Tuple[str, ...] = ()
    active_times_of_day: Tuple[str, ...] = ()
    water_states: Tuple[str, ...] = ()
    weather_states: Tuple[str, ...] = ()
    primary_descriptor: Optional[str] = None  # informational only


@dataclass(frozen=True)
class Boost:
    tag: str
    multiplier: float
    field: str
    operator: str   # ">=", "<=", "==", "!="
    value: BoostValue


@dataclass(frozen=True)
class ScoringProfile:
    match_strategy: Optional[str] = None  # informational only
    boosts: Tuple[Boost, ...] = ()
    required_fields: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LegacyConditions:
    """Older-format condition record, scored independently."""
    weather: Tuple[str, ...] = ()
    time_of_day: Tuple[str, ...] = ()
    seasons: Tuple[str, ...] = ()
    water_temperature: Optional[NumericRange] = None


@dataclass(frozen=True)
class Candidate:
    id: str
    name: str = ""
    category: str = ""
    ideal_conditions: Optional[IdealConditions] = None
    matched_phenomenon: Optional[MatchedPhenomenon] = None
    scoring_profile: Optional[ScoringProfile] = None
    legacy_conditions: Optional[LegacyConditions] = None
    sizes_available: Tuple[str, ...] = ()
    historical_success_rate: float = 0.0
    historical_use_count: int = 0
    historical_success_count: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)


# ── Dict conversion ───────────────────────────────────────────────

def _pick(data: Dict[str, Any], *keys: str) -> Any:
    """First non-None value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _to_tuple(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value if v is not None)


def _require_mapping(value: Any, name: str) -> None:
    """Nested descriptions must be objects; anything else is a malformed record."""
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be an object, got {type(value).__name__}")


def _range_from(value: Any) -> Optional[NumericRange]:
    if not value:
        return None
    if isinstance(value, NumericRange):
        return value
    _require_mapping(value, "range")
    return NumericRange(min=value["min"], max=value["max"])


def _ideal_from(data: Optional[Dict[str, Any]]) -> Optional[IdealConditions]:
    if not data:
        return None
    _require_mapping(data, "idealConditions")
    return IdealConditions(
        water_temperature=_range_from(_pick(data, "waterTemperature", "water_temperature")),
        air_temperature=_range_from(_pick(data, "airTemp", "airTemperature", "air_temperature")),
        flow_rate=_range_from(_pick(data, "streamFlow", "flowRate", "flow_rate")),
        weather_descriptions=_to_tuple(
            _pick(data, "weatherDescription", "weather_description", "weather_descriptions")
        ),
    )


def _phenomenon_from(data: Optional[Dict[str, Any]]) -> Optional[MatchedPhenomenon]:
    if not data:
        return None
    _require_mapping(data, "matchedPhenomenon")
    return MatchedPhenomenon(
        active_seasons=_to_tuple(_pick(data, "seasons", "activeSeasons", "active_seasons")),
        active_times_of_day=_to_tuple(
            _pick(data, "timeOfDay", "activeTimesOfDay", "time_of_day", "active_times_of_day")
        ),
        water_states=_to_tuple(_pick(data, "waterConditions", "waterStates", "water_states")),
        weather_states=_to_tuple(_pick(data, "weatherConditions", "weatherStates", "weather_states")),
        primary_descriptor=_pick(data, "primarySize", "primaryDescriptor", "primary_descriptor"),
    )


def _boost_from(data: Dict[str, Any]) -> Boost:
    _require_mapping(data, "boost")
    return Boost(
        tag=data.get("tag") or "",
        multiplier=float(_pick(data, "boost", "multiplier") or 0),
        field=data.get("field") or "",
        operator=data.get("operator") or "",
        value=data.get("value"),
    )


def _profile_from(data: Optional[Dict[str, Any]]) -> Optional[ScoringProfile]:
    if not data:
        return None
    _require_mapping(data, "scoringProfile")
    boosts = _pick(data, "boosts") or []
    if isinstance(boosts, (str, Mapping)):
        raise TypeError("boosts must be a list")
    return ScoringProfile(
        match_strategy=_pick(data, "matchStrategy", "match_strategy"),
        boosts=tuple(b if isinstance(b, Boost) else _boost_from(b) for b in boosts),
        required_fields=_to_tuple(_pick(data, "requiredFields", "required_fields")),
    )


def _legacy_from(data: Optional[Dict[str, Any]]) -> Optional[LegacyConditions]:
    if not data:
        return None
    _require_mapping(data, "legacyConditions")
    return LegacyConditions(
        weather=_to_tuple(data.get("weather")),
        time_of_day=_to_tuple(_pick(data, "timeOfDay", "time_of_day")),
        seasons=_to_tuple(_pick(data, "timeOfYear", "time_of_year", "seasons")),
        water_temperature=_range_from(
            _pick(data, "waterTemperatureRange", "water_temperature_range")
        ),
    )


def candidate_from_dict(data: Dict[str, Any]) -> Candidate:
    """
    Convert a catalog record to a :class:`Candidate`.

    Handles the field name variations found in curated catalogs:
    - ideal_conditions / idealConditions
    - matched_phenomenon / hatchMatching
    - scoring_profile / suggestionProfile
    - legacy_conditions / bestConditions
    - success_rate / total_uses for the outcome statistics

    Unknown keys are kept in ``metadata``.
    """
    known = {
        "id", "name", "category", "type",
        "idealConditions", "ideal_conditions",
        "matchedPhenomenon", "matched_phenomenon", "hatchMatching", "hatch_matching",
        "scoringProfile", "scoring_profile", "suggestionProfile", "suggestion_profile",
        "legacyConditions", "legacy_conditions", "bestConditions", "best_conditions",
        "sizesAvailable", "sizes_available",
        "historicalSuccessRate", "historical_success_rate", "success_rate",
        "historicalUseCount", "historical_use_count", "total_uses",
        "historicalSuccessCount", "historical_success_count", "successful_uses",
    }
    success_rate = float(
        _pick(data, "historicalSuccessRate", "historical_success_rate", "success_rate") or 0.0
    )
    use_count = int(_pick(data, "historicalUseCount", "historical_use_count", "total_uses") or 0)
    success_count = _pick(
        data, "historicalSuccessCount", "historical_success_count", "successful_uses"
    )
    # Older records carry only rate and uses
    if success_count is None:
        success_count = round(success_rate * use_count)

    return Candidate(
        id=str(_pick(data, "id") or ""),
        name=data.get("name") or "",
        category=_pick(data, "category", "type") or "",
        ideal_conditions=_ideal_from(_pick(data, "idealConditions", "ideal_conditions")),
        matched_phenomenon=_phenomenon_from(
            _pick(data, "matchedPhenomenon", "matched_phenomenon", "hatchMatching", "hatch_matching")
        ),
        scoring_profile=_profile_from(
            _pick(data, "scoringProfile", "scoring_profile", "suggestionProfile", "suggestion_profile")
        ),
        legacy_conditions=_legacy_from(
            _pick(data, "legacyConditions", "legacy_conditions", "bestConditions", "best_conditions")
        ),
        sizes_available=_to_tuple(_pick(data, "sizesAvailable", "sizes_available")),
        historical_success_rate=success_rate,
        historical_use_count=use_count,
        historical_success_count=int(success_count),
        metadata={k: v for k, v in data.items() if k not in known},
    )


def candidate_to_dict(candidate: Candidate) -> Dict[str, Any]:
    """Plain-dict view of a candidate (snake_case, JSON-serializable)."""
    return asdict(candidate)


def candidates_from_dicts(records: List[Dict[str, Any]]) -> List[Candidate]:
    return [candidate_from_dict(r) for r in records]
