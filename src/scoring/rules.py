"""
Condition-matching rules.

Each rule is a pure function ``(candidate, context) -> list[RuleOutcome]``.
A rule returns an empty list when it does not apply; the scorer folds all
outcomes into a single raw score.

Rules, in evaluation order:
1. Ideal-range matching (water temp, flow, air temp, weather description)
2. Scoring-profile boosts
3. Required-field completeness
4. Matched-phenomenon categorical overlap
5. Legacy-conditions overlap
6. Category situational bonus (flow rate, water temperature)
7. Size / water-clarity suitability
8. Historical success bonus (no reason string)

Degrades gracefully:
- No candidate description -> rule contributes nothing
- No context reading -> rule contributes nothing
"""

import operator
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from scoring.candidate import Boost, Candidate, NumericRange
from scoring.context import ConditionContext
from scoring.constants import (
    AIR_TEMP_WEIGHT,
    BOOST_POINTS_PER_MULTIPLIER,
    CELSIUS_MAX_THRESHOLD,
    CLARITY_SIZE_BONUS,
    CLEAR_WATER_MAX_SIZE,
    COLD_WATER_MAX_F,
    COLD_WATER_SUBSURFACE_BONUS,
    FLOW_RATE_PENALTY_CAP,
    FLOW_RATE_PENALTY_SLOPE,
    FLOW_RATE_WEIGHT,
    HIGH_FLOW_MIN,
    HIGH_FLOW_STREAMER_BONUS,
    HISTORY_MAX_POINTS,
    HISTORY_MIN_USES,
    LEGACY_SEASON_BONUS,
    LEGACY_TIME_BONUS,
    LEGACY_WATER_TEMP_BONUS,
    LEGACY_WEATHER_BONUS,
    LOW_FLOW_FLOATING_BONUS,
    LOW_FLOW_MAX,
    MEDIUM_FLOW_RANGE,
    MEDIUM_FLOW_SUBSURFACE_BONUS,
    MIN_MATCH_QUALITY,
    MURKY_WATER_MIN_SIZE,
    PHENOMENON_SEASON_BONUS,
    PHENOMENON_TIME_BONUS,
    PHENOMENON_WATER_BONUS,
    PHENOMENON_WEATHER_BONUS,
    REQUIRED_FIELDS_BONUS,
    REQUIRED_FIELDS_PENALTY,
    VERSATILE_SIZE_COUNT,
    VERSATILITY_BONUS,
    WARM_WATER_FLOATING_BONUS,
    WARM_WATER_MIN_F,
    WATER_TEMP_PENALTY_CAP,
    WATER_TEMP_PENALTY_SLOPE,
    WATER_TEMP_WEIGHT,
    WEATHER_DESCRIPTION_BONUS,
)


@dataclass(frozen=True)
class RuleOutcome:
    delta: float
    reason: Optional[str] = None


Rule = Callable[[Candidate, ConditionContext], List[RuleOutcome]]


# ── Range helpers ─────────────────────────────────────────────────

def celsius_to_fahrenheit(value: float) -> float:
    return value * 9 / 5 + 32


def to_fahrenheit_range(rng: NumericRange) -> NumericRange:
    """
    Normalize a temperature range to Fahrenheit.

    Catalog ranges are authored in either unit. A range whose ``max`` is
    below 30 is Celsius-authored and converted; anything else is already
    Fahrenheit.
    """
    if rng.max < CELSIUS_MAX_THRESHOLD:
        return NumericRange(
            min=celsius_to_fahrenheit(rng.min),
            max=celsius_to_fahrenheit(rng.max),
        )
    return rng


def range_match_quality(value: float, low: float, high: float) -> float:
    """
    How centrally ``value`` sits within ``[low, high]``.

    Midpoint -> 1.0, either bound -> 0.5 (floor). Degenerate ranges -> 1.0.
    """
    span = high - low
    if span == 0:
        return 1.0
    midpoint = (low + high) / 2
    half_span = span / 2
    return max(MIN_MATCH_QUALITY, 1 - abs(value - midpoint) / half_span)


def distance_outside(value: float, low: float, high: float) -> float:
    """Distance beyond the nearest bound; 0 when inside."""
    if value < low:
        return low - value
    if value > high:
        return value - high
    return 0.0


def _overlaps(needle: Optional[str], haystack: Iterable[str]) -> bool:
    """Case-insensitive substring match in either direction."""
    if not needle:
        return False
    needle = needle.lower()
    for item in haystack:
        item = item.lower()
        if needle in item or item in needle:
            return True
    return False


def _contains(needle: Optional[str], haystack: Sequence[str]) -> bool:
    """Case-insensitive exact membership."""
    if not needle:
        return False
    return needle.lower() in {h.lower() for h in haystack}


# ── 1. Ideal-range matching ───────────────────────────────────────

def score_ideal_conditions(candidate: Candidate, ctx: ConditionContext) -> List[RuleOutcome]:
    """Dominant signal: numeric readings against the candidate's ideal ranges."""
    ideal = candidate.ideal_conditions
    if ideal is None:
        return []

    outcomes: List[RuleOutcome] = []

    if ideal.water_temperature is not None and ctx.water_temperature_f is not None:
        temp = ctx.water_temperature_f
        rng = to_fahrenheit_range(ideal.water_temperature)
        if rng.min <= temp <= rng.max:
            quality = range_match_quality(temp, rng.min, rng.max)
            outcomes.append(RuleOutcome(
                WATER_TEMP_WEIGHT * quality,
                f"Perfect water temperature ({temp:.1f}°F) - ideal range "
                f"{rng.min:.1f}-{rng.max:.1f}°F",
            ))
        else:
            distance = distance_outside(temp, rng.min, rng.max)
            outcomes.append(RuleOutcome(
                -min(WATER_TEMP_PENALTY_CAP, distance * WATER_TEMP_PENALTY_SLOPE),
                f"Water temp ({temp:.1f}°F) outside ideal range "
                f"({rng.min:.1f}-{rng.max:.1f}°F)",
            ))

    # Flow is never unit-converted
    if ideal.flow_rate is not None and ctx.flow_rate is not None:
        flow = ctx.flow_rate
        rng = ideal.flow_rate
        if rng.min <= flow <= rng.max:
            quality = range_match_quality(flow, rng.min, rng.max)
            outcomes.append(RuleOutcome(
                FLOW_RATE_WEIGHT * quality,
                f"Perfect flow rate ({flow:.1f} cfs) - ideal range "
                f"{rng.min:.1f}-{rng.max:.1f} cfs",
            ))
        else:
            distance = distance_outside(flow, rng.min, rng.max)
            outcomes.append(RuleOutcome(
                -min(FLOW_RATE_PENALTY_CAP, distance * FLOW_RATE_PENALTY_SLOPE),
                f"Flow rate ({flow:.1f} cfs) outside ideal range "
                f"({rng.min:.1f}-{rng.max:.1f} cfs)",
            ))

    # Air temperature: missed bonus only, no penalty
    if ideal.air_temperature is not None and ctx.air_temperature_f is not None:
        temp = ctx.air_temperature_f
        rng = to_fahrenheit_range(ideal.air_temperature)
        if rng.min <= temp <= rng.max:
            quality = range_match_quality(temp, rng.min, rng.max)
            outcomes.append(RuleOutcome(
                AIR_TEMP_WEIGHT * quality,
                f"Good air temperature ({temp:.1f}°F) - ideal range "
                f"{rng.min:.1f}-{rng.max:.1f}°F",
            ))
        else:
            outcomes.append(RuleOutcome(
                0.0,
                f"Air temp ({temp:.1f}°F) outside ideal range "
                f"({rng.min:.1f}-{rng.max:.1f}°F)",
            ))

    if ideal.weather_descriptions and ctx.weather_description:
        current = ctx.weather_description.lower()
        if any(w.lower() in current for w in ideal.weather_descriptions):
            outcomes.append(RuleOutcome(
                WEATHER_DESCRIPTION_BONUS, "Weather matches ideal conditions",
            ))

    return outcomes


# ── 2. Scoring-profile boosts ─────────────────────────────────────

_COMPARATORS = {
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}


def evaluate_boost(boost: Boost, ctx: ConditionContext) -> bool:
    """True when the boost's field is present and satisfies its comparator."""
    value = ctx.numeric_field(boost.field)
    compare = _COMPARATORS.get(boost.operator)
    if value is None or compare is None:
        return False
    threshold = boost.value
    if boost.operator in (">=", "<="):
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            return False
    return compare(value, threshold)


def score_profile_boosts(candidate: Candidate, ctx: ConditionContext) -> List[RuleOutcome]:
    profile = candidate.scoring_profile
    if profile is None:
        return []
    return [
        RuleOutcome(boost.multiplier * BOOST_POINTS_PER_MULTIPLIER, f"Boost: {boost.tag}")
        for boost in profile.boosts
        if evaluate_boost(boost, ctx)
    ]


# ── 3. Required-field completeness ────────────────────────────────

def score_required_fields(candidate: Candidate, ctx: ConditionContext) -> List[RuleOutcome]:
    """All required readings present -> bonus; any missing -> penalty."""
    profile = candidate.scoring_profile
    if profile is None or not profile.required_fields:
        return []
    if all(ctx.numeric_field(name) is not None for name in profile.required_fields):
        return [RuleOutcome(REQUIRED_FIELDS_BONUS)]
    return [RuleOutcome(-REQUIRED_FIELDS_PENALTY)]


# ── 4. Matched-phenomenon overlap ─────────────────────────────────

def score_matched_phenomenon(candidate: Candidate, ctx: ConditionContext) -> List[RuleOutcome]:
    phenomenon = candidate.matched_phenomenon
    if phenomenon is None:
        return []

    outcomes: List[RuleOutcome] = []
    if _overlaps(ctx.season, phenomenon.active_seasons):
        outcomes.append(RuleOutcome(
            PHENOMENON_SEASON_BONUS, f"Active during {ctx.season}",
        ))
    if _overlaps(ctx.time_of_day, phenomenon.active_times_of_day):
        outcomes.append(RuleOutcome(
            PHENOMENON_TIME_BONUS, f"Active at {ctx.time_of_day}",
        ))
    if _overlaps(ctx.water_flow_qualitative, phenomenon.water_states):
        outcomes.append(RuleOutcome(PHENOMENON_WATER_BONUS))
    if _overlaps(ctx.weather_qualitative, phenomenon.weather_states):
        outcomes.append(RuleOutcome(PHENOMENON_WEATHER_BONUS))
    return outcomes


# ── 5. Legacy conditions ──────────────────────────────────────────

def score_legacy_conditions(candidate: Candidate, ctx: ConditionContext) -> List[RuleOutcome]:
    """Older-format record; additive and silent."""
    legacy = candidate.legacy_conditions
    if legacy is None:
        return []

    outcomes: List[RuleOutcome] = []
    if _contains(ctx.weather_qualitative, legacy.weather):
        outcomes.append(RuleOutcome(LEGACY_WEATHER_BONUS))
    if _contains(ctx.time_of_day, legacy.time_of_day):
        outcomes.append(RuleOutcome(LEGACY_TIME_BONUS))
    if _contains(ctx.season, legacy.seasons):
        outcomes.append(RuleOutcome(LEGACY_SEASON_BONUS))
    # No unit heuristic, partial credit or penalty here
    rng = legacy.water_temperature
    temp = ctx.water_temperature_f
    if rng is not None and temp is not None and rng.min <= temp <= rng.max:
        outcomes.append(RuleOutcome(LEGACY_WATER_TEMP_BONUS))
    return outcomes


# ── 6. Category situational bonus ─────────────────────────────────

def is_floating(category: str) -> bool:
    c = category.lower()
    if "dry" in c or "terrestrial" in c:
        return True
    return "surface" in c and "subsurface" not in c


def is_deep(category: str) -> bool:
    return "streamer" in category.lower()


def is_subsurface(category: str) -> bool:
    c = category.lower()
    return "nymph" in c or "subsurface" in c


def score_category(candidate: Candidate, ctx: ConditionContext) -> List[RuleOutcome]:
    category = candidate.category or ""
    if not category:
        return []

    outcomes: List[RuleOutcome] = []
    flow = ctx.flow_rate
    if flow is not None:
        low, high = MEDIUM_FLOW_RANGE
        if flow < LOW_FLOW_MAX and is_floating(category):
            outcomes.append(RuleOutcome(
                LOW_FLOW_FLOATING_BONUS, "Low flow - perfect for surface patterns",
            ))
        elif flow > HIGH_FLOW_MIN and is_deep(category):
            outcomes.append(RuleOutcome(
                HIGH_FLOW_STREAMER_BONUS, "High flow - perfect for streamers",
            ))
        elif low <= flow <= high and is_subsurface(category):
            outcomes.append(RuleOutcome(
                MEDIUM_FLOW_SUBSURFACE_BONUS, "Medium flow - excellent for nymphing",
            ))

    temp = ctx.water_temperature_f
    if temp is not None:
        if temp < COLD_WATER_MAX_F and is_subsurface(category):
            outcomes.append(RuleOutcome(
                COLD_WATER_SUBSURFACE_BONUS, "Cold water - nymphs are most effective",
            ))
        if temp > WARM_WATER_MIN_F and is_floating(category):
            outcomes.append(RuleOutcome(
                WARM_WATER_FLOATING_BONUS, "Warm water - surface activity likely",
            ))
    return outcomes


# ── 7. Size / clarity suitability ─────────────────────────────────

def numeric_sizes(sizes: Sequence[str]) -> List[int]:
    """Leading-integer hook sizes; entries like "2/0" parse as 2, "xl" is skipped."""
    result = []
    for size in sizes:
        digits = ""
        for ch in str(size).strip():
            if not ch.isdigit():
                break
            digits += ch
        if digits:
            result.append(int(digits))
    return result


def score_sizes(candidate: Candidate, ctx: ConditionContext) -> List[RuleOutcome]:
    sizes = numeric_sizes(candidate.sizes_available)
    if not sizes:
        return []

    outcomes: List[RuleOutcome] = []
    if len(sizes) >= VERSATILE_SIZE_COUNT:
        listed = ", ".join(str(s) for s in sizes)
        outcomes.append(RuleOutcome(
            VERSATILITY_BONUS, f"Available in {len(sizes)} sizes ({listed})",
        ))

    if ctx.water_clarity:
        clarity = ctx.water_clarity.lower()
        recommended = sizes[len(sizes) // 2]
        if clarity == "clear" and recommended <= CLEAR_WATER_MAX_SIZE:
            outcomes.append(RuleOutcome(
                CLARITY_SIZE_BONUS, "Small size ideal for clear water",
            ))
        elif "murky" in clarity and recommended >= MURKY_WATER_MIN_SIZE:
            outcomes.append(RuleOutcome(
                CLARITY_SIZE_BONUS, "Larger size visible in murky water",
            ))
    return outcomes


# ── 8. Historical success ─────────────────────────────────────────

def score_history(candidate: Candidate, ctx: ConditionContext) -> List[RuleOutcome]:
    """Small, silent bonus once a candidate has enough recorded uses."""
    if candidate.historical_use_count <= HISTORY_MIN_USES:
        return []
    rate = min(1.0, max(0.0, candidate.historical_success_rate))
    if rate == 0:
        return []
    return [RuleOutcome(rate * HISTORY_MAX_POINTS)]


RULES: Tuple[Tuple[str, Rule], ...] = (
    ("ideal_conditions", score_ideal_conditions),
    ("profile_boosts", score_profile_boosts),
    ("required_fields", score_required_fields),
    ("matched_phenomenon", score_matched_phenomenon),
    ("legacy_conditions", score_legacy_conditions),
    ("category", score_category),
    ("sizes", score_sizes),
    ("history", score_history),
)
