"""
Weights, caps and thresholds for condition matching.

All values are in raw score points unless stated otherwise.
"""

# ── 1. Ideal-range matching ──────────────────────────────────────
WATER_TEMP_WEIGHT = 80.0
FLOW_RATE_WEIGHT = 70.0
AIR_TEMP_WEIGHT = 50.0
WEATHER_DESCRIPTION_BONUS = 40.0

# Out-of-range penalties: min(cap, distance * slope)
WATER_TEMP_PENALTY_CAP = 30.0
WATER_TEMP_PENALTY_SLOPE = 2.0
FLOW_RATE_PENALTY_CAP = 25.0
FLOW_RATE_PENALTY_SLOPE = 0.5

# Edge-of-range matches never score below this quality
MIN_MATCH_QUALITY = 0.5

# Ranges whose max is below this are Celsius-authored
CELSIUS_MAX_THRESHOLD = 30.0

# ── 2. Scoring-profile boosts ────────────────────────────────────
BOOST_POINTS_PER_MULTIPLIER = 10.0

# ── 3. Required-field completeness ───────────────────────────────
REQUIRED_FIELDS_BONUS = 15.0
REQUIRED_FIELDS_PENALTY = 20.0

# ── 4. Matched-phenomenon overlap ────────────────────────────────
PHENOMENON_SEASON_BONUS = 30.0
PHENOMENON_TIME_BONUS = 25.0
PHENOMENON_WATER_BONUS = 20.0
PHENOMENON_WEATHER_BONUS = 20.0

# ── 5. Legacy conditions ─────────────────────────────────────────
LEGACY_WEATHER_BONUS = 30.0
LEGACY_TIME_BONUS = 25.0
LEGACY_SEASON_BONUS = 25.0
LEGACY_WATER_TEMP_BONUS = 40.0

# ── 6. Category situational bonuses ──────────────────────────────
LOW_FLOW_MAX = 50.0                 # flow < 50  -> floating
HIGH_FLOW_MIN = 200.0               # flow > 200 -> streamer
MEDIUM_FLOW_RANGE = (75.0, 150.0)   # inclusive  -> subsurface
LOW_FLOW_FLOATING_BONUS = 20.0
HIGH_FLOW_STREAMER_BONUS = 25.0
MEDIUM_FLOW_SUBSURFACE_BONUS = 20.0

COLD_WATER_MAX_F = 45.0             # water < 45F -> subsurface
WARM_WATER_MIN_F = 65.0             # water > 65F -> floating
COLD_WATER_SUBSURFACE_BONUS = 15.0
WARM_WATER_FLOATING_BONUS = 15.0

# ── 7. Size / clarity suitability ────────────────────────────────
VERSATILE_SIZE_COUNT = 3
VERSATILITY_BONUS = 5.0
CLEAR_WATER_MAX_SIZE = 18
MURKY_WATER_MIN_SIZE = 14
CLARITY_SIZE_BONUS = 5.0

# ── 8. Historical success ────────────────────────────────────────
HISTORY_MIN_USES = 10               # strictly greater than
HISTORY_MAX_POINTS = 10.0

# ── Ranking ──────────────────────────────────────────────────────
DEFAULT_TOP_N = 5
CONFIDENCE_FLOOR_SCORE = 20.0
CONFIDENCE_SPAN = 100.0
MATCHING_FACTOR_COUNT = 3
REASON_SEPARATOR = ". "
