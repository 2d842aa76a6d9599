"""
Tests for CandidateScorer: folding rule outcomes into one score.

Scenarios mirror how the engine is used on the water:
- Single-signal candidates (water temp only)
- A fully described catalog record scored against a rich snapshot
- Penalty-heavy candidates floored at zero
- Per-rule breakdown for debugging
"""

import pytest

from scoring.candidate import (
    Candidate, IdealConditions, NumericRange, ScoringProfile, candidate_from_dict,
)
from scoring.rules import RuleOutcome
from scoring.scorer import CandidateScorer, ScoreResult


@pytest.fixture
def scorer():
    return CandidateScorer()


def _water_only(cid: str, low: float, high: float) -> Candidate:
    return Candidate(
        id=cid,
        ideal_conditions=IdealConditions(water_temperature=NumericRange(low, high)),
    )


class TestScore:

    def test_bare_candidate_scores_zero(self, scorer, make_context):
        result = scorer.score(Candidate(id="bare"), make_context(waterTemperatureF=55))
        assert result == ScoreResult(score=0.0, reasons=())

    def test_water_temperature_only(self, scorer, make_context):
        ctx = make_context(waterTemperatureF=55, flowRate=60)
        result = scorer.score(_water_only("a", 45, 65), ctx)
        assert result.score == 80.0
        assert len(result.reasons) == 1

    def test_out_of_range_floored_at_zero(self, scorer, make_context):
        # 20-30 is not below the Celsius threshold: 55F is 25 above, penalty capped at 30
        ctx = make_context(waterTemperatureF=55, flowRate=60)
        result = scorer.score(_water_only("b", 20, 30), ctx)
        assert result.score == 0.0
        assert result.reasons == ("Water temp (55.0°F) outside ideal range (20.0-30.0°F)",)

    def test_full_record(self, scorer, make_context, sample_candidate_dict):
        ctx = make_context(
            waterTemperatureF=55,
            flowRate=60,
            airTemperatureF=65,
            weatherDescription="cloudy",
            season="spring",
            timeOfDay="morning",
            waterFlowQualitative="moderate",
            weatherQualitative="cloudy",
        )
        result = scorer.score(candidate_from_dict(sample_candidate_dict), ctx)

        # 80 + 70 + 50 + 40 ideal, 15 boost, 15 required,
        # 30 + 25 + 20 + 20 phenomenon, 5 history
        assert result.score == pytest.approx(370.0)
        assert result.reasons == (
            "Perfect water temperature (55.0°F) - ideal range 45.0-65.0°F",
            "Perfect flow rate (60.0 cfs) - ideal range 20.0-100.0 cfs",
            "Good air temperature (65.0°F) - ideal range 50.0-80.0°F",
            "Weather matches ideal conditions",
            "Boost: low-flow",
            "Active during spring",
            "Active at morning",
        )

    def test_score_never_negative(self, scorer, make_context):
        candidate = Candidate(
            id="bad",
            ideal_conditions=IdealConditions(
                water_temperature=NumericRange(45, 65),
                flow_rate=NumericRange(20, 100),
            ),
            scoring_profile=ScoringProfile(required_fields=("airTemp",)),
        )
        ctx = make_context(waterTemperatureF=100, flowRate=1000)
        assert scorer.score(candidate, ctx).score == 0.0

    def test_custom_rule_pipeline(self, make_context):
        rules = (
            ("plus", lambda c, ctx: [RuleOutcome(12.5, "plus")]),
            ("silent", lambda c, ctx: [RuleOutcome(-2.5)]),
        )
        result = CandidateScorer(rules=rules).score(Candidate(id="x"), make_context())
        assert result == ScoreResult(score=10.0, reasons=("plus",))

    def test_scoring_is_deterministic(self, scorer, make_context, sample_candidate_dict):
        candidate = candidate_from_dict(sample_candidate_dict)
        ctx = make_context(waterTemperatureF=52, flowRate=85, season="summer")
        assert scorer.score(candidate, ctx) == scorer.score(candidate, ctx)


class TestExplain:

    def test_breakdown_by_rule(self, scorer, make_context):
        candidate = Candidate(
            id="bad",
            ideal_conditions=IdealConditions(
                water_temperature=NumericRange(45, 65),
                flow_rate=NumericRange(20, 100),
            ),
            scoring_profile=ScoringProfile(required_fields=("airTemp",)),
        )
        ctx = make_context(waterTemperatureF=100, flowRate=1000)

        breakdown = scorer.explain(candidate, ctx)

        assert breakdown["raw_total"] == -75.0
        assert breakdown["score"] == 0.0
        assert breakdown["rules"]["ideal_conditions"]["delta"] == -55.0
        assert breakdown["rules"]["required_fields"] == {"delta": -20.0, "reasons": []}
        assert "category" not in breakdown["rules"]

    def test_explain_matches_score(self, scorer, make_context, sample_candidate_dict):
        candidate = candidate_from_dict(sample_candidate_dict)
        ctx = make_context(waterTemperatureF=58, flowRate=40, season="spring")

        breakdown = scorer.explain(candidate, ctx)

        assert breakdown["score"] == pytest.approx(scorer.score(candidate, ctx).score)
