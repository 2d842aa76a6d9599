"""
Tests for catalog parsing, loading and outcome recording.
"""

import json

import pytest

from catalog.feedback import next_stats, record_outcome
from catalog.repository import (
    CandidateNotFoundError,
    CatalogError,
    InMemoryCatalog,
    load_catalog,
    parse_catalog,
)
from scoring.candidate import (
    Boost, Candidate, NumericRange, candidate_from_dict, candidate_to_dict,
)


class TestCandidateFromDict:

    def test_camel_case_record(self, sample_candidate_dict):
        c = candidate_from_dict(sample_candidate_dict)

        assert c.id == "adams"
        assert c.category == "dry"
        assert c.ideal_conditions.water_temperature == NumericRange(45, 65)
        assert c.ideal_conditions.flow_rate == NumericRange(20, 100)
        assert c.ideal_conditions.weather_descriptions == ("cloudy", "overcast")
        assert c.matched_phenomenon.active_seasons == ("spring", "summer")
        assert c.matched_phenomenon.primary_descriptor == "16"
        assert c.scoring_profile.boosts == (Boost("low-flow", 1.5, "streamFlow", "<=", 80),)
        assert c.scoring_profile.required_fields == ("waterTemperature",)
        assert c.historical_use_count == 20

    def test_alternate_field_names(self):
        c = candidate_from_dict({
            "id": 7,
            "type": "nymph",
            "hatchMatching": {"seasons": "spring"},
            "suggestionProfile": {"boosts": [{"tag": "t", "multiplier": 2,
                                              "field": "flowRate", "operator": ">=",
                                              "value": 100}]},
            "bestConditions": {"weather": ["cloudy"], "timeOfYear": ["spring"],
                               "waterTemperatureRange": {"min": 38, "max": 58}},
            "success_rate": 0.75,
            "total_uses": 12,
            "successful_uses": 9,
            "sizesAvailable": [12, 14],
        })

        assert c.id == "7"
        assert c.category == "nymph"
        assert c.matched_phenomenon.active_seasons == ("spring",)
        assert c.scoring_profile.boosts[0].multiplier == 2.0
        assert c.legacy_conditions.water_temperature == NumericRange(38, 58)
        assert c.legacy_conditions.seasons == ("spring",)
        assert c.historical_success_rate == 0.75
        assert c.sizes_available == ("12", "14")

    def test_missing_descriptions_are_none(self):
        c = candidate_from_dict({"id": "bare", "idealConditions": {}})
        assert c.ideal_conditions is None
        assert c.matched_phenomenon is None
        assert c.scoring_profile is None
        assert c.legacy_conditions is None

    def test_unknown_keys_kept_as_metadata(self):
        c = candidate_from_dict({"id": "x", "imageUrl": "http://img", "name": "X"})
        assert c.metadata == {"imageUrl": "http://img"}

    def test_to_dict(self, sample_candidate_dict):
        data = candidate_to_dict(candidate_from_dict(sample_candidate_dict))
        assert data["id"] == "adams"
        assert data["ideal_conditions"]["water_temperature"] == {"min": 45, "max": 65}


class TestParseCatalog:

    def test_bare_list(self, sample_catalog_records):
        candidates = parse_catalog(sample_catalog_records)
        assert [c.id for c in candidates] == ["adams", "pheasant-tail", "bugger"]

    def test_wrapped_list(self, sample_catalog_records):
        candidates = parse_catalog({"candidates": sample_catalog_records})
        assert len(candidates) == 3

    @pytest.mark.parametrize("data", [{"items": []}, "nope", 42])
    def test_not_a_list(self, data):
        with pytest.raises(CatalogError):
            parse_catalog(data)

    def test_non_object_record(self):
        with pytest.raises(CatalogError, match="record 1"):
            parse_catalog([{"id": "a"}, "b"])

    def test_malformed_range(self):
        with pytest.raises(CatalogError, match="Malformed catalog record 0"):
            parse_catalog([{"id": "a", "idealConditions": {"waterTemperature": {"min": 4}}}])


class TestLoadCatalog:

    def test_load_from_file(self, tmp_path, sample_catalog_records):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"candidates": sample_catalog_records}), encoding="utf-8")

        catalog = load_catalog(path)

        assert len(catalog) == 3
        assert catalog.get("bugger").category == "streamer"

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError, match="not valid JSON"):
            load_catalog(path)

    def test_example_catalog_loads(self):
        from pathlib import Path

        path = Path(__file__).parents[2] / "data" / "catalog.example.json"
        catalog = load_catalog(path)
        assert len(catalog) > 0


class TestOutcomes:

    def test_next_stats(self):
        stats = next_stats(use_count=3, success_count=1, was_successful=True)
        assert (stats.use_count, stats.success_count) == (4, 2)
        assert stats.success_rate == 0.5

    def test_record_outcome_returns_copy(self):
        original = Candidate(id="a")
        updated = record_outcome(original, was_successful=False)
        assert original.historical_use_count == 0
        assert updated.historical_use_count == 1
        assert updated.historical_success_rate == 0.0

    def test_catalog_records_outcome(self, catalog):
        snapshot = catalog.get_candidates()

        updated = catalog.record_outcome("adams", was_successful=True)

        assert updated.historical_use_count == 21
        assert updated.historical_success_count == 11
        assert updated.historical_success_rate == pytest.approx(11 / 21)
        assert catalog.get("adams") == updated
        # Snapshots handed out earlier are untouched
        assert snapshot[0].historical_use_count == 20

    def test_unknown_candidate(self, catalog):
        with pytest.raises(CandidateNotFoundError):
            catalog.record_outcome("nope", was_successful=True)
        with pytest.raises(CandidateNotFoundError):
            catalog.get("nope")

    def test_outcomes_feed_history_bonus(self, make_context):
        from scoring.scorer import CandidateScorer

        catalog = InMemoryCatalog([Candidate(id="a")])
        for _ in range(11):
            catalog.record_outcome("a", was_successful=True)

        result = CandidateScorer().score(catalog.get("a"), make_context())
        assert result.score == 10.0


class TestMalformedNestedRecords:
    """Nested descriptions that are not objects are malformed records."""

    @pytest.mark.parametrize("record", [
        {"id": "x", "idealConditions": "warm"},
        {"id": "x", "matchedPhenomenon": ["spring"]},
        {"id": "x", "scoringProfile": "weighted"},
        {"id": "x", "scoringProfile": {"boosts": "low-flow"}},
        {"id": "x", "scoringProfile": {"boosts": ["low-flow"]}},
        {"id": "x", "bestConditions": 5},
        {"id": "x", "idealConditions": {"waterTemperature": [45, 65]}},
    ])
    def test_parse_raises_catalog_error(self, record):
        with pytest.raises(CatalogError, match="Malformed catalog record 0"):
            parse_catalog([record])

    def test_load_raises_catalog_error(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{"id": "x", "idealConditions": "warm"}]), encoding="utf-8")
        with pytest.raises(CatalogError):
            load_catalog(path)

    def test_app_starts_with_empty_catalog(self, tmp_path):
        from api.app import create_app
        from config.settings import get_settings_for_testing

        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([{"id": "x", "idealConditions": "warm"}]), encoding="utf-8")

        app = create_app(settings=get_settings_for_testing(catalog_path=path))

        assert len(app.state.catalog) == 0


class TestStatsWithoutSuccessCount:
    """Records that only carry a rate and a use count."""

    def test_success_count_derived(self):
        c = candidate_from_dict({"id": "h", "historicalSuccessRate": 0.4, "historicalUseCount": 5})
        assert c.historical_success_count == 2

    def test_explicit_success_count_kept(self):
        c = candidate_from_dict({
            "id": "h", "historicalSuccessRate": 0.4,
            "historicalUseCount": 5, "historicalSuccessCount": 3,
        })
        assert c.historical_success_count == 3

    def test_outcome_keeps_stored_rate(self):
        catalog = InMemoryCatalog(parse_catalog([
            {"id": "hopper", "historicalSuccessRate": 0.4, "historicalUseCount": 5},
        ]))

        updated = catalog.record_outcome("hopper", was_successful=True)

        assert updated.historical_use_count == 6
        assert updated.historical_success_count == 3
        assert updated.historical_success_rate == pytest.approx(0.5)

    def test_example_catalog_record(self):
        from pathlib import Path

        catalog = load_catalog(Path(__file__).parents[2] / "data" / "catalog.example.json")
        updated = catalog.record_outcome("foam-hopper", was_successful=True)

        assert updated.historical_success_rate == pytest.approx(3 / 6)
