"""
Pytest configuration and shared fixtures for the suggestion engine tests.
"""
import os
import sys
from typing import Any, Dict

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

# Load environment variables
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

@pytest.fixture
def base_context_dict() -> Dict[str, Any]:
    """Minimal usable snapshot: location + coordinates only."""
    return {
        "location": "Rv",
        "coordinates": {"latitude": 1.0, "longitude": 1.0},
    }


@pytest.fixture
def make_context(base_context_dict):
    """Factory: resolved ConditionContext with reading overrides."""
    from scoring.context_resolver import ContextResolver

    resolver = ContextResolver()

    def _make(**readings):
        data = dict(base_context_dict)
        data.update(readings)
        return resolver.build(data)

    return _make


@pytest.fixture
def sample_candidate_dict() -> Dict[str, Any]:
    """Candidate record as it appears in a catalog file."""
    return {
        "id": "adams",
        "name": "Parachute Adams",
        "category": "dry",
        "idealConditions": {
            "waterTemperature": {"min": 45, "max": 65},
            "streamFlow": {"min": 20, "max": 100},
            "airTemp": {"min": 50, "max": 80},
            "weatherDescription": ["cloudy", "overcast"],
        },
        "matchedPhenomenon": {
            "seasons": ["spring", "summer"],
            "timeOfDay": ["morning", "dusk"],
            "waterConditions": ["moderate"],
            "weatherConditions": ["cloudy"],
            "primarySize": "16",
        },
        "scoringProfile": {
            "matchStrategy": "weighted",
            "boosts": [
                {"tag": "low-flow", "boost": 1.5, "field": "streamFlow",
                 "operator": "<=", "value": 80},
            ],
            "requiredFields": ["waterTemperature"],
        },
        "historicalSuccessRate": 0.5,
        "historicalUseCount": 20,
        "historicalSuccessCount": 10,
    }


@pytest.fixture
def sample_catalog_records(sample_candidate_dict) -> list:
    """Small catalog with one candidate per category style."""
    return [
        sample_candidate_dict,
        {
            "id": "pheasant-tail",
            "name": "Pheasant Tail",
            "category": "nymph",
            "idealConditions": {"waterTemperature": {"min": 4, "max": 16}},
        },
        {
            "id": "bugger",
            "name": "Woolly Bugger",
            "category": "streamer",
            "idealConditions": {"streamFlow": {"min": 150, "max": 600}},
        },
    ]


# ============================================================================
# Fixtures: FastAPI Test Client
# ============================================================================

@pytest.fixture
def catalog(sample_catalog_records):
    from catalog.repository import InMemoryCatalog, parse_catalog
    return InMemoryCatalog(parse_catalog(sample_catalog_records))


@pytest.fixture
def app(catalog):
    """FastAPI application serving the sample catalog."""
    from api.app import create_app
    from config.settings import get_settings_for_testing
    return create_app(settings=get_settings_for_testing(), catalog=catalog)


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient
    with TestClient(app) as test_client:
        yield test_client


# ============================================================================
# Markers auto-use
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
