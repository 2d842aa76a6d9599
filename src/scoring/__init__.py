"""
Condition-matching scoring module.

Ranks catalog candidates against a snapshot of environmental conditions
and explains each pick.

Quick start::

    from scoring import SuggestionEngine, candidate_from_dict

    engine = SuggestionEngine()
    response = engine.get_suggestions(
        {"location": "Rv", "latitude": 45.1, "longitude": -110.2,
         "waterTemperatureF": 55, "flowRate": 60},
        [candidate_from_dict(record) for record in catalog],
    )
    for s in response.results:
        print(s.item.name, s.confidence, s.matching_factors)
"""

from scoring.candidate import Candidate, candidate_from_dict, candidate_to_dict
from scoring.context import ConditionContext, Coordinates
from scoring.context_resolver import ContextResolution, ContextResolver
from scoring.engine import SuggestionEngine, SuggestionResponse, get_suggestions
from scoring.errors import EmptyCatalogError, InsufficientContextError, SuggestionError
from scoring.ranker import CandidateRanker, Suggestion, normalize_confidence
from scoring.scorer import CandidateScorer, ScoreResult

__all__ = [
    "Candidate",
    "candidate_from_dict",
    "candidate_to_dict",
    "ConditionContext",
    "Coordinates",
    "ContextResolution",
    "ContextResolver",
    "SuggestionEngine",
    "SuggestionResponse",
    "get_suggestions",
    "SuggestionError",
    "InsufficientContextError",
    "EmptyCatalogError",
    "CandidateRanker",
    "Suggestion",
    "normalize_confidence",
    "CandidateScorer",
    "ScoreResult",
]
