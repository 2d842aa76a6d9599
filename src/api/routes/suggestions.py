"""
Suggestion Routes.

Endpoints for ranking catalog candidates against current conditions,
explaining a single candidate's score, and recording real-world outcomes.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from catalog.repository import (
    CandidateNotFoundError,
    CatalogError,
    InMemoryCatalog,
    parse_catalog,
)
from scoring.candidate import Candidate, candidate_from_dict, candidate_to_dict
from scoring.engine import SuggestionEngine
from scoring.errors import InsufficientContextError
from scoring.ranker import Suggestion


router = APIRouter(prefix="/api", tags=["Suggestions"])


# =============================================================================
# Request/Response Models
# =============================================================================

class SuggestionRequest(BaseModel):
    """Request for ranked suggestions."""
    context: Dict[str, Any] = Field(
        ...,
        description="Partial condition snapshot (location, coordinates, readings)"
    )
    candidates: Optional[List[Dict[str, Any]]] = Field(
        default=None,
        description="Inline candidate records; the loaded catalog is used when omitted"
    )
    top_n: Optional[int] = Field(default=None, ge=1, description="Number of suggestions")


class SuggestionItem(BaseModel):
    candidate: Dict[str, Any]
    score: float
    confidence: float
    reason: str
    matching_factors: List[str]


class SuggestionListResponse(BaseModel):
    suggestions: List[SuggestionItem]
    can_perform: bool
    error: Optional[str] = None


class ExplainRequest(BaseModel):
    """Request for a per-rule score breakdown of one candidate."""
    context: Dict[str, Any]
    candidate_id: Optional[str] = Field(default=None, description="Catalog candidate id")
    candidate: Optional[Dict[str, Any]] = Field(default=None, description="Inline candidate record")


class OutcomeRequest(BaseModel):
    was_successful: bool = Field(..., description="Whether the candidate worked")


# =============================================================================
# Helper Functions
# =============================================================================

def get_engine(request: Request) -> SuggestionEngine:
    return request.app.state.engine


def get_catalog(request: Request) -> InMemoryCatalog:
    return request.app.state.catalog


def format_suggestion(suggestion: Suggestion) -> SuggestionItem:
    return SuggestionItem(
        candidate=candidate_to_dict(suggestion.item),
        score=round(suggestion.score, 4),
        confidence=suggestion.confidence,
        reason=suggestion.reason,
        matching_factors=list(suggestion.matching_factors),
    )


def _inline_candidates(records: List[Dict[str, Any]]) -> List[Candidate]:
    try:
        return parse_catalog(records)
    except CatalogError as e:
        raise HTTPException(status_code=422, detail=str(e))


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "/suggestions",
    response_model=SuggestionListResponse,
    summary="Rank candidates for current conditions",
)
def suggest(body: SuggestionRequest, request: Request) -> SuggestionListResponse:
    """
    Rank candidates against the supplied conditions.

    Insufficient location data or an empty catalog is not an HTTP error:
    the response carries ``can_perform=false`` and a message instead.
    """
    settings = request.app.state.settings
    if body.candidates is not None:
        candidates = _inline_candidates(body.candidates)
    else:
        candidates = list(get_catalog(request).get_candidates())

    top_n = min(body.top_n or settings.default_top_n, settings.max_top_n)
    response = get_engine(request).get_suggestions(body.context, candidates, top_n=top_n)

    return SuggestionListResponse(
        suggestions=[format_suggestion(s) for s in response.results],
        can_perform=response.can_perform,
        error=response.error,
    )


@router.post("/suggestions/explain", summary="Explain one candidate's score")
def explain(body: ExplainRequest, request: Request) -> Dict[str, Any]:
    """Per-rule score breakdown for debugging / admin tooling."""
    if body.candidate is not None:
        try:
            candidate = candidate_from_dict(body.candidate)
        except (KeyError, TypeError, ValueError) as e:
            raise HTTPException(status_code=422, detail=f"Malformed candidate: {e}")
    elif body.candidate_id is not None:
        try:
            candidate = get_catalog(request).get(body.candidate_id)
        except CandidateNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
    else:
        raise HTTPException(status_code=422, detail="Provide candidate_id or candidate")

    try:
        ctx = request.app.state.resolver.build(body.context)
    except InsufficientContextError as e:
        raise HTTPException(status_code=400, detail=str(e))

    breakdown = request.app.state.scorer.explain(candidate, ctx)
    breakdown["candidate_id"] = candidate.id
    return breakdown


@router.get("/catalog", summary="List catalog candidates")
def list_catalog(request: Request) -> Dict[str, Any]:
    candidates = get_catalog(request).get_candidates()
    return {
        "count": len(candidates),
        "candidates": [candidate_to_dict(c) for c in candidates],
    }


@router.post("/catalog/{candidate_id}/outcome", summary="Record a real-world outcome")
def record_outcome(candidate_id: str, body: OutcomeRequest, request: Request) -> Dict[str, Any]:
    try:
        updated = get_catalog(request).record_outcome(candidate_id, body.was_successful)
    except CandidateNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "candidate_id": updated.id,
        "historical_use_count": updated.historical_use_count,
        "historical_success_count": updated.historical_success_count,
        "historical_success_rate": round(updated.historical_success_rate, 4),
    }
