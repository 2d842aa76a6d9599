"""
Suggestion engine: the public entry point.

    from scoring.engine import get_suggestions

    response = get_suggestions(partial_context, candidates)
    if response.can_perform:
        for s in response.results:
            print(s.item.name, s.confidence, s.reason)
    else:
        print(response.error)

The engine never raises for missing data: insufficient location data or an
empty catalog come back as ``can_perform=False`` with a message.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Union

from core.logging import get_logger
from scoring.candidate import Candidate
from scoring.constants import DEFAULT_TOP_N
from scoring.context import ConditionContext
from scoring.context_resolver import ContextResolver
from scoring.errors import EmptyCatalogError, SuggestionError
from scoring.ranker import CandidateRanker, Suggestion

logger = get_logger(__name__)

PartialContext = Union[Mapping[str, Any], ConditionContext, None]


@dataclass(frozen=True)
class SuggestionResponse:
    results: List[Suggestion] = field(default_factory=list)
    can_perform: bool = True
    error: Optional[str] = None


class SuggestionEngine:
    """
    Resolves the context, ranks the catalog snapshot, reports failures.

    Holds no per-request state, so one instance can serve every request.
    """

    def __init__(
        self,
        resolver: Optional[ContextResolver] = None,
        ranker: Optional[CandidateRanker] = None,
        default_top_n: int = DEFAULT_TOP_N,
    ) -> None:
        self._resolver = resolver or ContextResolver()
        self._ranker = ranker or CandidateRanker()
        self._default_top_n = default_top_n

    def get_suggestions(
        self,
        partial_context: PartialContext,
        candidates: Optional[Sequence[Candidate]],
        top_n: Optional[int] = None,
    ) -> SuggestionResponse:
        top_n = self._default_top_n if top_n is None else top_n

        try:
            ctx = self._resolver.build(partial_context)
            if not candidates:
                raise EmptyCatalogError()

            logger.info(
                "Ranking candidates",
                candidate_count=len(candidates),
                location=ctx.location,
                water_temperature_f=ctx.water_temperature_f,
                flow_rate=ctx.flow_rate,
                season=ctx.season,
                time_of_day=ctx.time_of_day,
            )
            results = self._ranker.rank(candidates, ctx, top_n=top_n)
        except SuggestionError as e:
            logger.info("Cannot perform suggestion", reason=str(e))
            return SuggestionResponse(results=[], can_perform=False, error=str(e))

        if results:
            top = results[0]
            logger.info(
                "Generated suggestions",
                count=len(results),
                top_candidate=top.item.id,
                top_confidence=top.confidence,
            )
        return SuggestionResponse(results=results, can_perform=True)


# =============================================================================
# Module-level convenience
# =============================================================================

_engine: Optional[SuggestionEngine] = None


def get_suggestion_engine() -> SuggestionEngine:
    """Get the shared engine singleton."""
    global _engine
    if _engine is None:
        _engine = SuggestionEngine()
    return _engine


def get_suggestions(
    partial_context: PartialContext,
    candidates: Optional[Sequence[Candidate]],
    top_n: int = DEFAULT_TOP_N,
) -> SuggestionResponse:
    return get_suggestion_engine().get_suggestions(partial_context, candidates, top_n)
