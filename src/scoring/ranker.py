"""
CandidateRanker -- scores a catalog snapshot and returns the shortlist.

Scores every candidate (sequentially or on a thread pool), drops any
candidate whose scoring raised, sorts best-first with a stable sort so
equal scores keep catalog order, truncates to ``top_n`` and attaches
confidence plus human-readable reasons.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from core.logging import get_logger
from scoring.candidate import Candidate
from scoring.constants import (
    CONFIDENCE_FLOOR_SCORE,
    CONFIDENCE_SPAN,
    DEFAULT_TOP_N,
    MATCHING_FACTOR_COUNT,
    REASON_SEPARATOR,
)
from scoring.context import ConditionContext
from scoring.errors import EmptyCatalogError
from scoring.scorer import CandidateScorer, ScoreResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class Suggestion:
    item: Candidate
    score: float
    confidence: float
    reason: str
    matching_factors: Tuple[str, ...]


def normalize_confidence(score: float) -> float:
    """
    Squash a raw score into ``[0, 1]``.

    20 or less -> 0.0, 70 -> 0.5, 120 or more -> 1.0. Rounded to 2 decimals.
    """
    normalized = min(1.0, max(0.0, (score - CONFIDENCE_FLOOR_SCORE) / CONFIDENCE_SPAN))
    return round(normalized, 2)


class CandidateRanker:
    """
    Ranks candidates against one condition context.

    Args:
        scorer: Scorer used for every candidate.
        max_workers: 0 scores in the calling thread; >0 uses a thread pool.
    """

    def __init__(
        self,
        scorer: Optional[CandidateScorer] = None,
        max_workers: int = 0,
    ) -> None:
        self._scorer = scorer or CandidateScorer()
        self._max_workers = max_workers

    def rank(
        self,
        candidates: Sequence[Candidate],
        ctx: ConditionContext,
        top_n: int = DEFAULT_TOP_N,
    ) -> List[Suggestion]:
        """
        Best-first shortlist of at most ``top_n`` suggestions.

        Raises:
            EmptyCatalogError: if ``candidates`` is empty.
        """
        if not candidates:
            raise EmptyCatalogError()

        scored = self._score_all(candidates, ctx)
        # list.sort is stable: ties keep catalog order
        scored.sort(key=lambda pair: pair[1].score, reverse=True)

        return [
            Suggestion(
                item=candidate,
                score=result.score,
                confidence=normalize_confidence(result.score),
                reason=REASON_SEPARATOR.join(result.reasons),
                matching_factors=tuple(result.reasons[:MATCHING_FACTOR_COUNT]),
            )
            for candidate, result in scored[:max(0, top_n)]
        ]

    def _score_all(
        self, candidates: Sequence[Candidate], ctx: ConditionContext,
    ) -> List[Tuple[Candidate, ScoreResult]]:
        """Score every candidate, keeping catalog order and skipping failures."""
        results: List[Optional[ScoreResult]] = [None] * len(candidates)

        if self._max_workers > 0 and len(candidates) > 1:
            with ThreadPoolExecutor(
                max_workers=min(len(candidates), self._max_workers),
            ) as executor:
                futures = {
                    executor.submit(self._scorer.score, c, ctx): i
                    for i, c in enumerate(candidates)
                }
                for future in as_completed(futures):
                    idx = futures[future]
                    try:
                        results[idx] = future.result()
                    except Exception as e:
                        self._log_failure(candidates[idx], e)
        else:
            for idx, candidate in enumerate(candidates):
                try:
                    results[idx] = self._scorer.score(candidate, ctx)
                except Exception as e:
                    self._log_failure(candidate, e)

        return [
            (candidate, result)
            for candidate, result in zip(candidates, results)
            if result is not None
        ]

    @staticmethod
    def _log_failure(candidate: Candidate, error: Exception) -> None:
        logger.warning(
            "Candidate scoring failed, excluding from ranking",
            candidate_id=getattr(candidate, "id", None),
            error=str(error),
            error_type=type(error).__name__,
        )
