"""
CandidateScorer -- folds the rule pipeline into one raw score.

Usage::

    from scoring.scorer import CandidateScorer
    from scoring.context_resolver import ContextResolver

    ctx = ContextResolver().build(partial_context)
    scorer = CandidateScorer()

    result = scorer.score(candidate, ctx)
    result.score, result.reasons

    # Per-rule breakdown for debugging / admin UI
    scorer.explain(candidate, ctx)
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from scoring.candidate import Candidate
from scoring.context import ConditionContext
from scoring.rules import RULES, Rule

MIN_SCORE = 0.0


@dataclass(frozen=True)
class ScoreResult:
    score: float
    reasons: Tuple[str, ...]


class CandidateScorer:
    """
    Scores one candidate against a condition context.

    Stateless; safe to share across threads / reuse across requests.
    """

    def __init__(self, rules: Optional[Sequence[Tuple[str, Rule]]] = None) -> None:
        self._rules = tuple(rules) if rules is not None else RULES

    def score(self, candidate: Candidate, ctx: ConditionContext) -> ScoreResult:
        """
        Raw score for one candidate.

        Starts at 0, adds every rule outcome, then floors at ``MIN_SCORE``.
        Unbounded above.
        """
        total = 0.0
        reasons: List[str] = []
        for _name, rule in self._rules:
            for outcome in rule(candidate, ctx):
                total += outcome.delta
                if outcome.reason:
                    reasons.append(outcome.reason)
        return ScoreResult(score=max(MIN_SCORE, total), reasons=tuple(reasons))

    def explain(self, candidate: Candidate, ctx: ConditionContext) -> dict:
        """
        Return detailed breakdown of scoring for debugging / admin UI.
        """
        breakdown: dict = {"rules": {}, "raw_total": 0.0}
        for name, rule in self._rules:
            outcomes = rule(candidate, ctx)
            if not outcomes:
                continue
            delta = sum(o.delta for o in outcomes)
            breakdown["rules"][name] = {
                "delta": round(delta, 4),
                "reasons": [o.reason for o in outcomes if o.reason],
            }
            breakdown["raw_total"] += delta

        breakdown["raw_total"] = round(breakdown["raw_total"], 4)
        breakdown["score"] = round(max(MIN_SCORE, breakdown["raw_total"]), 4)
        return breakdown
