"""
Outcome recording.

After an angler reports whether a suggested candidate worked, the outcome
statistics on that candidate are updated. The suggestion engine only reads
these statistics; it never calls into this module.
"""

from dataclasses import dataclass, replace

from scoring.candidate import Candidate


@dataclass(frozen=True)
class OutcomeStats:
    use_count: int
    success_count: int
    success_rate: float


def record_outcome(candidate: Candidate, was_successful: bool) -> Candidate:
    """Return a copy of ``candidate`` with one more recorded use."""
    stats = next_stats(
        candidate.historical_use_count,
        candidate.historical_success_count,
        was_successful,
    )
    return replace(
        candidate,
        historical_use_count=stats.use_count,
        historical_success_count=stats.success_count,
        historical_success_rate=stats.success_rate,
    )


def next_stats(use_count: int, success_count: int, was_successful: bool) -> OutcomeStats:
    uses = use_count + 1
    successes = success_count + (1 if was_successful else 0)
    return OutcomeStats(
        use_count=uses,
        success_count=successes,
        success_rate=successes / uses,
    )
