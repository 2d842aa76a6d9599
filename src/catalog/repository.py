"""
In-memory candidate catalog.

Loads curated candidate records from a JSON file (either a bare list or
``{"candidates": [...]}``) and hands out immutable snapshots. File order is
preserved; it is the tie-break order for equal scores.
"""

import json
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from catalog.feedback import record_outcome
from core.logging import get_logger
from scoring.candidate import Candidate, candidate_from_dict

logger = get_logger(__name__)


class CatalogError(Exception):
    """Raised when a catalog cannot be loaded or updated."""


class CandidateNotFoundError(CatalogError):
    def __init__(self, candidate_id: str):
        super().__init__(f"Candidate not found: {candidate_id}")
        self.candidate_id = candidate_id


class InMemoryCatalog:
    """
    Thread-safe catalog held in memory.

    Readers get a tuple snapshot; outcome recording swaps in an updated
    candidate without disturbing snapshots already handed out.
    """

    def __init__(self, candidates: Optional[Iterable[Candidate]] = None) -> None:
        self._candidates: List[Candidate] = list(candidates or [])
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._candidates)

    def get_candidates(self) -> Tuple[Candidate, ...]:
        with self._lock:
            return tuple(self._candidates)

    def get(self, candidate_id: str) -> Candidate:
        with self._lock:
            for candidate in self._candidates:
                if candidate.id == candidate_id:
                    return candidate
        raise CandidateNotFoundError(candidate_id)

    def record_outcome(self, candidate_id: str, was_successful: bool) -> Candidate:
        """Apply one reported outcome and return the updated candidate."""
        with self._lock:
            for idx, candidate in enumerate(self._candidates):
                if candidate.id == candidate_id:
                    updated = record_outcome(candidate, was_successful)
                    self._candidates[idx] = updated
                    break
            else:
                raise CandidateNotFoundError(candidate_id)

        logger.info(
            "Recorded candidate outcome",
            candidate_id=candidate_id,
            was_successful=was_successful,
            use_count=updated.historical_use_count,
            success_rate=round(updated.historical_success_rate, 4),
        )
        return updated


def parse_catalog(data: Union[List[Dict[str, Any]], Dict[str, Any]]) -> List[Candidate]:
    """Parse decoded catalog JSON into candidates."""
    if isinstance(data, dict):
        data = data.get("candidates")
    if not isinstance(data, list):
        raise CatalogError("Catalog must be a list of candidate records")

    candidates = []
    for idx, record in enumerate(data):
        if not isinstance(record, dict):
            raise CatalogError(f"Catalog record {idx} is not an object")
        try:
            candidates.append(candidate_from_dict(record))
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Malformed catalog record {idx}: {e}") from e
    return candidates


def load_catalog(path: Union[str, Path]) -> InMemoryCatalog:
    """
    Load a catalog file.

    Raises:
        CatalogError: if the file is missing, not JSON, or malformed.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog file is not valid JSON: {path}: {e}") from e

    candidates = parse_catalog(data)
    logger.info("Loaded catalog", path=str(path), candidate_count=len(candidates))
    return InMemoryCatalog(candidates)
