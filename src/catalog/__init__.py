"""
Candidate catalog.

Supplies read-only catalog snapshots to the suggestion engine and records
real-world outcomes back onto candidates.
"""

from catalog.feedback import OutcomeStats, record_outcome
from catalog.repository import (
    CandidateNotFoundError,
    CatalogError,
    InMemoryCatalog,
    load_catalog,
)

__all__ = [
    "CandidateNotFoundError",
    "CatalogError",
    "InMemoryCatalog",
    "load_catalog",
    "OutcomeStats",
    "record_outcome",
]
