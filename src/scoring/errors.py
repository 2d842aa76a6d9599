"""Errors surfaced by the suggestion engine."""


class SuggestionError(Exception):
    """Base error for conditions that stop the engine from scoring."""

    message = "Failed to get suggestions"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


class InsufficientContextError(SuggestionError):
    """Raised when the context has no location or coordinates."""

    message = "Insufficient location data. Please select a location on the map first."


class EmptyCatalogError(SuggestionError):
    """Raised when there are no candidates to score."""

    message = "No candidates found in catalog. Please populate the catalog first."
