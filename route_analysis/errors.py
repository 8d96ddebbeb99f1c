"""Central error types used across the library."""

from __future__ import annotations


class RouteAnalysisError(RuntimeError):
    """Base error for route analysis failures."""


class TrackValidationError(RouteAnalysisError):
    """Raised when a point sequence violates the ingestion invariants."""

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class TrackFormatError(RouteAnalysisError):
    """Raised when tabular track data is missing columns or cannot be parsed."""


__all__ = [
    "RouteAnalysisError",
    "TrackFormatError",
    "TrackValidationError",
]
