"""Exceptions raised by pain_verdict."""

from __future__ import annotations


class PainVerdictError(Exception):
    """Base class for pain_verdict errors."""


class EmbeddingBackendError(PainVerdictError):
    """Raised when the embedding backend fails after all retries."""

    def __init__(self, message: str, attempts: int | None = None):
        super().__init__(message)
        self.attempts = attempts


class RecordLoadError(PainVerdictError):
    """Raised when an input file cannot be parsed into records or themes."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not load {path}: {reason}")
        self.path = path
        self.reason = reason
