"""
Custom exception hierarchy for scorecard reconciliation.

Bad pin data is never an exception here: it is clamped and reported as an
issue on the game. These exceptions cover structural failures only, where
there is nothing sensible to clamp.
"""

from __future__ import annotations


class ScorecardError(Exception):
    """Base exception for all structural scorecard failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class PayloadParseError(ScorecardError):
    """No JSON payload could be recovered from the vision model's reply."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("PAYLOAD_PARSE_FAILED", message, details)


class FrameIndexError(ScorecardError):
    """A correction targeted a frame that does not exist."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("FRAME_INDEX_OUT_OF_RANGE", message, details)
