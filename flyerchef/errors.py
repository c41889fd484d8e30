"""Exception types shared across the flyer analysis flow."""

from __future__ import annotations

ANALYSIS_FAILED_MESSAGE = "チラシの解析中にエラーが発生しました。もう一度お試しください。"


class FlyerChefError(Exception):
    """Base class for errors surfaced to the user."""


class ValidationError(FlyerChefError, ValueError):
    """Raised before any analysis call when the input is incomplete."""


class AnalysisError(FlyerChefError, RuntimeError):
    """Raised when the analysis call or its reply fails in any way.

    The message is always the generic user-facing one; the underlying cause
    is logged and chained via ``__cause__``.
    """

    def __init__(self, message: str = ANALYSIS_FAILED_MESSAGE) -> None:
        super().__init__(message)
