"""Build and validate analysis requests before any network call."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass

from .errors import ValidationError
from .models import CuisineType, FlyerSubmission, Preferences

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisRequest:
    submission: FlyerSubmission
    budget: int  # 円
    cuisine: str  # 解決済みのジャンル名

    @property
    def mime_type(self) -> str:
        return self.submission.mime_type

    def encoded_data(self) -> str:
        """Return the flyer bytes as base64 text for transport."""
        return base64.standard_b64encode(self.submission.data).decode()


def parse_budget(text: str | int | None) -> int:
    """Parse a budget entered as free text.

    Anything that is not an integer becomes 0, which ``build_request``
    then rejects.
    """
    if isinstance(text, bool) or text is None:
        return 0
    if isinstance(text, int):
        return text
    cleaned = text.strip().replace(",", "").removesuffix("円").strip()
    try:
        return int(cleaned)
    except ValueError:
        return 0


def resolve_cuisine(preferences: Preferences) -> str:
    """Return the cuisine label to send onward."""
    cuisine = preferences.effective_cuisine
    if preferences.cuisine is CuisineType.OTHER and not cuisine.strip():
        logger.warning("ジャンル「その他」が選択されていますが、内容が空のまま送信します")
    return cuisine


def build_request(
    submission: FlyerSubmission | None, preferences: Preferences
) -> AnalysisRequest:
    """Validate inputs and assemble an AnalysisRequest.

    Raises:
        ValidationError: No file is selected, or the budget is not a
            positive integer.
    """
    if submission is None or submission.released:
        raise ValidationError("チラシファイルをアップロードしてください")

    budget = preferences.budget
    if isinstance(budget, bool) or not isinstance(budget, int) or budget <= 0:
        raise ValidationError("予算を正しく入力してください")

    return AnalysisRequest(
        submission=submission,
        budget=budget,
        cuisine=resolve_cuisine(preferences),
    )
