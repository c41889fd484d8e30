"""Analysis backend base class and factory."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..errors import AnalysisError
from ..models import AnalysisResult, FlyerSubmission, Preferences
from ..request import AnalysisRequest, build_request
from .reply import IdFactory, parse_reply

if TYPE_CHECKING:
    from ..config import FlyerChefConfig

logger = logging.getLogger(__name__)


class FlyerAnalyzer(ABC):
    """Sends a flyer to a multimodal model and normalizes the reply.

    Subclasses perform the single round trip in ``_generate``; every
    failure from there on is turned into ``AnalysisError``.
    """

    def __init__(self, id_factory: IdFactory | None = None) -> None:
        self._id_factory = id_factory

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        logger.info(
            "チラシ解析開始: %s (%s) 予算=%d円 ジャンル=%s",
            request.submission.filename or "-",
            request.mime_type,
            request.budget,
            request.cuisine,
        )
        try:
            text = await self._generate(request)
            result = parse_reply(text, self._id_factory)
        except Exception as e:
            logger.exception("チラシ解析エラー: %s", e)
            raise AnalysisError() from e

        logger.info(
            "チラシ解析完了: isFlyer=%s 特売品=%d レシピ=%d",
            result.is_flyer,
            len(result.detected_deals),
            len(result.recipes),
        )
        return result

    @abstractmethod
    async def _generate(self, request: AnalysisRequest) -> str:
        """Perform one request and return the raw reply text."""
        ...


async def analyze_flyer(
    analyzer: FlyerAnalyzer,
    submission: FlyerSubmission | None,
    preferences: Preferences,
) -> AnalysisResult:
    """Validate the inputs, then analyze.

    Raises ``ValidationError`` without calling the analyzer when the
    inputs are incomplete.
    """
    request = build_request(submission, preferences)
    return await analyzer.analyze(request)


def create_analyzer(config: FlyerChefConfig, client: Any = None) -> FlyerAnalyzer:
    """Create an analysis backend based on configuration.

    ``client`` is passed straight to the backend; when omitted the backend
    builds one from the configured API key.
    """
    backend_name = config.analysis.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiFlyerAnalyzer

            return GeminiFlyerAnalyzer(
                client=client,
                api_key=config.analysis.gemini.api_key,
                model=config.analysis.gemini.model,
            )
        case "claude":
            from .claude import ClaudeFlyerAnalyzer

            return ClaudeFlyerAnalyzer(
                client=client,
                api_key=config.analysis.claude.api_key,
                model=config.analysis.claude.model,
                max_tokens=config.analysis.claude.max_tokens,
            )
        case _:
            raise ValueError(
                f"不明な解析バックエンド: {backend_name!r}  "
                f"(gemini / claude から選択してください)"
            )
