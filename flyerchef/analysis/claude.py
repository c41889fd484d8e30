"""Claude API backend for flyer analysis."""

from __future__ import annotations

from typing import Any

from ..request import AnalysisRequest
from . import FlyerAnalyzer
from .prompt import build_prompt
from .reply import IdFactory


class ClaudeFlyerAnalyzer(FlyerAnalyzer):
    """Analyze flyers with Claude's vision and document input."""

    def __init__(
        self,
        client: Any = None,
        api_key: str = "",
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 8192,
        id_factory: IdFactory | None = None,
    ) -> None:
        super().__init__(id_factory)
        self._model = model
        self._max_tokens = max_tokens
        self._client = client if client is not None else _make_client(api_key)

    async def _generate(self, request: AnalysisRequest) -> str:
        # PDFs go in a document block, everything else as an image
        block_type = "document" if request.submission.is_pdf else "image"
        content: list[dict] = [
            {
                "type": block_type,
                "source": {
                    "type": "base64",
                    "media_type": request.mime_type,
                    "data": request.encoded_data(),
                },
            },
            {
                "type": "text",
                "text": build_prompt(request.budget, request.cuisine, with_schema=True),
            },
        ]

        response = await self._client.messages.create(
            model=self._model,
            max_tokens=self._max_tokens,
            messages=[{"role": "user", "content": content}],
        )

        return "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )


def _make_client(api_key: str) -> Any:
    if not api_key:
        raise ValueError(
            "Anthropic APIキーが設定されていません。"
            "設定ファイルまたは ANTHROPIC_API_KEY 環境変数を確認してください。"
        )

    try:
        import anthropic
    except ImportError:
        raise ImportError(
            "anthropic SDK is required: pip install anthropic"
        ) from None

    return anthropic.AsyncAnthropic(api_key=api_key)
