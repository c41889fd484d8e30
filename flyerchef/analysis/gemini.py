"""Gemini API backend for flyer analysis."""

from __future__ import annotations

from typing import Any

from ..request import AnalysisRequest
from . import FlyerAnalyzer
from .prompt import RESPONSE_SCHEMA, build_prompt
from .reply import IdFactory


class GeminiFlyerAnalyzer(FlyerAnalyzer):
    """Analyze flyers with Gemini's structured JSON output."""

    def __init__(
        self,
        client: Any = None,
        api_key: str = "",
        model: str = "gemini-3-flash-preview",
        id_factory: IdFactory | None = None,
    ) -> None:
        super().__init__(id_factory)
        self._model = model
        self._client = client if client is not None else _make_client(api_key)

    async def _generate(self, request: AnalysisRequest) -> str:
        contents = [
            {
                "role": "user",
                "parts": [
                    {
                        "inline_data": {
                            "mime_type": request.mime_type,
                            "data": request.submission.data,
                        }
                    },
                    {"text": build_prompt(request.budget, request.cuisine)},
                ],
            }
        ]
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=contents,
            config={
                "response_mime_type": "application/json",
                "response_schema": RESPONSE_SCHEMA,
            },
        )
        return response.text


def _make_client(api_key: str) -> Any:
    if not api_key:
        raise ValueError(
            "Gemini APIキーが設定されていません。"
            "設定ファイルまたは GEMINI_API_KEY 環境変数を確認してください。"
        )

    try:
        from google import genai
    except ImportError:
        raise ImportError(
            "google-genai SDK is required: pip install google-genai"
        ) from None

    return genai.Client(api_key=api_key)
