"""TOML configuration loader."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .models import BUDGET_PRESETS, DEFAULT_BUDGET, CuisineType, Preferences

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class GeminiAnalysisConfig:
    api_key: str = ""
    model: str = "gemini-3-flash-preview"


@dataclass
class ClaudeAnalysisConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 8192


@dataclass
class AnalysisConfig:
    backend: str = "gemini"
    gemini: GeminiAnalysisConfig = field(default_factory=GeminiAnalysisConfig)
    claude: ClaudeAnalysisConfig = field(default_factory=ClaudeAnalysisConfig)


@dataclass
class PreferencesConfig:
    budget: int = DEFAULT_BUDGET
    cuisine: CuisineType = CuisineType.JAPANESE
    budget_presets: list[int] = field(default_factory=lambda: list(BUDGET_PRESETS))

    def defaults(self) -> Preferences:
        """Fresh Preferences for a new or reset session."""
        return Preferences(budget=self.budget, cuisine=self.cuisine)


@dataclass
class FlyerChefConfig:
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    preferences: PreferencesConfig = field(default_factory=PreferencesConfig)


def load_config(path: str | Path | None = None) -> FlyerChefConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    ana = raw.get("analysis", {})
    prf = raw.get("preferences", {})

    gemini_cfg = ana.get("gemini", {})
    claude_cfg = ana.get("claude", {})

    # Resolve API keys: config file → environment variable
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )

    cuisine = prf.get("cuisine")

    return FlyerChefConfig(
        analysis=AnalysisConfig(
            backend=ana.get("backend", "gemini"),
            gemini=GeminiAnalysisConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-3-flash-preview"),
            ),
            claude=ClaudeAnalysisConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
                max_tokens=claude_cfg.get("max_tokens", 8192),
            ),
        ),
        preferences=PreferencesConfig(
            budget=prf.get("budget", DEFAULT_BUDGET),
            cuisine=CuisineType.parse(cuisine) if cuisine else CuisineType.JAPANESE,
            budget_presets=prf.get("budget_presets", list(BUDGET_PRESETS)),
        ),
    )
