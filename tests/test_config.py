"""Tests for config loading."""

import os
import tempfile

import pytest

from flyerchef.config import FlyerChefConfig, load_config
from flyerchef.models import CuisineType, Preferences


@pytest.fixture(autouse=True)
def _clear_api_keys(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


def _load_toml(content: bytes) -> FlyerChefConfig:
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(content)
        f.flush()
        config = load_config(f.name)

    os.unlink(f.name)
    return config


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, FlyerChefConfig)
    assert config.analysis.backend == "gemini"
    assert config.analysis.gemini.api_key == ""
    assert config.analysis.gemini.model == "gemini-3-flash-preview"
    assert config.analysis.claude.model == "claude-sonnet-4-5-20250929"
    assert config.analysis.claude.max_tokens == 8192
    assert config.preferences.budget == 1000
    assert config.preferences.cuisine is CuisineType.JAPANESE
    assert config.preferences.budget_presets == [500, 1000, 1500, 2000]


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.analysis.backend == "gemini"


def test_load_config_from_toml():
    """Loading a valid TOML file populates config."""
    config = _load_toml("""\
[analysis]
backend = "claude"

[analysis.claude]
api_key = "test-key-123"
model = "claude-test"
max_tokens = 2048

[preferences]
budget = 1500
cuisine = "中華"
budget_presets = [300, 600]
""".encode())

    assert config.analysis.backend == "claude"
    assert config.analysis.claude.api_key == "test-key-123"
    assert config.analysis.claude.model == "claude-test"
    assert config.analysis.claude.max_tokens == 2048
    assert config.preferences.budget == 1500
    assert config.preferences.cuisine is CuisineType.CHINESE
    assert config.preferences.budget_presets == [300, 600]


def test_load_config_cuisine_by_name():
    config = _load_toml(b'[preferences]\ncuisine = "omotenashi"\n')
    assert config.preferences.cuisine is CuisineType.OMOTENASHI


def test_load_config_unknown_cuisine():
    with pytest.raises(ValueError, match="不明なジャンル"):
        _load_toml(b'[preferences]\ncuisine = "space"\n')


def test_load_config_env_override(monkeypatch):
    """Environment variables override empty API keys."""
    monkeypatch.setenv("GEMINI_API_KEY", "env-gemini-key")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-anthropic-key")

    config = load_config()
    assert config.analysis.gemini.api_key == "env-gemini-key"
    assert config.analysis.claude.api_key == "env-anthropic-key"


def test_load_config_file_key_takes_precedence(monkeypatch):
    """Config file API key takes precedence over env var."""
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    config = _load_toml(b'[analysis.gemini]\napi_key = "file-key"\n')
    assert config.analysis.gemini.api_key == "file-key"


def test_load_config_partial_toml():
    """Partial TOML uses defaults for missing sections."""
    config = _load_toml(b"[preferences]\nbudget = 800\n")
    assert config.preferences.budget == 800
    assert config.analysis.backend == "gemini"
    assert config.preferences.cuisine is CuisineType.JAPANESE


def test_preferences_defaults_are_fresh():
    config = load_config()
    first = config.preferences.defaults()
    second = config.preferences.defaults()
    assert first == Preferences()
    assert first is not second
