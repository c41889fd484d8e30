"""Turn the model's JSON reply into a tagged AnalysisResult."""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from typing import Any

from ..models import AnalysisResult, FlyerAnalysis, Ingredient, NotAFlyer, Recipe

IdFactory = Callable[[int], str]


class ReplyFormatError(ValueError):
    """The reply text does not match the declared response shape."""


def timestamp_ids() -> IdFactory:
    """Return a factory producing ``recipe-{index}-{epoch_ms}`` identifiers.

    The timestamp is taken once, so IDs within one result differ only by
    index and are pairwise distinct.
    """
    stamp = int(time.time() * 1000)
    return lambda index: f"recipe-{index}-{stamp}"


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned


def _as_list(value: Any, key: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ReplyFormatError(f"{key} は配列である必要があります: {type(value).__name__}")
    return value


def _as_count(value: Any) -> int:
    """Coerce a numeric field to a non-negative int."""
    if isinstance(value, bool):
        raise ReplyFormatError(f"数値ではありません: {value!r}")
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError) as e:
        raise ReplyFormatError(f"数値ではありません: {value!r}") from e


def _as_text(value: Any) -> str:
    """Coerce a text field; JSON null becomes an empty string."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ReplyFormatError(f"文字列ではありません: {value!r}")
    return str(value)


def _as_flag(value: Any) -> bool:
    """Accept a JSON boolean or the strings "true"/"false"; missing is False."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ReplyFormatError(f"真偽値ではありません: {value!r}")


def _parse_ingredient(item: Any) -> Ingredient:
    if not isinstance(item, dict):
        raise ReplyFormatError(f"材料の形式が不正です: {item!r}")
    return Ingredient(
        name=_as_text(item.get("name")),
        quantity=_as_text(item.get("quantity")),
        is_discounted=_as_flag(item.get("isDiscounted")),
    )


def _parse_recipe(item: Any, recipe_id: str) -> Recipe:
    if not isinstance(item, dict):
        raise ReplyFormatError(f"レシピの形式が不正です: {item!r}")
    return Recipe(
        id=recipe_id,
        title=_as_text(item.get("title")),
        description=_as_text(item.get("description")),
        cooking_time_minutes=_as_count(item.get("cookingTimeMinutes")),
        estimated_cost=_as_count(item.get("estimatedCost")),
        savings_note=_as_text(item.get("savingsNote")),
        ingredients=tuple(
            _parse_ingredient(i)
            for i in _as_list(item.get("ingredients"), "ingredients")
        ),
        instructions=tuple(
            _as_text(s) for s in _as_list(item.get("instructions"), "instructions")
        ),
    )


def parse_reply(text: str | None, id_factory: IdFactory | None = None) -> AnalysisResult:
    """Parse the reply text into FlyerAnalysis or NotAFlyer.

    Missing ``detectedDeals`` / ``recipes`` default to empty. Fields that
    belong to the other branch are dropped.

    Raises:
        ReplyFormatError: Empty text, invalid JSON, or a shape that does
            not fit either branch.
    """
    if not text or not text.strip():
        raise ReplyFormatError("応答が空です")

    try:
        data = json.loads(_strip_fences(text))
    except json.JSONDecodeError as e:
        raise ReplyFormatError(f"JSONとして解析できません: {e}") from e

    if not isinstance(data, dict):
        raise ReplyFormatError(f"JSONオブジェクトではありません: {type(data).__name__}")

    is_flyer = data.get("isFlyer")
    if not isinstance(is_flyer, bool):
        raise ReplyFormatError(f"isFlyer が真偽値ではありません: {is_flyer!r}")

    if not is_flyer:
        joke = data.get("joke")
        if not isinstance(joke, str) or not joke.strip():
            raise ReplyFormatError("チラシ以外と判定されましたがコメントがありません")
        return NotAFlyer(joke=joke)

    make_id = id_factory or timestamp_ids()
    deals = tuple(_as_text(d) for d in _as_list(data.get("detectedDeals"), "detectedDeals"))
    recipes = tuple(
        _parse_recipe(item, make_id(index))
        for index, item in enumerate(_as_list(data.get("recipes"), "recipes"))
    )
    ids = [r.id for r in recipes]
    if len(set(ids)) != len(ids):
        raise ReplyFormatError(f"レシピIDが重複しています: {ids}")
    return FlyerAnalysis(detected_deals=deals, recipes=recipes)
