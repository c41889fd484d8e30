"""Data types for preferences, uploaded flyers, and analysis results."""

from __future__ import annotations

import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

DEFAULT_BUDGET = 1000
BUDGET_PRESETS = [500, 1000, 1500, 2000]


class CuisineType(Enum):
    JAPANESE = "和食"
    WESTERN = "洋食"
    CHINESE = "中華"
    OMOTENASHI = "おもてなし"
    ELABORATE = "凝った料理"
    OTHER = "その他"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> CuisineType:
        """Look up a cuisine by member name (any case) or Japanese label."""
        cleaned = text.strip()
        for member in cls:
            if cleaned == member.value or cleaned.upper() == member.name:
                return member
        choices = ", ".join(f"{m.name.lower()}({m.value})" for m in cls)
        raise ValueError(f"不明なジャンル: {text!r}  ({choices} から選択してください)")


@dataclass
class Preferences:
    budget: int = DEFAULT_BUDGET  # 円
    cuisine: CuisineType = CuisineType.JAPANESE
    custom_cuisine: str | None = None  # cuisine が OTHER のときだけ使う

    @property
    def effective_cuisine(self) -> str:
        """Cuisine label sent to the model.

        OTHER is replaced verbatim by the custom text, even when empty.
        """
        if self.cuisine is CuisineType.OTHER:
            return self.custom_cuisine or ""
        return self.cuisine.label


class FlyerSubmission:
    """An uploaded flyer file held in memory until released.

    The buffer is dropped on ``release()``; any later read raises.
    """

    def __init__(
        self, data: bytes, mime_type: str, filename: str = ""
    ) -> None:
        self._data: bytes | None = data
        self.mime_type = mime_type
        self.filename = filename

    @classmethod
    def from_path(cls, path: str | Path) -> FlyerSubmission:
        p = Path(path)
        if not p.is_file():
            raise FileNotFoundError(f"ファイルが見つかりません: {p}")
        mime_type = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
        return cls(p.read_bytes(), mime_type, filename=p.name)

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise RuntimeError(f"{self.filename or 'flyer'} は既に解放されています")
        return self._data

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == "application/pdf"

    def release(self) -> None:
        self._data = None

    def __enter__(self) -> FlyerSubmission:
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()

    def __repr__(self) -> str:
        size = "released" if self._data is None else f"{len(self._data)} bytes"
        return f"FlyerSubmission({self.filename!r}, {self.mime_type!r}, {size})"


@dataclass(frozen=True)
class Ingredient:
    name: str
    quantity: str  # "2個", "200g" など自由記述
    is_discounted: bool  # チラシの特売品なら True


@dataclass(frozen=True)
class Recipe:
    id: str
    title: str
    description: str
    cooking_time_minutes: int
    estimated_cost: int  # 円
    savings_note: str
    ingredients: tuple[Ingredient, ...] = ()
    instructions: tuple[str, ...] = ()

    def discounted_ingredients(self) -> list[Ingredient]:
        return [i for i in self.ingredients if i.is_discounted]

    def discount_preview(self, limit: int = 3) -> tuple[list[Ingredient], bool]:
        """Return the first ``limit`` discounted ingredients and whether more exist."""
        discounted = self.discounted_ingredients()
        return discounted[:limit], len(discounted) > limit

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "cookingTimeMinutes": self.cooking_time_minutes,
            "estimatedCost": self.estimated_cost,
            "savingsNote": self.savings_note,
            "ingredients": [
                {
                    "name": i.name,
                    "quantity": i.quantity,
                    "isDiscounted": i.is_discounted,
                }
                for i in self.ingredients
            ],
            "instructions": list(self.instructions),
        }


class AnalysisResult(ABC):
    """Terminal payload of one analysis: either a flyer or not."""

    is_flyer: bool
    joke: str | None
    detected_deals: tuple[str, ...]
    recipes: tuple[Recipe, ...]

    @abstractmethod
    def display(self, preferences: Preferences) -> str:
        """Format the result for terminal display."""
        ...

    def to_dict(self) -> dict[str, Any]:
        return {
            "isFlyer": self.is_flyer,
            "joke": self.joke,
            "detectedDeals": list(self.detected_deals),
            "recipes": [r.to_dict() for r in self.recipes],
        }


@dataclass(frozen=True)
class FlyerAnalysis(AnalysisResult):
    detected_deals: tuple[str, ...] = ()
    recipes: tuple[Recipe, ...] = ()
    is_flyer: bool = field(default=True, init=False)
    joke: None = field(default=None, init=False)

    def display(self, preferences: Preferences) -> str:
        """Format deals and recipes for terminal display."""
        lines: list[str] = []
        lines.append("🏷  見つかった特売品")
        lines.append(f"   {', '.join(self.detected_deals) or '(なし)'}")
        lines.append("")
        lines.append(
            f"🍳 おすすめレシピ {len(self.recipes)}選  "
            f"(予算: {preferences.budget}円 / {preferences.effective_cuisine})"
        )

        for recipe in self.recipes:
            lines.append(f"{'─' * 50}")
            lines.append(f"  {recipe.title}  ¥{recipe.estimated_cost}")
            lines.append(f"  {recipe.description}")
            lines.append(f"  調理時間: {recipe.cooking_time_minutes}分")
            lines.append(f"  💡 ポイント: {recipe.savings_note}")

            preview, more = recipe.discount_preview()
            if preview:
                tags = " ".join(f"[{i.name}]" for i in preview)
                lines.append(f"  特売活用: {tags}{' +他' if more else ''}")

            if recipe.ingredients:
                lines.append("")
                lines.append("    材料:")
                for ing in recipe.ingredients:
                    mark = "●" if ing.is_discounted else " "
                    lines.append(f"    {mark} {ing.name:<12} {ing.quantity}")

            if recipe.instructions:
                lines.append("")
                lines.append("    作り方:")
                for j, step in enumerate(recipe.instructions, 1):
                    lines.append(f"      {j}. {step}")
            lines.append("")

        return "\n".join(lines)


@dataclass(frozen=True)
class NotAFlyer(AnalysisResult):
    joke: str
    is_flyer: bool = field(default=False, init=False)
    detected_deals: tuple[str, ...] = field(default=(), init=False)
    recipes: tuple[Recipe, ...] = field(default=(), init=False)

    def __post_init__(self) -> None:
        if not self.joke.strip():
            raise ValueError("チラシ以外の画像にはコメントが必要です")

    def display(self, preferences: Preferences | None = None) -> str:
        return "\n".join([
            "😆 これはチラシちゃいますやん！",
            "",
            f"  「{self.joke}」",
            "",
        ])
