"""Instruction text and structured-output schema for flyer analysis."""

from __future__ import annotations

import copy
import json
from typing import Any

RECIPE_COUNT = 3

_PROMPT = """\
あなたは「節約料理のエキスパート」兼「鋭いツッコミを持つお笑い芸人」です。
提供されたファイル（画像またはPDF）が「スーパーのチラシ」かどうかを判定してください。

【ケース1：スーパーのチラシの場合】
isFlyer: true
予算{budget}円前後、ジャンル「{cuisine}」で、チラシの特売品(isDiscounted=true)を活用したレシピを{count}つ提案してください。
各レシピには、レシピ名、簡単な説明、調理時間(分)、推定費用(円)、
チラシのどの特売品を使ってどうお得なのか(savingsNote)、材料の一覧、調理手順を含めてください。
joke: null

【ケース2：チラシではない場合】
isFlyer: false
画像の内容を認識し、それに対して全力で「ボケ」てください。
例えば、猫の写真なら「食べちゃいたいくらい可愛いですが、今日の晩御飯にはできません！」、
風景写真なら「壮大な景色ですね！でもここには特売のキャベツは生えてなさそうです。」など、
画像の内容に即したユーモアたっぷりのコメントを joke フィールドに入れてください。
detectedDeals, recipes: 空の配列

出力はJSON形式です。
"""

_SCHEMA_SUFFIX = """
以下のJSONスキーマに従うJSONオブジェクトだけを返してください（他のテキストは不要です）:
{schema}
"""

_INGREDIENT_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "quantity": {"type": "STRING"},
        "isDiscounted": {
            "type": "BOOLEAN",
            "description": "チラシの特売品ならtrue",
        },
    },
    "required": ["name", "quantity", "isDiscounted"],
}

_RECIPE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING", "description": "レシピ名"},
        "description": {"type": "STRING", "description": "料理の簡単な説明"},
        "cookingTimeMinutes": {"type": "INTEGER", "description": "調理時間(分)"},
        "estimatedCost": {"type": "INTEGER", "description": "推定費用(円)"},
        "savingsNote": {
            "type": "STRING",
            "description": "このレシピがどのようにお得か、チラシのどの食材を使っているか",
        },
        "ingredients": {"type": "ARRAY", "items": _INGREDIENT_SCHEMA},
        "instructions": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "調理手順のリスト",
        },
    },
    "required": [
        "title",
        "description",
        "cookingTimeMinutes",
        "estimatedCost",
        "ingredients",
        "instructions",
        "savingsNote",
    ],
}

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "isFlyer": {
            "type": "BOOLEAN",
            "description": "画像がスーパーのチラシであればtrue、そうでなければfalse",
        },
        "joke": {
            "type": "STRING",
            "nullable": True,
            "description": "チラシでなかった場合のボケ。チラシの場合はnullまたは空文字",
        },
        "detectedDeals": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "チラシから検出された主な特売品や食材のリスト",
        },
        "recipes": {"type": "ARRAY", "items": _RECIPE_SCHEMA},
    },
    "required": ["isFlyer", "joke", "detectedDeals", "recipes"],
}


def build_prompt(budget: int, cuisine: str, *, with_schema: bool = False) -> str:
    """Build the analysis instruction for the given budget and cuisine.

    With ``with_schema`` the JSON Schema is appended to the text, for
    services that take no separate schema parameter.
    """
    prompt = _PROMPT.format(budget=budget, cuisine=cuisine, count=RECIPE_COUNT)
    if with_schema:
        schema = json.dumps(to_json_schema(RESPONSE_SCHEMA), ensure_ascii=False, indent=2)
        prompt += _SCHEMA_SUFFIX.format(schema=schema)
    return prompt


def to_json_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Convert the OpenAPI-style schema to standard JSON Schema.

    Type names are lower-cased and ``nullable`` becomes a ``null`` type.
    """
    result = copy.deepcopy(schema)
    nullable = result.pop("nullable", False)
    if "type" in result:
        type_name = result["type"].lower()
        result["type"] = [type_name, "null"] if nullable else type_name
    if "properties" in result:
        result["properties"] = {
            key: to_json_schema(value) for key, value in result["properties"].items()
        }
    if "items" in result:
        result["items"] = to_json_schema(result["items"])
    return result
