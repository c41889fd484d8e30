"""Tests for preference, submission and result data types."""

import pytest

from flyerchef.models import (
    AnalysisResult,
    CuisineType,
    FlyerAnalysis,
    FlyerSubmission,
    Ingredient,
    NotAFlyer,
    Preferences,
    Recipe,
)


def _make_recipe(ingredients: list[Ingredient] | None = None) -> Recipe:
    return Recipe(
        id="recipe-0-1",
        title="豚こま生姜焼き",
        description="特売の豚こまで作る定番おかず",
        cooking_time_minutes=15,
        estimated_cost=480,
        savings_note="豚こまが半額",
        ingredients=tuple(ingredients or []),
        instructions=("豚肉を焼く", "タレを絡める"),
    )


class TestCuisineType:
    def test_labels(self):
        assert CuisineType.JAPANESE.label == "和食"
        assert CuisineType.OTHER.label == "その他"

    def test_parse_by_name(self):
        assert CuisineType.parse("chinese") is CuisineType.CHINESE
        assert CuisineType.parse("WESTERN") is CuisineType.WESTERN

    def test_parse_by_label(self):
        assert CuisineType.parse("おもてなし") is CuisineType.OMOTENASHI
        assert CuisineType.parse(" 凝った料理 ") is CuisineType.ELABORATE

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="不明なジャンル"):
            CuisineType.parse("宇宙食")


class TestPreferences:
    def test_defaults(self):
        prefs = Preferences()
        assert prefs.budget == 1000
        assert prefs.cuisine is CuisineType.JAPANESE
        assert prefs.custom_cuisine is None

    def test_effective_cuisine_uses_label(self):
        prefs = Preferences(cuisine=CuisineType.CHINESE, custom_cuisine="無視される")
        assert prefs.effective_cuisine == "中華"

    def test_effective_cuisine_other_uses_custom_text(self):
        prefs = Preferences(cuisine=CuisineType.OTHER, custom_cuisine="激辛料理")
        assert prefs.effective_cuisine == "激辛料理"

    def test_effective_cuisine_other_without_text(self):
        prefs = Preferences(cuisine=CuisineType.OTHER)
        assert prefs.effective_cuisine == ""


class TestFlyerSubmission:
    def test_from_path_guesses_media_type(self, tmp_path):
        img = tmp_path / "flyer.jpg"
        img.write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
        sub = FlyerSubmission.from_path(img)
        assert sub.mime_type == "image/jpeg"
        assert sub.filename == "flyer.jpg"
        assert sub.data == b"\xff\xd8\xff\xe0fake-jpeg"
        assert sub.is_pdf is False

    def test_from_path_pdf(self, tmp_path):
        pdf = tmp_path / "chirashi.pdf"
        pdf.write_bytes(b"%PDF-1.4")
        assert FlyerSubmission.from_path(pdf).is_pdf is True

    def test_from_path_unknown_extension(self, tmp_path):
        f = tmp_path / "flyer.unknownext"
        f.write_bytes(b"data")
        assert FlyerSubmission.from_path(f).mime_type == "application/octet-stream"

    def test_from_path_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FlyerSubmission.from_path(tmp_path / "nope.png")

    def test_release(self):
        sub = FlyerSubmission(b"abc", "image/png", "a.png")
        assert sub.released is False
        sub.release()
        assert sub.released is True
        with pytest.raises(RuntimeError, match="解放"):
            _ = sub.data
        sub.release()  # second release is a no-op

    def test_context_manager_releases(self):
        with FlyerSubmission(b"abc", "image/png") as sub:
            assert sub.data == b"abc"
        assert sub.released is True


class TestRecipe:
    def test_discount_preview_keeps_source_order(self):
        recipe = _make_recipe([
            Ingredient("豚こま", "200g", True),
            Ingredient("醤油", "大さじ2", False),
            Ingredient("キャベツ", "1/4個", True),
            Ingredient("玉ねぎ", "1個", True),
            Ingredient("しょうが", "1かけ", True),
        ])
        preview, more = recipe.discount_preview()
        assert [i.name for i in preview] == ["豚こま", "キャベツ", "玉ねぎ"]
        assert more is True

    def test_discount_preview_without_more(self):
        recipe = _make_recipe([Ingredient("卵", "2個", True)])
        preview, more = recipe.discount_preview()
        assert len(preview) == 1
        assert more is False

    def test_to_dict_uses_wire_keys(self):
        recipe = _make_recipe([Ingredient("卵", "2個", True)])
        data = recipe.to_dict()
        assert data["id"] == "recipe-0-1"
        assert data["cookingTimeMinutes"] == 15
        assert data["estimatedCost"] == 480
        assert data["ingredients"] == [
            {"name": "卵", "quantity": "2個", "isDiscounted": True}
        ]
        assert data["instructions"] == ["豚肉を焼く", "タレを絡める"]


class TestAnalysisResult:
    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            AnalysisResult()

    def test_subclass_must_implement_display(self):
        class Partial(AnalysisResult):
            pass

        with pytest.raises(TypeError):
            Partial()

    def test_both_branches_are_results(self):
        assert isinstance(NotAFlyer(joke="ボケ"), AnalysisResult)
        assert isinstance(FlyerAnalysis(), AnalysisResult)

    def test_flyer_analysis_branch(self):
        result = FlyerAnalysis(detected_deals=("豚こま",), recipes=(_make_recipe(),))
        assert result.is_flyer is True
        assert result.joke is None
        assert result.to_dict()["isFlyer"] is True

    def test_not_a_flyer_branch(self):
        result = NotAFlyer(joke="可愛い猫ですが晩御飯にはできません！")
        assert result.is_flyer is False
        assert result.detected_deals == ()
        assert result.recipes == ()
        assert result.to_dict() == {
            "isFlyer": False,
            "joke": "可愛い猫ですが晩御飯にはできません！",
            "detectedDeals": [],
            "recipes": [],
        }

    def test_not_a_flyer_requires_joke(self):
        with pytest.raises(ValueError):
            NotAFlyer(joke="  ")

    def test_results_are_immutable(self):
        result = NotAFlyer(joke="ボケ")
        with pytest.raises(AttributeError):
            result.joke = "別のボケ"

    def test_flyer_display(self):
        recipe = _make_recipe([
            Ingredient("豚こま", "200g", True),
            Ingredient("醤油", "大さじ2", False),
        ])
        result = FlyerAnalysis(detected_deals=("豚こま", "キャベツ"), recipes=(recipe,))
        text = result.display(Preferences(budget=1000))
        assert "豚こま, キャベツ" in text
        assert "予算: 1000円 / 和食" in text
        assert "¥480" in text
        assert "15分" in text
        assert "1. 豚肉を焼く" in text
        assert "特売活用: [豚こま]" in text

    def test_not_a_flyer_display(self):
        text = NotAFlyer(joke="ここに特売のキャベツは生えてません").display()
        assert "ここに特売のキャベツは生えてません" in text
