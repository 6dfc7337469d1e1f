import json
from types import SimpleNamespace

import pytest

from htamin.services.gemini_client import (
    DEFAULT_INSIGHT_MM,
    JSON_ARRAY,
    ExtractionError,
    GeminiClient,
    extract_json,
)


def stub_client(text=None, exc=None):
    """GeminiClient whose underlying genai client returns `text` or raises `exc`."""
    sent = []

    def generate_content(**kwargs):
        sent.append(kwargs)
        if exc is not None:
            raise exc
        return SimpleNamespace(
            text=text,
            usage_metadata=SimpleNamespace(prompt_token_count=12, candidates_token_count=34, total_token_count=46),
        )

    client = GeminiClient(api_key="test-key", model_name="gemini-test")
    client._client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    client.sent = sent
    return client


def test_extract_json_tolerates_prose_and_fences():
    text = 'Here you go:\n```json\n{"dish_name": "Mohinga", "ingredients": []}\n```\nEnjoy!'
    assert extract_json(text) == {"dish_name": "Mohinga", "ingredients": []}
    assert extract_json("result: [1, 2, 3] done", JSON_ARRAY) == [1, 2, 3]


def test_extract_json_errors():
    with pytest.raises(ExtractionError):
        extract_json("I could not find anything")
    with pytest.raises(ExtractionError):
        extract_json("{not json}")


def test_extract_ingredients_normalizes_entries():
    payload = {
        "dish_name": "ကြက်သားဟင်း",
        "cooking_method": "curry",
        "ingredients": [
            {"name_mm": "ကြက်သား", "name_en": "Chicken", "estimated_portion_g": 150, "confidence": 1.7,
             "category": "meat"},
            {"name_mm": "အာလူး", "name_en": "Potato", "estimated_portion_g": "lots", "confidence": -2},
            {"name_mm": "", "name_en": "  "},
            "salt",
        ],
    }
    client = stub_client(f"```json\n{json.dumps(payload, ensure_ascii=False)}\n```")
    calls = []

    result = client.extract_ingredients("ကြက်သား နဲ့ အာလူး ဟင်း", on_call=calls.append)

    assert result["dish_name"] == "ကြက်သားဟင်း"
    assert result["cooking_method"] == "curry"
    assert [i["name_en"] for i in result["ingredients"]] == ["Chicken", "Potato"]
    chicken, potato = result["ingredients"]
    assert chicken["confidence"] == 1.0
    assert chicken["estimated_portion_g"] == 150.0
    assert potato["confidence"] == 0.0
    assert potato["estimated_portion_g"] == 100.0
    assert potato["category"] is None

    assert len(calls) == 1
    call = calls[0]
    assert call.success
    assert call.endpoint == "extract-ingredients"
    assert (call.request_tokens, call.response_tokens, call.total_tokens) == (12, 34, 46)
    assert client.sent[0]["model"] == "gemini-test"


def test_extract_ingredients_requires_ingredient_list():
    client = stub_client('{"dish_name": "Mohinga"}')
    with pytest.raises(ExtractionError):
        client.extract_ingredients("mohinga")


def test_provider_failure_is_reported_and_raised():
    client = stub_client(exc=RuntimeError("503 Service Unavailable"))
    calls = []
    with pytest.raises(ExtractionError):
        client.extract_ingredients("mohinga", on_call=calls.append)
    assert len(calls) == 1
    assert not calls[0].success
    assert "503" in calls[0].error_message


def test_missing_api_key_raises_extraction_error():
    client = GeminiClient(api_key=None)
    calls = []
    with pytest.raises(ExtractionError):
        client.extract_ingredients("mohinga", on_call=calls.append)
    assert calls and not calls[0].success


def test_estimate_nutrition_parses_answer():
    client = stub_client('{"calories_per_100g": 165, "protein_g": 31, "fat_g": 3.6, "carbs_g": 0, '
                         '"fiber_g": 0, "confidence": 0.85}')
    estimate = client.estimate_nutrition("Chicken Breast", "meat")
    assert estimate["calories_per_100g"] == 165.0
    assert estimate["confidence"] == 0.85
    assert estimate["source"] == "ai"


@pytest.mark.parametrize("text, exc", [
    (None, RuntimeError("timeout")),
    ("no json at all", None),
    ('{"protein_g": 3}', None),
])
def test_estimate_nutrition_falls_back_to_default(text, exc):
    client = stub_client(text, exc)
    estimate = client.estimate_nutrition("Mystery leaf")
    assert estimate == {
        "calories_per_100g": 100.0,
        "protein_g": 5.0,
        "fat_g": 3.0,
        "carbs_g": 15.0,
        "fiber_g": 1.0,
        "confidence": 0.3,
        "source": "default",
    }


TEMPLATES = [
    {"id": 11, "name_english": "Mohinga", "name_myanmar": "မုန့်ဟင်းခါး", "category": "noodles"},
    {"id": 12, "name_english": "Tea Leaf Salad", "name_myanmar": "လက်ဖက်သုတ်", "category": "salad"},
]


def test_match_dish_template():
    client = stub_client('{"index": 2, "confidence": 0.92}')
    assert client.match_dish_template("လက်ဖက်", TEMPLATES) == {"template_id": 12, "confidence": 0.92}


@pytest.mark.parametrize("answer", [
    '{"index": 2, "confidence": 0.4}',
    '{"index": null, "confidence": 0}',
    '{"index": 7, "confidence": 0.9}',
    "no idea",
])
def test_match_dish_template_rejects_weak_or_invalid_answers(answer):
    client = stub_client(answer)
    assert client.match_dish_template("something", TEMPLATES) is None


def test_meal_insights_fallback():
    daily = {"total_calories": 0, "goal_calories": 2000, "total_protein_g": 0, "total_fat_g": 0,
             "total_carbs_g": 0, "meals": []}
    assert stub_client("  Eat more greens.  ").generate_meal_insights(daily) == "Eat more greens."
    assert stub_client(exc=RuntimeError("down")).generate_meal_insights(daily) == DEFAULT_INSIGHT_MM
