"""
Gemini Client

Wraps google-genai for the three prompt-call-parse flows of the app:
ingredient extraction, nutrition estimation and dish template matching,
plus free-text meal insights. The model answers in free text, so every
JSON flow goes through `call_model_for_json`.
"""

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from google import genai
from google.genai import types
from flask import current_app

from htamin.services.nutrition_helpers import default_estimate, to_float

logger = logging.getLogger(__name__)

JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
JSON_ARRAY = re.compile(r"\[[\s\S]*?\]")

DEFAULT_INSIGHT_MM = "သင်၏ အစားအသောက် မှတ်တမ်းကို ဆက်လက် မှတ်သားပါ။"
TEMPLATE_MATCH_THRESHOLD = 0.6


class ExtractionError(Exception):
    """The provider call failed or its answer held no usable JSON."""


@dataclass
class ModelCall:
    endpoint: str
    success: bool
    model_name: Optional[str] = None
    request_tokens: int = 0
    response_tokens: int = 0
    total_tokens: int = 0
    error_message: Optional[str] = None
    response_time_ms: int = 0


OnCall = Optional[Callable[[ModelCall], None]]


def extract_json(text: str, pattern=JSON_OBJECT) -> Any:
    """Parse the first JSON object (or array) found in `text`."""
    match = pattern.search(text or "")
    if not match:
        raise ExtractionError("No valid JSON found in response")
    try:
        return json.loads(match.group(0))
    except ValueError as e:
        raise ExtractionError(f"Invalid JSON in response: {e}") from e


def _clamp(value: Any, low: float = 0.0, high: float = 1.0, default: float = 0.0) -> float:
    return max(low, min(high, to_float(value, default)))


class GeminiClient:
    def __init__(self, api_key: Optional[str], model_name: str = "gemini-2.5-flash",
                 timeout_ms: Optional[int] = None, temperature: float = 0.2):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_ms = timeout_ms
        self.temperature = temperature
        self._client = None

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise ExtractionError("GEMINI_API_KEY is not configured")
            http_options = types.HttpOptions(timeout=self.timeout_ms) if self.timeout_ms else None
            self._client = genai.Client(api_key=self.api_key, http_options=http_options)
        return self._client

    def generate_text(self, prompt: str, endpoint: str, on_call: OnCall = None,
                      max_output_tokens: int = 2048) -> str:
        """Run one completion and report it to `on_call`, raising ExtractionError on failure."""
        call = ModelCall(endpoint=endpoint, success=False, model_name=self.model_name)
        started = time.monotonic()
        try:
            response = self._get_client().models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=self.temperature,
                    max_output_tokens=max_output_tokens,
                ),
            )
            usage = getattr(response, "usage_metadata", None)
            if usage is not None:
                call.request_tokens = usage.prompt_token_count or 0
                call.response_tokens = usage.candidates_token_count or 0
                call.total_tokens = usage.total_token_count or 0
            text = response.text
            if not text:
                raise ExtractionError("Empty response from model")
            call.success = True
            return text
        except ExtractionError as e:
            call.error_message = str(e)
            raise
        except Exception as e:
            call.error_message = str(e)
            raise ExtractionError(f"Model call failed: {e}") from e
        finally:
            call.response_time_ms = int((time.monotonic() - started) * 1000)
            if on_call is not None:
                on_call(call)

    def call_model_for_json(self, prompt: str, endpoint: str, pattern=JSON_OBJECT,
                            on_call: OnCall = None) -> Any:
        text = self.generate_text(prompt, endpoint, on_call=on_call)
        return extract_json(text, pattern)

    def extract_ingredients(self, dish_text: str, language: str = "mm", on_call: OnCall = None) -> Dict[str, Any]:
        """
        Extract ingredients from a Myanmar or English dish description.

        Example input: "ကြက်သား နဲ့ အာလူး ဟင်း"

        Returns:
            {"dish_name", "cooking_method", "ingredients": [ExtractedIngredient]}

        Raises:
            ExtractionError: provider failure or unusable answer
        """
        dish_language = "Myanmar" if language == "mm" else "English"
        prompt = f"""You are a Myanmar food expert. Analyze this dish description and extract ingredients.

Dish: "{dish_text}"

Instructions:
1. Identify all main ingredients (ignore minor spices/seasonings)
2. Provide both Myanmar (Unicode) and English names
3. Estimate typical portion size in grams for each ingredient
4. Determine cooking method if mentioned
5. Assign confidence score (0.0-1.0)
6. Give a food category when obvious (meat, fish, vegetable, grain, ...)

Return ONLY a valid JSON object in this exact format:
{{
  "dish_name": "dish name in {dish_language}",
  "ingredients": [
    {{
      "name_mm": "ကြက်သား",
      "name_en": "Chicken",
      "estimated_portion_g": 150,
      "confidence": 0.95,
      "category": "meat"
    }}
  ],
  "cooking_method": "curry" or "fried" or "grilled" etc
}}

Focus on common Myanmar ingredients. Be specific (e.g., "Chicken Breast" not just "Chicken")."""

        parsed = self.call_model_for_json(prompt, "extract-ingredients", on_call=on_call)
        if not isinstance(parsed, dict) or not isinstance(parsed.get("ingredients"), list):
            raise ExtractionError("Response has no ingredients list")

        ingredients = []
        for raw in parsed["ingredients"]:
            if not isinstance(raw, dict):
                continue
            name_mm = str(raw.get("name_mm") or "").strip()
            name_en = str(raw.get("name_en") or "").strip()
            if not name_mm and not name_en:
                continue
            ingredients.append({
                "name_mm": name_mm,
                "name_en": name_en,
                "estimated_portion_g": max(0.0, to_float(raw.get("estimated_portion_g"), 100.0)),
                "confidence": _clamp(raw.get("confidence")),
                "category": raw.get("category") or None,
            })

        return {
            "dish_name": parsed.get("dish_name"),
            "cooking_method": parsed.get("cooking_method"),
            "ingredients": ingredients,
        }

    def estimate_nutrition(self, ingredient_name: str, category: Optional[str] = None,
                           on_call: OnCall = None) -> Dict[str, Any]:
        """Per-100g estimate for an unknown ingredient. Never raises."""
        category_line = f"Category: {category}" if category else ""
        prompt = f"""Estimate nutritional values per 100g for: "{ingredient_name}"
{category_line}

Return ONLY valid JSON in this format:
{{
  "calories_per_100g": 165,
  "protein_g": 31,
  "fat_g": 3.6,
  "carbs_g": 0,
  "fiber_g": 0,
  "confidence": 0.85
}}

Base estimates on USDA database values for similar foods. Be conservative."""

        try:
            parsed = self.call_model_for_json(prompt, "estimate-nutrition", on_call=on_call)
            if not isinstance(parsed, dict) or "calories_per_100g" not in parsed:
                raise ExtractionError("Estimate is missing calories_per_100g")
            return {
                "calories_per_100g": max(0.0, to_float(parsed.get("calories_per_100g"))),
                "protein_g": max(0.0, to_float(parsed.get("protein_g"))),
                "fat_g": max(0.0, to_float(parsed.get("fat_g"))),
                "carbs_g": max(0.0, to_float(parsed.get("carbs_g"))),
                "fiber_g": max(0.0, to_float(parsed.get("fiber_g"))),
                "confidence": _clamp(parsed.get("confidence")),
                "source": "ai",
            }
        except ExtractionError as e:
            logger.warning(f"Nutrition estimation failed for '{ingredient_name}': {e}")
            return default_estimate()

    def match_dish_template(self, user_input: str, templates: List[Dict[str, Any]],
                            on_call: OnCall = None) -> Optional[Dict[str, Any]]:
        """Best matching template as {"template_id", "confidence"}, or None."""
        if not templates:
            return None

        listing = "\n".join(
            f"{i + 1}. {t['name_myanmar']} / {t['name_english']} ({t.get('category') or 'other'})"
            for i, t in enumerate(templates)
        )
        prompt = f"""User input: "{user_input}"

Available dish templates:
{listing}

Find the best matching template. Return JSON:
{{
  "index": 5,
  "confidence": 0.9
}}

If no good match (confidence < {TEMPLATE_MATCH_THRESHOLD}), return:
{{
  "index": null,
  "confidence": 0
}}"""

        try:
            parsed = self.call_model_for_json(prompt, "match-template", on_call=on_call)
        except ExtractionError as e:
            logger.warning(f"Template matching failed: {e}")
            return None

        if not isinstance(parsed, dict):
            return None
        index = parsed.get("index")
        confidence = _clamp(parsed.get("confidence"))
        if not isinstance(index, int) or isinstance(index, bool) or confidence < TEMPLATE_MATCH_THRESHOLD:
            return None
        if index < 1 or index > len(templates):
            return None
        return {"template_id": templates[index - 1]["id"], "confidence": confidence}

    def generate_meal_insights(self, daily: Dict[str, Any], on_call: OnCall = None) -> str:
        meals = "\n".join(
            f"{m['meal_type'] or 'meal'}: {m['calories']} kcal - {', '.join(m['items'])}"
            for m in daily.get("meals", [])
        )
        prompt = f"""Analyze this daily nutrition data and provide helpful insights in Myanmar language:

Daily Summary:
- Calories: {daily['total_calories']} / {daily['goal_calories']} kcal
- Protein: {daily['total_protein_g']}g
- Fat: {daily['total_fat_g']}g
- Carbs: {daily['total_carbs_g']}g

Meals:
{meals}

Provide 2-3 friendly, actionable insights in Myanmar language. Be encouraging and culturally relevant.
Keep it concise (max 100 words total)."""

        try:
            return self.generate_text(prompt, "meal-insights", on_call=on_call, max_output_tokens=512).strip()
        except ExtractionError as e:
            logger.warning(f"Insights generation failed: {e}")
            return DEFAULT_INSIGHT_MM


def get_model_client() -> GeminiClient:
    return current_app.extensions["gemini"]
