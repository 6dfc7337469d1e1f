"""
AI Controller

Handles the AI-backed endpoints: ingredient extraction with catalog
enrichment, dish template matching and daily meal insights. Each endpoint
passes the provider quota gate first and records every provider call in the
usage ledger.
"""

from datetime import datetime
from typing import List

from flask import current_app

from htamin.schemas.extraction_schema import ExtractIngredientsSchema, MatchTemplateSchema
from htamin.services.enrichment_service import enrich_ingredients, matched_count
from htamin.services.gemini_client import ExtractionError, ModelCall, get_model_client
from htamin.services.meal_service import daily_summary
from htamin.services.template_service import get_template, match_candidates, serialize_template
from htamin.services.usage_tracker import get_usage_tracker
from htamin.utils.auth import session_user_id
from htamin.utils.http import ok, error, json_body, validate_schema, arg_str, parse_iso_date


def _rate_limited():
    decision = get_usage_tracker().check_rate_limit()
    if decision.allowed:
        return None
    current_app.logger.warning(f"AI request refused: {decision.reason}")
    return error("RATE_LIMITED", decision.reason, 429, usage=decision.usage)


def _invalid(errors):
    message = "Text is required (at least 2 characters)" if "text" in errors else "Invalid request"
    return error("VALIDATION_ERROR", message, 400, details=errors)


def extract_ingredients_handler():
    refused = _rate_limited()
    if refused:
        return refused

    data, errors = validate_schema(ExtractIngredientsSchema, json_body())
    if errors:
        return _invalid(errors)

    user_id = session_user_id()
    client = get_model_client()
    calls: List[ModelCall] = []
    try:
        extraction = client.extract_ingredients(data["text"], data["language"], on_call=calls.append)
        enriched = enrich_ingredients(
            extraction["ingredients"],
            client,
            on_call=calls.append,
            max_workers=current_app.config.get("ENRICHMENT_MAX_WORKERS", 8),
        )
    except ExtractionError as e:
        current_app.logger.error(f"Extraction error: {e}")
        return error("EXTRACTION_FAILED", "Failed to extract ingredients", 500, details=str(e))
    finally:
        get_usage_tracker().track_calls(calls, user_id=user_id, request_type="ingredient_extraction")

    return ok({
        "dish_name": extraction.get("dish_name"),
        "cooking_method": extraction.get("cooking_method"),
        "ingredients": enriched,
        "total_ingredients": len(enriched),
        "matched_count": matched_count(enriched),
    })


def match_template_handler():
    refused = _rate_limited()
    if refused:
        return refused

    data, errors = validate_schema(MatchTemplateSchema, json_body())
    if errors:
        return _invalid(errors)

    calls: List[ModelCall] = []
    try:
        result = get_model_client().match_dish_template(data["text"], match_candidates(), on_call=calls.append)
    finally:
        get_usage_tracker().track_calls(calls, user_id=session_user_id(), request_type="template_match")

    template = get_template(result["template_id"]) if result else None
    return ok({
        "template": serialize_template(template) if template else None,
        "confidence": result["confidence"] if template else 0,
    })


def meal_insights_handler():
    refused = _rate_limited()
    if refused:
        return refused

    user_id = arg_str("user_id") or session_user_id()
    if not user_id:
        return error("VALIDATION_ERROR", "user_id is required", 400)

    day_param = arg_str("date")
    day = parse_iso_date(day_param) if day_param else datetime.utcnow().date()
    if day is None:
        return error("VALIDATION_ERROR", "date must be YYYY-MM-DD", 400)

    summary = daily_summary(user_id, day)
    calls: List[ModelCall] = []
    try:
        insights = get_model_client().generate_meal_insights(summary, on_call=calls.append)
    finally:
        get_usage_tracker().track_calls(calls, user_id=user_id, request_type="meal_insights")

    return ok({
        "date": summary["date"],
        "summary": {k: v for k, v in summary.items() if k not in ("meals", "date", "goal_calories")},
        "goal_calories": summary["goal_calories"],
        "insights": insights,
    })
