"""
Ingredient Enrichment Service

Turns AI-extracted ingredient candidates into uniform records carrying either
a catalog match or an AI nutrition estimate.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List

from htamin.services.gemini_client import GeminiClient, OnCall
from htamin.services.ingredient_service import find_catalog_match
from htamin.services.nutrition_helpers import serialize_ingredient

logger = logging.getLogger(__name__)


def enrich_ingredients(
    extracted: List[Dict[str, Any]],
    client: GeminiClient,
    on_call: OnCall = None,
    max_workers: int = 8,
) -> List[Dict[str, Any]]:
    """
    Attach a nutrition source to every extracted ingredient.

    Args:
        extracted: ExtractedIngredient dicts from GeminiClient.extract_ingredients
        client: Model client used for the estimate fallback
        on_call: Receives a ModelCall per provider call (may run on worker threads)
        max_workers: Upper bound on concurrent estimate calls

    Returns:
        One dict per input, in input order, with `database_match`,
        `ai_estimate` and `matched` added. Exactly one source is set.
    """
    # Catalog lookups stay on the request thread, which owns the db session
    matches = [find_catalog_match(item.get("name_mm"), item.get("name_en")) for item in extracted]

    pending = [i for i, match in enumerate(matches) if match is None]
    estimates: Dict[int, Dict[str, Any]] = {}
    if pending:
        def estimate(index: int) -> Dict[str, Any]:
            item = extracted[index]
            name = item.get("name_en") or item.get("name_mm")
            return client.estimate_nutrition(name, item.get("category"), on_call=on_call)

        workers = max(1, min(max_workers, len(pending)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            for index, result in zip(pending, pool.map(estimate, pending)):
                estimates[index] = result

    enriched = []
    for index, item in enumerate(extracted):
        match = matches[index]
        enriched.append({
            **item,
            "database_match": serialize_ingredient(match) if match else None,
            "ai_estimate": estimates.get(index),
            "matched": match is not None,
        })

    logger.info(f"Enriched {len(enriched)} ingredients, {len(enriched) - len(pending)} matched in catalog")
    return enriched


def matched_count(enriched: List[Dict[str, Any]]) -> int:
    return sum(1 for item in enriched if item.get("matched"))
