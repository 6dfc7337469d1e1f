from types import SimpleNamespace

from htamin.models.api_usage import ApiUsage
from htamin.services.enrichment_service import enrich_ingredients, matched_count
from htamin.services.gemini_client import GeminiClient
from htamin.services.ingredient_service import find_catalog_match


def extracted(name_mm, name_en, portion=100.0, category=None):
    return {"name_mm": name_mm, "name_en": name_en, "estimated_portion_g": portion,
            "confidence": 0.9, "category": category}


def failing_client():
    def generate_content(**kwargs):
        raise RuntimeError("deadline exceeded")

    client = GeminiClient(api_key="test-key", model_name="gemini-test")
    client._client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    return client


def test_catalog_match_uses_either_name(app):
    with app.app_context():
        assert find_catalog_match("ကြက်သား", "").name_english == "Chicken Breast"
        assert find_catalog_match(None, "white rice").name_english == "White Rice"
        assert find_catalog_match("", "  ") is None


def test_catalog_match_includes_unverified_but_skips_deleted_rows(app):
    with app.app_context():
        assert find_catalog_match("ကြက်ခြေထောက်", "Chicken Feet").name_english == "Chicken Feet"
        assert find_catalog_match("ဝက်သားဗိုက်သား", "Pork Belly") is None


def test_unverified_contribution_enriches_as_matched(app, fake_gemini):
    calls = []
    with app.app_context():
        enriched = enrich_ingredients([extracted("ကြက်ခြေထောက်", "Chicken Feet", 60, "meat")], fake_gemini,
                                      on_call=calls.append)

    feet = enriched[0]
    assert feet["matched"] is True
    assert feet["database_match"]["name_english"] == "Chicken Feet"
    assert feet["ai_estimate"] is None
    assert calls == []


def test_enrichment_keeps_order_and_sets_one_source(app, fake_gemini):
    items = [
        extracted("နဂါးမောက်သီး", "Dragon Fruit", 80, "fruit"),
        extracted("ကြက်သား", "Chicken", 150, "meat"),
        extracted("ပဲပုပ်", "Fermented Soybean", 30),
        extracted("ထမင်း", "Rice", 200, "grain"),
    ]
    calls = []
    with app.app_context():
        enriched = enrich_ingredients(items, fake_gemini, on_call=calls.append, max_workers=2)

    assert [e["name_en"] for e in enriched] == ["Dragon Fruit", "Chicken", "Fermented Soybean", "Rice"]
    assert [e["matched"] for e in enriched] == [False, True, False, True]
    assert matched_count(enriched) == 2
    for item in enriched:
        assert (item["database_match"] is None) != (item["ai_estimate"] is None)
    assert enriched[1]["database_match"]["name_english"] == "Chicken Breast"
    assert enriched[3]["database_match"]["name_english"] == "White Rice"
    assert enriched[0]["ai_estimate"]["source"] == "ai"
    assert enriched[0]["estimated_portion_g"] == 80
    # One estimate call per unmatched ingredient
    assert len(calls) == 2


def test_enrichment_falls_back_to_default_when_ai_fails(app):
    items = [extracted("ပဲပုပ်", "Fermented Soybean"), extracted("", "Chicken"), extracted("ငါးပိ", "")]
    calls = []
    with app.app_context():
        enriched = enrich_ingredients(items, failing_client(), on_call=calls.append)

    assert len(enriched) == 3
    for item in enriched:
        assert item["database_match"] is not None or item["ai_estimate"] is not None
    assert enriched[0]["ai_estimate"]["source"] == "default"
    assert enriched[1]["matched"]
    assert enriched[2]["ai_estimate"]["calories_per_100g"] == 100.0
    assert len(calls) == 2
    assert not any(c.success for c in calls)


def test_enrichment_of_nothing(app, fake_gemini):
    with app.app_context():
        assert enrich_ingredients([], fake_gemini) == []


def test_extract_endpoint_returns_enriched_ingredients(app, client, auth_headers):
    with app.app_context():
        before = ApiUsage.query.count()

    r = client.post("/api/ai/extract-ingredients", json={"text": "  ကြက်သားဟင်း  "}, headers=auth_headers("user-1"))
    assert r.status_code == 200, r.data
    data = r.get_json()
    assert data["dish_name"] == "ကြက်သားဟင်း"
    assert data["total_ingredients"] == 2
    assert data["matched_count"] == 1
    chicken, dragon = data["ingredients"]
    assert chicken["matched"] and chicken["database_match"]["name_myanmar"] == "ကြက်သားရင်"
    assert not dragon["matched"] and dragon["ai_estimate"]["calories_per_100g"] == 60.0

    with app.app_context():
        rows = ApiUsage.query.order_by(ApiUsage.id).all()[before:]
        assert [r.endpoint for r in rows] == ["extract-ingredients", "estimate-nutrition"]
        assert all(r.user_id == "user-1" for r in rows)
        assert all(r.request_type == "ingredient_extraction" for r in rows)


def test_extract_endpoint_validates_input(client):
    r = client.post("/api/ai/extract-ingredients", json={"text": " a "})
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "VALIDATION_ERROR"

    r = client.post("/api/ai/extract-ingredients", json={"text": "mohinga", "language": "fr"})
    assert r.status_code == 400

    r = client.post("/api/ai/extract-ingredients", json={})
    assert r.status_code == 400


def test_extract_endpoint_maps_ai_failure(app, client, fake_gemini):
    with app.app_context():
        before = ApiUsage.query.filter_by(success=False).count()

    fake_gemini.fail_extraction = True
    try:
        r = client.post("/api/ai/extract-ingredients", json={"text": "mohinga"})
    finally:
        fake_gemini.fail_extraction = False

    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "EXTRACTION_FAILED"
    with app.app_context():
        failed = ApiUsage.query.filter_by(success=False).order_by(ApiUsage.id).all()
        assert len(failed) == before + 1
        assert failed[-1].user_id is None


def test_match_template_endpoint(client):
    r = client.post("/api/ai/match-template", json={"text": "မုန့်ဟင်းခါး"})
    assert r.status_code == 200, r.data
    data = r.get_json()
    # Fake picks the first candidate, i.e. the most popular public template
    assert data["template"]["name_english"] == "Mohinga"
    assert data["confidence"] == 0.9
