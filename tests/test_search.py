from htamin.models import Ingredient


def names(response):
    return [r["name_english"] for r in response.get_json()["results"]]


def test_search_requires_two_characters(client):
    r = client.get("/api/search/ingredients?q=c")
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "VALIDATION_ERROR"
    assert client.get("/api/search/ingredients").status_code == 400


def test_non_admin_sees_only_verified(client, auth_headers):
    anonymous = client.get("/api/search/ingredients?q=chicken")
    assert anonymous.status_code == 200
    assert names(anonymous) == ["Chicken Breast"]

    user = client.get("/api/search/ingredients?q=chicken", headers=auth_headers("user-1"))
    assert names(user) == ["Chicken Breast"]


def test_admin_sees_unverified_but_never_deleted(client, auth_headers):
    r = client.get("/api/search/ingredients?q=chicken", headers=auth_headers("admin-1"))
    assert r.status_code == 200
    # Most used first
    assert names(r) == ["Chicken Breast", "Chicken Feet"]

    r = client.get("/api/search/ingredients?q=pork", headers=auth_headers("admin-1"))
    assert names(r) == []


def test_search_by_language(client):
    r = client.get("/api/search/ingredients", query_string={"q": "ကြက်", "lang": "mm"})
    assert names(r) == ["Chicken Breast"]

    r = client.get("/api/search/ingredients", query_string={"q": "ကြက်", "lang": "en"})
    assert names(r) == []

    r = client.get("/api/search/ingredients?q=rice&lang=xx")
    assert r.status_code == 400


def test_search_results_carry_cooking_methods_and_respect_limit(client, auth_headers):
    r = client.get("/api/search/ingredients?q=chicken&limit=1", headers=auth_headers("admin-1"))
    results = r.get_json()["results"]
    assert len(results) == 1
    methods = {m["method_name"]: m["calorie_multiplier"] for m in results[0]["cooking_methods"]}
    assert methods == {"Raw": 1.0, "Curry": 1.3}

    r = client.get("/api/search/ingredients?q=ri&limit=500")
    assert r.status_code == 200


def test_contribute_ingredient(app, client, auth_headers):
    body = {"name_english": "Roselle Leaves", "name_myanmar": "ချဉ်ပေါင်ရွက်", "category": "vegetable",
            "calories_per_100g": 49, "protein_g": 1.6, "fat_g": 0.6, "carbs_g": 11.3, "fiber_g": 2.1}

    assert client.post("/api/ingredients", json=body).status_code == 401

    r = client.post("/api/ingredients", json=body, headers=auth_headers("user-1"))
    assert r.status_code == 201, r.data
    created = r.get_json()["ingredient"]
    assert created["verified"] is False
    assert created["data_source"] == "user"
    assert created["confidence_score"] == 0.5
    assert created["verified_by"] is None

    # Pending contributions stay out of public search
    assert names(client.get("/api/search/ingredients?q=roselle")) == []

    r = client.post("/api/ingredients", json={**body, "name_myanmar": "အခြား"}, headers=auth_headers("user-1"))
    assert r.status_code == 409

    r = client.post("/api/ingredients", json={**body, "name_english": "chicken breast", "name_myanmar": "x"},
                    headers=auth_headers("user-1"))
    assert r.status_code == 409

    with app.app_context():
        assert Ingredient.query.filter_by(name_english="Roselle Leaves").count() == 1


def test_contribute_ingredient_validation(client, auth_headers):
    r = client.post("/api/ingredients", json={"name_english": "Salt"}, headers=auth_headers("user-1"))
    assert r.status_code == 400
    details = r.get_json()["error"]["details"]
    assert "name_myanmar" in details and "calories_per_100g" in details


def test_templates_are_public_and_ordered_by_popularity(client):
    r = client.get("/api/templates")
    assert r.status_code == 200
    templates = r.get_json()["templates"]
    assert [t["name_english"] for t in templates] == ["Mohinga", "Tea Leaf Salad"]
    assert templates[0]["ingredients"][0]["name_english"] == "Rice Noodles"

    r = client.get("/api/templates?category=salad")
    assert [t["name_english"] for t in r.get_json()["templates"]] == ["Tea Leaf Salad"]

    r = client.get("/api/templates?limit=1")
    assert len(r.get_json()["templates"]) == 1


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok"}
