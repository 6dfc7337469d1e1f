"""
Ingredient Controller

Catalog search for everyone, user contributions, and the admin curation
endpoints (listing, creation, verification and soft delete).
"""

from flask import request

from htamin.schemas.ingredient_schema import IngredientSchema, VerifyIngredientSchema
from htamin.services.ingredient_service import (
    MIN_SEARCH_LENGTH,
    admin_ingredient_query,
    create_ingredient,
    get_live_ingredient,
    name_taken,
    search_ingredients,
    set_verified,
    soft_delete,
)
from htamin.services.nutrition_helpers import serialize_cooking_method, serialize_ingredient
from htamin.utils.auth import AuthorizedAdmin, session_is_admin
from htamin.utils.enums import DataSource, Language
from htamin.utils.http import ok, error, json_body, validate_schema, arg_int, arg_str


def search_ingredients_handler():
    term = (arg_str("q") or "").strip()
    if len(term) < MIN_SEARCH_LENGTH:
        return error("VALIDATION_ERROR", f"Query must be at least {MIN_SEARCH_LENGTH} characters", 400)

    lang = arg_str("lang")
    if lang not in (None, "", *[e.value for e in Language]):
        return error("VALIDATION_ERROR", "lang must be 'mm' or 'en'", 400)

    limit = arg_int("limit", 20, min_value=1, max_value=50)
    rows = search_ingredients(term, lang=lang or None, include_unverified=session_is_admin(), limit=limit)

    results = []
    for ing in rows:
        item = serialize_ingredient(ing)
        item["cooking_methods"] = [serialize_cooking_method(m) for m in ing.cooking_methods]
        results.append(item)
    return ok({"results": results})


def _create(source: DataSource, verified_by=None):
    data, errors = validate_schema(IngredientSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "Invalid ingredient", 400, details=errors)

    if name_taken(data["name_english"], data["name_myanmar"]):
        return error("DUPLICATE_ENTRY", "Ingredient with this name already exists", 409)

    ingredient = create_ingredient(data, source, verified_by=verified_by)
    return ok({"ingredient": serialize_ingredient(ingredient, full=True)}, 201)


def contribute_ingredient_handler():
    return _create(DataSource.USER)


def admin_list_ingredients_handler(admin: AuthorizedAdmin):
    page = arg_int("page", 1, min_value=1)
    limit = arg_int("limit", 20, min_value=1, max_value=100)
    filter_by = arg_str("filter", "all")
    if filter_by not in ("all", "verified", "pending"):
        return error("VALIDATION_ERROR", "filter must be all, verified or pending", 400)
    search = (request.args.get("search") or "").strip()

    pagination = admin_ingredient_query(filter_by, search).paginate(page=page, per_page=limit, error_out=False)

    return ok({
        "ingredients": [serialize_ingredient(ing, full=True) for ing in pagination.items],
        "total": pagination.total,
        "page": page,
        "limit": limit,
        "pages": pagination.pages,
    })


def admin_create_ingredient_handler(admin: AuthorizedAdmin):
    return _create(DataSource.ADMIN, verified_by=admin.user_id)


def admin_verify_ingredient_handler(id, admin: AuthorizedAdmin):
    ingredient = get_live_ingredient(id)
    if not ingredient:
        return error("NOT_FOUND", "Ingredient not found", 404)

    data, errors = validate_schema(VerifyIngredientSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "verified (boolean) is required", 400, details=errors)

    set_verified(ingredient, data["verified"], admin.user_id)
    return ok({"ingredient": serialize_ingredient(ingredient, full=True)})


def admin_delete_ingredient_handler(id, admin: AuthorizedAdmin):
    ingredient = get_live_ingredient(id)
    if not ingredient:
        return error("NOT_FOUND", "Ingredient not found", 404)

    soft_delete(ingredient)
    return ok({"message": "Ingredient deleted", "id": ingredient.id})
