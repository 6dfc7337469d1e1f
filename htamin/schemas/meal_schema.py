from marshmallow import Schema, fields, validate, EXCLUDE
from htamin.utils.enums import MealType


class MealEntrySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # Enriched ingredient as returned by the extraction endpoint
    ingredient = fields.Dict(load_default=dict)
    # Direct catalog pick, e.g. from ingredient search
    ingredient_id = fields.Int(allow_none=True, load_default=None)
    portion_g = fields.Float(required=True, validate=validate.Range(min=0, min_inclusive=False, max=5000))
    cooking_method_id = fields.Int(allow_none=True, load_default=None)
    ai_suggested = fields.Bool(load_default=True)


class CreateMealSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    user_id = fields.Str(allow_none=True, load_default=None)
    meal_name = fields.Str(allow_none=True, load_default=None, validate=validate.Length(max=200))
    meal_type = fields.Str(allow_none=True, load_default=None, validate=validate.OneOf([e.value for e in MealType]))
    # ISO 8601, parsed to naive UTC by the controller
    eaten_at = fields.Str(allow_none=True, load_default=None)
    notes = fields.Str(allow_none=True, load_default=None)
    ingredients = fields.List(fields.Nested(MealEntrySchema), required=True, validate=validate.Length(min=1))
