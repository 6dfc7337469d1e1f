from marshmallow import Schema, fields, validate, EXCLUDE


class IngredientSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    name_english = fields.Str(required=True, validate=validate.Length(min=1, max=150))
    name_myanmar = fields.Str(required=True, validate=validate.Length(min=1, max=150))
    category = fields.Str(load_default="other", validate=validate.Length(max=50))
    subcategory = fields.Str(allow_none=True, load_default=None)
    calories_per_100g = fields.Float(required=True, validate=validate.Range(min=0, max=1000))
    protein_g = fields.Float(load_default=0, validate=validate.Range(min=0, max=100))
    fat_g = fields.Float(load_default=0, validate=validate.Range(min=0, max=100))
    carbs_g = fields.Float(load_default=0, validate=validate.Range(min=0, max=100))
    fiber_g = fields.Float(load_default=0, validate=validate.Range(min=0, max=100))
    notes = fields.Str(allow_none=True, load_default=None)


class VerifyIngredientSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    verified = fields.Bool(required=True)
