from marshmallow import Schema, fields, validate, pre_load, EXCLUDE
from htamin.utils.enums import Language


class _StrippedTextSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_text(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("text"), str):
            data = {**data, "text": data["text"].strip()}
        return data


class ExtractIngredientsSchema(_StrippedTextSchema):
    text = fields.Str(required=True, validate=validate.Length(min=2, max=1000))
    language = fields.Str(load_default=Language.MYANMAR.value, validate=validate.OneOf([e.value for e in Language]))


class MatchTemplateSchema(_StrippedTextSchema):
    text = fields.Str(required=True, validate=validate.Length(min=2, max=500))
