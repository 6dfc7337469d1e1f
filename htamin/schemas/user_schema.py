from marshmallow import Schema, fields, EXCLUDE


class AdminFlagSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    is_admin = fields.Bool(required=True)
