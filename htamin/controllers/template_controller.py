from htamin.services.template_service import list_templates, serialize_template
from htamin.utils.http import ok, arg_int, arg_str


def list_templates_handler():
    category = (arg_str("category") or "").strip() or None
    limit = arg_int("limit", 20, min_value=1, max_value=100)
    return ok({"templates": [serialize_template(t) for t in list_templates(category, limit)]})
