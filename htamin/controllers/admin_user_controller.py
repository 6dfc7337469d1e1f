from flask import request, current_app
from sqlalchemy import or_
from htamin.extensions import db
from htamin.models.user import User
from htamin.schemas.user_schema import AdminFlagSchema
from htamin.services.ingredient_service import MIN_SEARCH_LENGTH
from htamin.utils.auth import AuthorizedAdmin
from htamin.utils.http import ok, error, json_body, validate_schema, arg_int


def _serialize_user(u: User):
    return {
        "id": u.id,
        "email": u.email,
        "full_name": u.full_name,
        "display_name": u.display_name,
        "is_admin": u.is_admin,
        "preferred_language": u.preferred_language,
        "daily_calorie_target": u.daily_calorie_target,
        "created_at": u.created_at.isoformat() if u.created_at else None,
    }


def list_users_handler(admin: AuthorizedAdmin):
    page = arg_int("page", 1, min_value=1)
    limit = arg_int("limit", 20, min_value=1, max_value=100)
    search = (request.args.get("search") or "").strip()

    query = User.query.filter(User.deleted_at.is_(None))

    if len(search) >= MIN_SEARCH_LENGTH:
        term = f"%{search}%"
        query = query.filter(or_(
            User.full_name.ilike(term),
            User.display_name.ilike(term),
            User.email.ilike(term),
        ))

    query = query.order_by(User.created_at.desc(), User.id)
    pagination = query.paginate(page=page, per_page=limit, error_out=False)

    return ok({
        "users": [_serialize_user(u) for u in pagination.items],
        "total": pagination.total,
        "page": page,
        "limit": limit,
        "pages": pagination.pages,
    })


def set_admin_flag_handler(id, admin: AuthorizedAdmin):
    if id == admin.user_id:
        return error("VALIDATION_ERROR", "You cannot change your own admin status", 400)

    user = db.session.get(User, id)
    if not user or user.deleted_at is not None:
        return error("NOT_FOUND", "User not found", 404)

    data, errors = validate_schema(AdminFlagSchema, json_body())
    if errors:
        return error("VALIDATION_ERROR", "is_admin (boolean) is required", 400, details=errors)

    user.is_admin = data["is_admin"]
    db.session.commit()
    current_app.logger.info(f"User {user.id} is_admin={user.is_admin} set by {admin.user_id}")
    return ok({"user": _serialize_user(user)})
