import datetime as dt
from dataclasses import dataclass
from functools import wraps
from typing import Optional
from flask import request, current_app
import jwt

from htamin.extensions import db
from htamin.models.user import User
from htamin.utils.http import error


@dataclass(frozen=True)
class AuthorizedAdmin:
    """Proof that the current request was checked against the admin flag."""
    user_id: str
    email: Optional[str]


def _jwt_secret() -> str:
    return current_app.config.get("AUTH_JWT_SECRET") or current_app.config["SECRET_KEY"]


def create_token(user_id: str, ttl_hours: int = 12) -> str:
    # Sessions are minted by the auth provider; this is used by scripts and tests.
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + dt.timedelta(hours=ttl_hours)).timestamp()),
    }
    audience = current_app.config.get("AUTH_JWT_AUDIENCE")
    if audience:
        payload["aud"] = audience
    return jwt.encode(payload, _jwt_secret(), algorithm="HS256")


def decode_token(token: str):
    audience = current_app.config.get("AUTH_JWT_AUDIENCE")
    if audience:
        return jwt.decode(token, _jwt_secret(), algorithms=["HS256"], audience=audience)
    return jwt.decode(token, _jwt_secret(), algorithms=["HS256"], options={"verify_aud": False})


def session_user_id() -> Optional[str]:
    """Subject of the bearer token, or None when absent or invalid."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    token = auth_header.split(" ", 1)[1]
    try:
        payload = decode_token(token)
    except jwt.PyJWTError as e:
        current_app.logger.info(f"Rejected bearer token: {e}")
        return None
    return payload.get("sub")


def session_is_admin() -> bool:
    user_id = session_user_id()
    if not user_id:
        return False
    user = db.session.get(User, user_id)
    return bool(user and user.is_admin and user.deleted_at is None)


def require_auth(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        user_id = session_user_id()
        if not user_id:
            return error("UNAUTHORIZED", "Missing or invalid Bearer token", 401)
        request.user_id = user_id  # type: ignore
        return f(*args, **kwargs)
    return wrapper


def require_admin(f):
    """Resolve the session once and hand the view an AuthorizedAdmin."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        user_id = session_user_id()
        if not user_id:
            return error("UNAUTHORIZED", "Missing or invalid Bearer token", 401)
        user = db.session.get(User, user_id)
        if not user or user.deleted_at is not None or not user.is_admin:
            return error("FORBIDDEN", "Admin access required", 403)
        request.user_id = user_id  # type: ignore
        kwargs["admin"] = AuthorizedAdmin(user_id=user.id, email=user.email)
        return f(*args, **kwargs)
    return wrapper


__all__ = [
    "AuthorizedAdmin",
    "create_token",
    "decode_token",
    "session_user_id",
    "session_is_admin",
    "require_auth",
    "require_admin",
]
