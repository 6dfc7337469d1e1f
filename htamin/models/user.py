from datetime import datetime
from htamin.extensions import db


class User(db.Model):
    __tablename__ = "users"

    # Subject id issued by the auth provider
    id = db.Column(db.String(64), primary_key=True)
    email = db.Column(db.String(255), unique=True)
    full_name = db.Column(db.String(150))
    display_name = db.Column(db.String(100))
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    preferred_language = db.Column(db.String(5), nullable=False, default="mm")
    daily_calorie_target = db.Column(db.Integer, nullable=False, default=2000)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = db.Column(db.DateTime)
