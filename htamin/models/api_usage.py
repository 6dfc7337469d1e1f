from datetime import datetime
from htamin.extensions import db


class ApiUsage(db.Model):
    """Append-only ledger, one row per call to the AI provider."""

    __tablename__ = "api_usage"

    id = db.Column(db.Integer, primary_key=True)
    api_provider = db.Column(db.String(30), nullable=False, default="gemini")
    model_name = db.Column(db.String(60))
    endpoint = db.Column(db.String(100), nullable=False)
    user_id = db.Column(db.String(64))
    request_tokens = db.Column(db.Integer, nullable=False, default=0)
    response_tokens = db.Column(db.Integer, nullable=False, default=0)
    total_tokens = db.Column(db.Integer, nullable=False, default=0)
    request_type = db.Column(db.String(50))
    success = db.Column(db.Boolean, nullable=False)
    error_message = db.Column(db.Text)
    response_time_ms = db.Column(db.Integer)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
