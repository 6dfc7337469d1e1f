"""
API Usage Tracker

Usage ledger for calls to the AI provider and the request quota built on it.
Aggregates are computed from the `api_usage` table in calendar UTC buckets
(current minute, hour and day).
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import and_, case, func
from sqlalchemy.exc import SQLAlchemyError

from htamin.extensions import db
from htamin.models.api_usage import ApiUsage
from htamin.services.gemini_client import ModelCall
from htamin.utils.enums import WarningLevel

logger = logging.getLogger(__name__)


@dataclass
class UsageRecord:
    endpoint: str
    success: bool
    user_id: Optional[str] = None
    api_provider: str = "gemini"
    model_name: Optional[str] = None
    request_tokens: int = 0
    response_tokens: int = 0
    total_tokens: int = 0
    request_type: Optional[str] = None
    error_message: Optional[str] = None
    response_time_ms: Optional[int] = None

    @classmethod
    def from_call(cls, call: ModelCall, user_id: Optional[str] = None,
                  request_type: Optional[str] = None) -> "UsageRecord":
        return cls(
            endpoint=call.endpoint,
            success=call.success,
            user_id=user_id,
            model_name=call.model_name,
            request_tokens=call.request_tokens,
            response_tokens=call.response_tokens,
            total_tokens=call.total_tokens,
            request_type=request_type,
            error_message=call.error_message,
            response_time_ms=call.response_time_ms,
        )


@dataclass
class RateLimitDecision:
    allowed: bool
    reason: Optional[str] = None
    usage: Optional[Dict[str, Any]] = field(default=None)


def usage_percentage(current: float, limit: float) -> int:
    if not limit or limit <= 0:
        return 0
    return min(100, int(math.floor(current / limit * 100 + 0.5)))


def usage_warning_level(percentage: float) -> WarningLevel:
    if percentage >= 100:
        return WarningLevel.CRITICAL
    if percentage >= 90:
        return WarningLevel.HIGH
    if percentage >= 75:
        return WarningLevel.MEDIUM
    if percentage >= 50:
        return WarningLevel.LOW
    return WarningLevel.NONE


class UsageTracker:
    def __init__(self, rpm_limit: int = 15, rpd_limit: int = 1500, tier: str = "Free",
                 model_name: Optional[str] = None):
        self.rpm_limit = rpm_limit
        self.rpd_limit = rpd_limit
        self.tier = tier
        self.model_name = model_name

    def track_usage(self, record: UsageRecord) -> None:
        """Append one ledger row. Failures are logged and never raised."""
        try:
            db.session.add(ApiUsage(
                api_provider=record.api_provider,
                model_name=record.model_name or self.model_name,
                endpoint=record.endpoint,
                user_id=record.user_id,
                request_tokens=record.request_tokens or 0,
                response_tokens=record.response_tokens or 0,
                total_tokens=record.total_tokens or 0,
                request_type=record.request_type,
                success=record.success,
                error_message=record.error_message,
                response_time_ms=record.response_time_ms,
            ))
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Failed to track API usage: {e}")

    def track_calls(self, calls: List[ModelCall], user_id: Optional[str] = None,
                    request_type: Optional[str] = None) -> None:
        for call in calls:
            self.track_usage(UsageRecord.from_call(call, user_id=user_id, request_type=request_type))

    def current_usage(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or datetime.utcnow()
        minute_start = now.replace(second=0, microsecond=0)
        hour_start = minute_start.replace(minute=0)
        day_start = hour_start.replace(hour=0)

        row = (
            db.session.query(
                func.count(ApiUsage.id).label("total_requests"),
                func.sum(case((ApiUsage.created_at >= day_start, 1), else_=0)).label("requests_today"),
                func.sum(case((and_(ApiUsage.created_at >= day_start, ApiUsage.success.is_(True)), 1), else_=0)).label("successful_today"),
                func.sum(case((ApiUsage.created_at >= hour_start, 1), else_=0)).label("requests_this_hour"),
                func.sum(case((ApiUsage.created_at >= minute_start, 1), else_=0)).label("requests_this_minute"),
            )
            .one()
        )
        unique_users = (
            db.session.query(func.count(func.distinct(ApiUsage.user_id)))
            .filter(ApiUsage.created_at >= day_start)
            .scalar()
        )
        return {
            "requests_today": int(row.requests_today or 0),
            "successful_today": int(row.successful_today or 0),
            "requests_this_hour": int(row.requests_this_hour or 0),
            "requests_this_minute": int(row.requests_this_minute or 0),
            "total_requests": int(row.total_requests or 0),
            "unique_users": int(unique_users or 0),
        }

    def check_rate_limit(self, now: Optional[datetime] = None) -> RateLimitDecision:
        try:
            usage = self.current_usage(now)
        except Exception as e:
            # Fail open: a broken ledger must not block the feature
            db.session.rollback()
            logger.error(f"Failed to check rate limit: {e}")
            return RateLimitDecision(allowed=True)

        if usage["requests_this_minute"] >= self.rpm_limit:
            return RateLimitDecision(
                allowed=False,
                reason=f"Rate limit exceeded: {self.rpm_limit} requests per minute. Please wait.",
                usage=usage,
            )
        if usage["requests_today"] >= self.rpd_limit:
            return RateLimitDecision(
                allowed=False,
                reason=f"Daily limit exceeded: {self.rpd_limit} requests per day. Please try again tomorrow.",
                usage=usage,
            )
        return RateLimitDecision(allowed=True, usage=usage)

    def daily_usage(self, days: int = 30, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        now = now or datetime.utcnow()
        start = (now - timedelta(days=days - 1)).replace(hour=0, minute=0, second=0, microsecond=0)
        day = func.date(ApiUsage.created_at)
        rows = (
            db.session.query(
                day.label("day_bucket"),
                func.count(ApiUsage.id).label("requests"),
                func.sum(case((ApiUsage.success.is_(True), 1), else_=0)).label("successful"),
                func.sum(ApiUsage.total_tokens).label("total_tokens"),
                func.avg(ApiUsage.response_time_ms).label("avg_response_time_ms"),
            )
            .filter(ApiUsage.created_at >= start)
            .group_by(day)
            .order_by(day.desc())
            .all()
        )
        return [
            {
                "day_bucket": str(r.day_bucket),
                "requests": int(r.requests or 0),
                "successful": int(r.successful or 0),
                "failed": int(r.requests or 0) - int(r.successful or 0),
                "total_tokens": int(r.total_tokens or 0),
                "avg_response_time_ms": round(float(r.avg_response_time_ms), 1) if r.avg_response_time_ms is not None else None,
            }
            for r in rows
        ]

    def usage_stats(self) -> Dict[str, Any]:
        try:
            return {"current": self.current_usage(), "daily": self.daily_usage()}
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to get usage stats: {e}")
            return {"current": None, "daily": []}


def get_usage_tracker() -> UsageTracker:
    return current_app.extensions["usage_tracker"]
