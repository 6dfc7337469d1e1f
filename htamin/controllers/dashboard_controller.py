from htamin.models.ingredient import Ingredient
from htamin.models.meal import Meal
from htamin.models.user import User
from htamin.services.usage_tracker import get_usage_tracker, usage_percentage, usage_warning_level
from htamin.utils.auth import AuthorizedAdmin
from htamin.utils.http import ok


def get_stats_handler(admin: AuthorizedAdmin):
    live_ingredients = Ingredient.query.filter(Ingredient.deleted_at.is_(None))
    verified = live_ingredients.filter(Ingredient.verified.is_(True)).count()
    total = live_ingredients.count()

    return ok({
        "total_users": User.query.filter(User.deleted_at.is_(None)).count(),
        "total_ingredients": total,
        "verified_ingredients": verified,
        "pending_ingredients": total - verified,
        "total_meals": Meal.query.filter(Meal.deleted_at.is_(None)).count(),
    })


def get_usage_handler(admin: AuthorizedAdmin):
    tracker = get_usage_tracker()
    stats = tracker.usage_stats()

    current = stats["current"]
    if current is not None:
        rpm_pct = usage_percentage(current["requests_this_minute"], tracker.rpm_limit)
        rpd_pct = usage_percentage(current["requests_today"], tracker.rpd_limit)
        current = {
            **current,
            "rpm_limit": tracker.rpm_limit,
            "rpd_limit": tracker.rpd_limit,
            "rpm_percentage": rpm_pct,
            "rpd_percentage": rpd_pct,
            "rpm_warning": usage_warning_level(rpm_pct).value,
            "rpd_warning": usage_warning_level(rpd_pct).value,
        }

    return ok({
        "current": current,
        "daily": stats["daily"],
        "limits": {"rpm": tracker.rpm_limit, "rpd": tracker.rpd_limit, "tier": tracker.tier},
    })
