from enum import Enum


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class ConfidenceLevel(str, Enum):
    EXACT = "exact"
    ESTIMATED = "estimated"
    APPROXIMATE = "approximate"
    GUESSED = "guessed"


class WarningLevel(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Language(str, Enum):
    MYANMAR = "mm"
    ENGLISH = "en"


class DataSource(str, Enum):
    DATABASE = "database"
    ADMIN = "admin"
    USER = "user"
    AI = "ai"
