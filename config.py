from dotenv import load_dotenv
import os

load_dotenv()


def _engine_options():
    options = {
        # Test connection before use, recycle idle connections every 5 minutes
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }
    sslmode = os.getenv("DATABASE_SSLMODE")
    if sslmode:
        options['connect_args'] = {
            'sslmode': sslmode,
            'connect_timeout': 10,
        }
    return options


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///htamin.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options()

    # Bearer tokens are issued by the hosted auth provider and signed with its JWT secret
    AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET")
    AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE")

    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_TIMEOUT_MS = int(os.getenv("GEMINI_TIMEOUT_MS", "30000"))

    # Free tier quota of the AI provider
    GEMINI_RPM_LIMIT = int(os.getenv("GEMINI_RPM_LIMIT", "15"))
    GEMINI_RPD_LIMIT = int(os.getenv("GEMINI_RPD_LIMIT", "1500"))
    GEMINI_TIER = os.getenv("GEMINI_TIER", "Free")

    ENRICHMENT_MAX_WORKERS = int(os.getenv("ENRICHMENT_MAX_WORKERS", "8"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
    ADMIN_USER_ID = os.getenv("ADMIN_USER_ID")
