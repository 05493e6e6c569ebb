import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Flask
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")

    # Quiz REST backend
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
    API_TIMEOUT = int(os.getenv("API_TIMEOUT", "10"))

    # Bearer token cookie
    TOKEN_COOKIE_NAME = "jwt_token"
    TOKEN_COOKIE_MAX_AGE_DAYS = 7
    TOKEN_COOKIE_SECURE = _env_bool("TOKEN_COOKIE_SECURE", False)

    # Quiz rules
    DEFAULT_PASSING_SCORE = int(os.getenv("DEFAULT_PASSING_SCORE", "50"))
    NEW_QUIZ_PASSING_SCORE = int(os.getenv("NEW_QUIZ_PASSING_SCORE", "70"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    DEBUG = True
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(Config):
    DEBUG = False
    TOKEN_COOKIE_SECURE = _env_bool("TOKEN_COOKIE_SECURE", True)
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = "Lax"


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    API_BASE_URL = "http://backend.test"
    DEFAULT_PASSING_SCORE = 50
    NEW_QUIZ_PASSING_SCORE = 70
    LOG_LEVEL = "WARNING"


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
