import os


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # DATABASE_URL must point at SQLite: the native name-pattern query uses instr().
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = _env_flag("SQL_ECHO", False)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    SQL_LOG_LEVEL = os.getenv("SQL_LOG_LEVEL", "WARNING")

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    TOP_SELLING_MAX_PAGE_SIZE = int(os.getenv("TOP_SELLING_MAX_PAGE_SIZE", "100"))
