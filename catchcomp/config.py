import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Config:
    raw_db_url = os.getenv("DATABASE_URL")

    if raw_db_url:
        if raw_db_url.startswith("postgres://"):
            raw_db_url = raw_db_url.replace("postgres://", "postgresql://", 1)
        SQLALCHEMY_DATABASE_URI = raw_db_url
    else:
        SQLALCHEMY_DATABASE_URI = "sqlite:///catchcomp.db"

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-dev-secret")

    # Leaderboard reads may be this stale (seconds)
    LEADERBOARD_CACHE_TTL = float(os.getenv("LEADERBOARD_CACHE_TTL", "10"))

    # When a window is shortened, approved catches that fall outside it
    # keep scoring if this is on; otherwise they stop counting.
    GRANDFATHER_APPROVED_CATCHES = _env_flag("GRANDFATHER_APPROVED_CATCHES", False)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
