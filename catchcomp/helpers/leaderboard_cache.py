import copy
import time

from flask import current_app

# --- Leaderboard cache ---

DEFAULT_LEADERBOARD_CACHE_TTL = 10.0  # seconds

# key: competition id
# value: (rows, timestamp)
LEADERBOARD_CACHE: dict = {}


def _ttl() -> float:
    try:
        return float(current_app.config.get("LEADERBOARD_CACHE_TTL", DEFAULT_LEADERBOARD_CACHE_TTL))
    except RuntimeError:
        # outside an app context
        return DEFAULT_LEADERBOARD_CACHE_TTL


def get_cached_leaderboard(key):
    """
    Return cached leaderboard rows if still valid.
    """
    entry = LEADERBOARD_CACHE.get(key)
    if not entry:
        return None

    rows, timestamp = entry
    if (time.time() - timestamp) > _ttl():
        LEADERBOARD_CACHE.pop(key, None)
        return None

    # callers decorate rows (my_rank etc.); never hand out the cached objects
    return copy.deepcopy(rows)


def set_cached_leaderboard(key, rows):
    """
    Store leaderboard rows in cache.
    """
    if _ttl() <= 0:
        return
    LEADERBOARD_CACHE[key] = (copy.deepcopy(rows), time.time())


def invalidate_leaderboard_cache(competition_id=None):
    """Drop one competition's leaderboard, or everything if no id is given."""
    if competition_id is None:
        LEADERBOARD_CACHE.clear()
    else:
        LEADERBOARD_CACHE.pop(competition_id, None)
