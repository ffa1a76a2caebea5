import logging
from datetime import datetime
from typing import Optional

from catchcomp.helpers.competition import get_competition_or_404
from catchcomp.helpers.leaderboard_cache import get_cached_leaderboard, set_cached_leaderboard
from catchcomp.helpers.scoring import (
    ScoredCatch,
    best_catch,
    calculate_score,
    scoring_session_ids,
    total_weight,
)
from catchcomp.helpers.time import isoformat, utcnow
from catchcomp.models import Catch, CatchValidation, Competition, Entry

logger = logging.getLogger(__name__)

PODIUM_SIZE = 3


def _as_row(item) -> dict:
    """Accept ready-made row dicts or Entry-like objects."""
    if isinstance(item, dict):
        return dict(item)
    return {
        "entry_id": getattr(item, "id", None),
        "user_id": item.user_id,
        "score": item.score,
        "submitted_at": getattr(item, "created_at", None),
    }


def _rank_key(row):
    # score desc, then earliest entry, then lowest entry id
    submitted_at = row.get("submitted_at")
    entry_id = row.get("entry_id")
    return (
        -float(row.get("score") or 0.0),
        submitted_at if isinstance(submitted_at, datetime) else datetime.max,
        entry_id if entry_id is not None else float("inf"),
        str(row.get("user_id")),
    )


def rank_entries(entries) -> list:
    """
    Sort by score (highest first) and number the rows 1..N.

    Tie-break: equal scores are ordered by earliest entry (submitted_at), then
    by lowest entry id. Every row gets its own rank; there are no shared
    places and no gaps. Same input, same output.
    """
    rows = sorted((_as_row(e) for e in entries), key=_rank_key)
    for pos, row in enumerate(rows, start=1):
        row["rank"] = pos
    return rows


def my_rank(ranked_rows, user_id) -> Optional[int]:
    """Lookup only; pass rows that already went through rank_entries."""
    for row in ranked_rows:
        if row.get("user_id") == user_id:
            return row.get("rank")
    return None


def build_leaderboard(competition_id, use_cache: bool = True) -> list:
    """
    Build ranked leaderboard rows for a competition:
        {
          "rank", "entry_id", "user_id", "session_id",
          "score", "catch_count", "total_weight_kg",
          "best_catch", "submitted_at"
        }

    Scores are derived from approved, still-counting catches every time the
    cache misses; the Entry.score column is only a convenience copy.
    """
    comp = get_competition_or_404(competition_id)

    if use_cache:
        cached = get_cached_leaderboard(comp.id)
        if cached is not None:
            return cached

    entries = Entry.query.filter_by(competition_id=comp.id).all()
    if not entries:
        set_cached_leaderboard(comp.id, [])
        return []

    approved = (
        CatchValidation.query
        .join(Catch, Catch.id == CatchValidation.catch_id)
        .filter(
            CatchValidation.competition_id == comp.id,
            CatchValidation.validation_status == "approved",
        )
        .all()
    )

    by_user = {}
    for v in approved:
        if not v.counts_for_score:
            continue
        by_user.setdefault(v.catch.user_id, []).append(
            (v.catch.session_id, ScoredCatch.from_validation(v))
        )

    rows = []
    for e in entries:
        sessions = scoring_session_ids(e, comp)
        catches = [sc for session_id, sc in by_user.get(e.user_id, []) if session_id in sessions]
        best = best_catch(catches)

        rows.append(
            {
                "entry_id": e.id,
                "user_id": e.user_id,
                "session_id": e.session_id,
                "score": calculate_score(comp.type, catches, e.vote_tally),
                "catch_count": len(catches),
                "total_weight_kg": total_weight(catches),
                "best_catch": best.to_dict() if best else None,
                "submitted_at": e.created_at,
            }
        )

    rows = rank_entries(rows)
    for row in rows:
        row["submitted_at"] = isoformat(row["submitted_at"])

    set_cached_leaderboard(comp.id, rows)
    return rows


def my_placements(user_id, now: Optional[datetime] = None) -> list:
    """The user's top-3 finishes across competitions that have ended."""
    now = now or utcnow()

    comps = (
        Competition.query
        .join(Entry, Entry.competition_id == Competition.id)
        .filter(
            Entry.user_id == user_id,
            Competition.cancelled_at.is_(None),
            Competition.ends_at < now,
        )
        .order_by(Competition.ends_at.desc(), Competition.id.desc())
        .all()
    )

    placements = []
    for comp in comps:
        rows = build_leaderboard(comp.id)
        row = next((r for r in rows if r["user_id"] == user_id), None)
        if not row or row["rank"] > PODIUM_SIZE:
            continue

        placements.append(
            {
                "competition_id": comp.id,
                "competition_title": comp.title,
                "position": row["rank"],
                "ended_at": isoformat(comp.ends_at),
                "score": row["score"],
                "catch_count": row["catch_count"],
                "total_weight_kg": row["total_weight_kg"],
            }
        )

    return placements
