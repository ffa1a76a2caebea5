import logging

from flask import current_app

from catchcomp.errors import CompetitionClosed, InvalidInput, InvalidWindow
from catchcomp.extensions import db
from catchcomp.helpers.competition import (
    comp_is_finished,
    get_competition_or_404,
    participant_user_ids,
    participating_session_ids,
    require_organizer,
)
from catchcomp.helpers.eligibility import is_eligible
from catchcomp.helpers.leaderboard_cache import invalidate_leaderboard_cache
from catchcomp.helpers.notify import competition_time_adjusted, emit
from catchcomp.helpers.scoring import recompute_competition_scores
from catchcomp.helpers.time import parse_datetime
from catchcomp.helpers.validation import admit_catch
from catchcomp.models import Catch, CatchValidation, TimeAdjustment

logger = logging.getLogger(__name__)


def _grandfather_enabled() -> bool:
    return bool(current_app.config.get("GRANDFATHER_APPROVED_CATCHES", False))


def reevaluate_window(comp, old_end, new_end) -> int:
    """
    Re-run eligibility for catches that sit between the old and the new end.

    Extending opens pending validations for catches that now fit (and restores
    ones a previous shortening had knocked out). Shortening flags them
    ineligible; approved ones are grandfathered when the config allows it.
    `comp.ends_at` must already hold the new value. Caller commits.
    """
    lo, hi = min(old_end, new_end), max(old_end, new_end)
    if lo == hi:
        return 0

    catches = (
        Catch.query
        .filter(
            Catch.session_id.in_(participating_session_ids(comp)),
            Catch.caught_at > lo,
            Catch.caught_at <= hi,
        )
        .order_by(Catch.caught_at.asc(), Catch.id.asc())
        .all()
    )

    grandfather = _grandfather_enabled()
    touched = 0

    for catch in catches:
        validation = CatchValidation.query.filter_by(competition_id=comp.id, catch_id=catch.id).first()

        if validation is None:
            if admit_catch(comp, catch) is not None:
                touched += 1
            continue

        eligible = is_eligible(comp, catch)
        if eligible:
            validation.is_eligible = True
            validation.grandfathered = False
        else:
            validation.is_eligible = False
            validation.grandfathered = grandfather and validation.validation_status == "approved"
        touched += 1

    return touched


def adjust_end_time(competition_id, organizer_id, new_ends_at, reason=None) -> dict:
    """
    Move a live or upcoming competition's end time.

    Everything (the new end, the audit row, re-evaluated validations and
    recomputed scores) lands in a single commit. Participants are notified
    after the commit.
    """
    comp = get_competition_or_404(competition_id)
    require_organizer(comp, organizer_id)

    new_end = parse_datetime(new_ends_at)
    if new_end is None:
        raise InvalidInput("new_ends_at must be an ISO-8601 timestamp")

    if comp_is_finished(comp):
        raise CompetitionClosed("Ended or cancelled competitions can't be rescheduled")

    if new_end <= comp.starts_at:
        raise InvalidWindow("The new end time must be after the competition starts")

    old_end = comp.ends_at

    comp.ends_at = new_end
    if comp.session is not None:
        comp.session.ended_at = new_end

    adjustment = TimeAdjustment(
        competition_id=comp.id,
        adjusted_by=organizer_id,
        old_ends_at=old_end,
        new_ends_at=new_end,
        reason=(reason or "").strip() or None,
    )
    db.session.add(adjustment)

    reevaluated = reevaluate_window(comp, old_end, new_end)
    db.session.flush()
    recompute_competition_scores(comp)

    db.session.commit()
    invalidate_leaderboard_cache(comp.id)

    logger.info(
        "[ADJUST TIME] competition %s: %s -> %s by %s (%d catch(es) re-evaluated)",
        comp.id, old_end.isoformat(), new_end.isoformat(), organizer_id, reevaluated,
    )

    emit(
        competition_time_adjusted,
        comp,
        adjustment=adjustment,
        participant_ids=participant_user_ids(comp),
    )

    return {
        "competition": comp,
        "adjustment": adjustment,
        "reevaluated": reevaluated,
    }
