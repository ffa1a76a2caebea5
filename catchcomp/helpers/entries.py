import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from catchcomp.errors import (
    CompetitionClosed,
    CompetitionFull,
    DuplicateEntry,
    InvalidInput,
    InvalidSession,
    NotEntryOwner,
    NotFound,
)
from catchcomp.extensions import db
from catchcomp.helpers.competition import comp_is_finished, get_competition_or_404
from catchcomp.helpers.eligibility import session_ineligibility_reason
from catchcomp.helpers.leaderboard import build_leaderboard, my_rank
from catchcomp.helpers.leaderboard_cache import invalidate_leaderboard_cache
from catchcomp.helpers.scoring import recompute_entry_score
from catchcomp.helpers.session import get_session_or_404, user_in_session
from catchcomp.helpers.validation import admit_session_catches
from catchcomp.models import Entry

logger = logging.getLogger(__name__)


def submit_entry(competition_id, user_id, session_id) -> Entry:
    """
    Enter `user_id` into a competition with one of their fishing sessions.

    The session's earlier eligible catches go into the organizer's pending
    queue, and the entry starts with whatever score is already approved.
    """
    comp = get_competition_or_404(competition_id)

    if comp_is_finished(comp):
        raise CompetitionClosed("This competition is no longer accepting entries")

    if Entry.query.filter_by(competition_id=comp.id, user_id=user_id).first():
        raise DuplicateEntry()

    fishing_session = get_session_or_404(session_id)
    if not user_in_session(fishing_session, user_id):
        raise InvalidSession("That session does not belong to you")

    reason = session_ineligibility_reason(comp, fishing_session)
    if reason:
        raise InvalidSession(reason)

    if comp.max_participants:
        entrants = Entry.query.filter_by(competition_id=comp.id).count()
        if entrants >= comp.max_participants:
            raise CompetitionFull()

    entry = Entry(
        competition_id=comp.id,
        user_id=user_id,
        session_id=fishing_session.id,
        score=0.0,
        vote_tally=0,
    )
    db.session.add(entry)

    try:
        db.session.flush()
    except IntegrityError:
        # lost a race with a parallel submit for the same user
        db.session.rollback()
        raise DuplicateEntry()

    admitted = admit_session_catches(comp, fishing_session.id, user_id)
    db.session.flush()
    recompute_entry_score(entry, comp)
    db.session.commit()

    invalidate_leaderboard_cache(comp.id)

    logger.info(
        "[ENTER] %s entered competition %s with session %s (%d catch(es) pending)",
        user_id, comp.id, fishing_session.id, len(admitted),
    )
    return entry


def withdraw_entry(entry_id, user_id) -> None:
    """Only the entrant can withdraw. Catches and their validations are kept."""
    entry = db.session.get(Entry, entry_id) if entry_id is not None else None
    if not entry:
        raise NotFound("Entry not found")

    if entry.user_id != user_id:
        raise NotEntryOwner()

    competition_id = entry.competition_id
    db.session.delete(entry)
    db.session.commit()

    invalidate_leaderboard_cache(competition_id)
    logger.info("[WITHDRAW] %s left competition %s", user_id, competition_id)


def get_my_entry(competition_id, user_id) -> Optional[dict]:
    comp = get_competition_or_404(competition_id)

    entry = Entry.query.filter_by(competition_id=comp.id, user_id=user_id).first()
    if not entry:
        return None

    out = entry.to_dict()
    out["rank"] = my_rank(build_leaderboard(comp.id), user_id)
    return out


def set_vote_tally(competition_id, user_id, votes) -> Entry:
    """photo_contest: store the tally the voting service computed."""
    comp = get_competition_or_404(competition_id)

    try:
        votes = int(votes)
    except (TypeError, ValueError):
        raise InvalidInput("votes must be a whole number")
    if votes < 0:
        raise InvalidInput("votes cannot be negative")

    entry = Entry.query.filter_by(competition_id=comp.id, user_id=user_id).first()
    if not entry:
        raise NotFound("Entry not found")

    entry.vote_tally = votes
    recompute_entry_score(entry, comp)
    db.session.commit()

    invalidate_leaderboard_cache(comp.id)
    return entry
