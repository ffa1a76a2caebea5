import logging
from typing import Optional

from catchcomp.errors import (
    AlreadyDecided,
    CompetitionClosed,
    InvalidInput,
    InvalidSession,
    NotFound,
    ValidationReasonRequired,
)
from catchcomp.extensions import db
from catchcomp.helpers.competition import (
    competition_status,
    get_competition_or_404,
    participating_session_ids,
    require_organizer,
)
from catchcomp.helpers.eligibility import is_eligible
from catchcomp.helpers.leaderboard_cache import invalidate_leaderboard_cache
from catchcomp.helpers.scoring import recompute_entry_score
from catchcomp.helpers.session import get_session_or_404, user_in_session
from catchcomp.helpers.time import parse_datetime, utcnow
from catchcomp.models import Catch, CatchValidation, Competition, Entry

logger = logging.getLogger(__name__)


# --- admitting catches ---

def _competitions_for_session(session_id) -> list:
    """Non-cancelled comps whose participating sessions include this one."""
    entered = db.select(Entry.competition_id).where(Entry.session_id == session_id)
    return (
        Competition.query
        .filter(
            Competition.cancelled_at.is_(None),
            (Competition.session_id == session_id) | (Competition.id.in_(entered)),
        )
        .order_by(Competition.id.asc())
        .all()
    )


def admit_catch(comp, catch) -> Optional[CatchValidation]:
    """
    Open a pending validation for `catch` in `comp` if it is eligible and not
    already tracked there. Caller is responsible for committing.
    """
    existing = CatchValidation.query.filter_by(competition_id=comp.id, catch_id=catch.id).first()
    if existing:
        return None

    if not is_eligible(comp, catch):
        return None

    validation = CatchValidation(
        competition_id=comp.id,
        catch_id=catch.id,
        validation_status="pending",
        is_eligible=True,
    )
    db.session.add(validation)
    return validation


def evaluate_logged_catch(catch) -> list:
    """
    Catch-log event: run the eligibility filter for every competition the
    catch's session takes part in. Returns the new pending validations.
    """
    created = []
    for comp in _competitions_for_session(catch.session_id):
        validation = admit_catch(comp, catch)
        if validation is not None:
            created.append(validation)
    return created


def admit_session_catches(comp, session_id, user_id) -> list:
    """Catches logged before the entry existed get their chance too."""
    catches = (
        Catch.query
        .filter_by(session_id=session_id, user_id=user_id)
        .order_by(Catch.caught_at.asc(), Catch.id.asc())
        .all()
    )
    created = []
    for catch in catches:
        validation = admit_catch(comp, catch)
        if validation is not None:
            created.append(validation)
    return created


def _optional_float(value, field):
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{field} must be a number")


def log_catch(
    user_id,
    session_id,
    species,
    weight_kg=None,
    length_cm=None,
    caught_at=None,
    latitude=None,
    longitude=None,
    photo_url=None,
):
    """
    Record a catch in a session the user belongs to and run the catch-log
    eligibility pass. Returns (catch, new_validations).
    """
    fishing_session = get_session_or_404(session_id)
    if not user_in_session(fishing_session, user_id):
        raise InvalidSession("You are not part of that session")

    species = (species or "").strip()
    if not species:
        raise InvalidInput("species is required")

    weight_kg = _optional_float(weight_kg, "weight_kg")
    length_cm = _optional_float(length_cm, "length_cm")
    if (weight_kg is not None and weight_kg < 0) or (length_cm is not None and length_cm < 0):
        raise InvalidInput("weight_kg and length_cm cannot be negative")

    latitude = _optional_float(latitude, "latitude")
    longitude = _optional_float(longitude, "longitude")

    when = utcnow()
    if caught_at not in (None, ""):
        when = parse_datetime(caught_at)
        if when is None:
            raise InvalidInput("caught_at must be an ISO-8601 timestamp")

    catch = Catch(
        session_id=fishing_session.id,
        user_id=user_id,
        species=species,
        weight_kg=weight_kg,
        length_cm=length_cm,
        caught_at=when,
        latitude=latitude,
        longitude=longitude,
        photo_url=(photo_url or "").strip() or None,
    )
    db.session.add(catch)
    db.session.flush()

    validations = evaluate_logged_catch(catch)
    db.session.commit()

    logger.info(
        "[LOG CATCH] catch %s in session %s -> pending in %d competition(s)",
        catch.id, fishing_session.id, len(validations),
    )
    return catch, validations


# --- organizer decisions ---

def _decide(competition_id, catch_id, organizer_id, status, reason=None) -> CatchValidation:
    comp = get_competition_or_404(competition_id)
    require_organizer(comp, organizer_id)

    if competition_status(comp) == "cancelled":
        raise CompetitionClosed()

    if status == "rejected":
        reason = (reason or "").strip()
        if not reason:
            raise ValidationReasonRequired()
    else:
        reason = None

    validation = CatchValidation.query.filter_by(competition_id=comp.id, catch_id=catch_id).first()
    if not validation:
        raise NotFound("That catch is not part of this competition")
    if not validation.is_eligible:
        raise InvalidInput("That catch is outside the competition's rules or window")

    # Conditional update: of two racing decisions only one matches 'pending'
    updated = (
        CatchValidation.query
        .filter_by(id=validation.id, validation_status="pending", is_eligible=True)
        .update(
            {
                "validation_status": status,
                "rejection_reason": reason,
                "decided_by": organizer_id,
                "decided_at": utcnow(),
            },
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.session.rollback()
        raise AlreadyDecided(f"This catch was already {validation.validation_status}")

    db.session.expire(validation)

    entry = Entry.query.filter_by(competition_id=comp.id, user_id=validation.catch.user_id).first()
    if entry:
        recompute_entry_score(entry, comp)

    db.session.commit()
    invalidate_leaderboard_cache(comp.id)

    logger.info("[%s] catch %s in competition %s by %s", status.upper(), catch_id, comp.id, organizer_id)
    return validation


def approve_catch(competition_id, catch_id, organizer_id) -> CatchValidation:
    return _decide(competition_id, catch_id, organizer_id, "approved")


def reject_catch(competition_id, catch_id, organizer_id, reason) -> CatchValidation:
    return _decide(competition_id, catch_id, organizer_id, "rejected", reason)


# --- read models ---

def pending_catches(competition_id, organizer_id) -> list:
    """Organizer view: catches waiting for a decision, newest first."""
    comp = get_competition_or_404(competition_id)
    require_organizer(comp, organizer_id)

    return (
        CatchValidation.query
        .join(Catch, Catch.id == CatchValidation.catch_id)
        .filter(
            CatchValidation.competition_id == comp.id,
            CatchValidation.validation_status == "pending",
            CatchValidation.is_eligible.is_(True),
            Catch.session_id.in_(participating_session_ids(comp)),
        )
        .order_by(Catch.created_at.desc(), Catch.id.desc())
        .all()
    )


def my_catches(competition_id, user_id) -> list:
    """A competitor's catches in this competition with their status."""
    comp = get_competition_or_404(competition_id)

    return (
        CatchValidation.query
        .join(Catch, Catch.id == CatchValidation.catch_id)
        .filter(
            CatchValidation.competition_id == comp.id,
            Catch.user_id == user_id,
        )
        .order_by(Catch.created_at.desc(), Catch.id.desc())
        .all()
    )
