import logging
from datetime import datetime
from typing import Optional

from catchcomp.errors import CompetitionClosed, InvalidInput, InvalidWindow, NotFound, NotOrganizer
from catchcomp.extensions import db
from catchcomp.helpers.session import add_participant
from catchcomp.helpers.time import parse_datetime, utcnow
from catchcomp.models import (
    Award,
    Competition,
    COMPETITION_TYPES,
    Entry,
    FishingSession,
    SessionParticipant,
    WATER_TYPES,
)

logger = logging.getLogger(__name__)


def competition_status(comp, now: Optional[datetime] = None) -> str:
    """
    Derive status from the timestamps; only `cancelled` is stored.

      cancelled  -> cancelled_at is set
      upcoming   -> now < starts_at
      active     -> starts_at <= now <= ends_at
      ended      -> now > ends_at
    """
    if comp.cancelled_at is not None:
        return "cancelled"

    now = now or utcnow()

    if now < comp.starts_at:
        return "upcoming"
    if now <= comp.ends_at:
        return "active"
    return "ended"


def comp_is_finished(comp, now: Optional[datetime] = None) -> bool:
    """True once a comp can no longer change shape (ended or cancelled)."""
    if not comp:
        return True
    return competition_status(comp, now) in ("ended", "cancelled")


def get_competition_or_404(competition_id) -> Competition:
    comp = db.session.get(Competition, competition_id) if competition_id is not None else None
    if not comp:
        raise NotFound("Competition not found")
    return comp


def is_organizer(comp, user_id) -> bool:
    return bool(comp) and bool(user_id) and comp.created_by == user_id


def require_organizer(comp, user_id) -> None:
    if not is_organizer(comp, user_id):
        raise NotOrganizer()


def participating_session_ids(comp) -> set:
    """The backing session plus every session an entry is bound to."""
    ids = {
        row.session_id
        for row in Entry.query.with_entities(Entry.session_id).filter(Entry.competition_id == comp.id)
    }
    if comp.session_id:
        ids.add(comp.session_id)
    return ids


def participant_user_ids(comp) -> list:
    """Everyone who should hear about changes to this comp (entrants + backing session)."""
    user_ids = {
        row.user_id
        for row in Entry.query.with_entities(Entry.user_id).filter(Entry.competition_id == comp.id)
    }
    if comp.session_id:
        user_ids.update(
            row.user_id
            for row in SessionParticipant.query
            .with_entities(SessionParticipant.user_id)
            .filter(SessionParticipant.session_id == comp.session_id)
        )
    return sorted(user_ids)


def _clean_species(raw) -> Optional[list]:
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, (list, tuple, set)):
        raise InvalidInput("allowed_species must be a list of names")

    cleaned = []
    for name in raw:
        name = (str(name) if name is not None else "").strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned or None


def _clean_location(raw) -> tuple:
    if not raw:
        return None, None, None
    if not isinstance(raw, dict):
        raise InvalidInput("location_restriction must be an object with lat, lng and radius_km")
    try:
        lat = float(raw.get("lat"))
        lng = float(raw.get("lng"))
        radius_km = float(raw.get("radius_km"))
    except (TypeError, ValueError):
        raise InvalidInput("location_restriction needs numeric lat, lng and radius_km")

    if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lng <= 180.0):
        raise InvalidInput("location_restriction is not a valid coordinate")
    if radius_km <= 0:
        raise InvalidInput("radius_km must be positive")
    return lat, lng, radius_km


def create_competition(
    organizer_id: str,
    title: str,
    type: str,
    starts_at,
    ends_at,
    description: Optional[str] = None,
    allowed_species=None,
    water_type: Optional[str] = "any",
    location_restriction=None,
    max_participants=None,
    is_public: bool = True,
    prize: Optional[str] = None,
) -> Competition:
    """
    Create a competition plus its backing session, organizer as session owner.
    """
    title = (title or "").strip()
    if not title:
        raise InvalidInput("Competition title is required")

    if type not in COMPETITION_TYPES:
        raise InvalidInput(f"type must be one of {', '.join(COMPETITION_TYPES)}")

    water_type = (water_type or "any").strip().lower()
    if water_type not in WATER_TYPES:
        raise InvalidInput(f"water_type must be one of {', '.join(WATER_TYPES)}")

    starts = parse_datetime(starts_at)
    ends = parse_datetime(ends_at)
    if starts is None or ends is None:
        raise InvalidInput("starts_at and ends_at must be ISO-8601 timestamps")
    if starts >= ends:
        raise InvalidWindow()

    if max_participants is not None:
        try:
            max_participants = int(max_participants)
        except (TypeError, ValueError):
            raise InvalidInput("max_participants must be a number")
        if max_participants < 1:
            raise InvalidInput("max_participants must be at least 1")

    lat, lng, radius_km = _clean_location(location_restriction)

    backing = FishingSession(
        owner_id=organizer_id,
        title=title,
        water_type=None if water_type == "any" else water_type,
        started_at=starts,
        ended_at=ends,
    )
    db.session.add(backing)
    db.session.flush()

    add_participant(backing.id, organizer_id, role="owner")

    comp = Competition(
        title=title,
        description=(description or "").strip() or None,
        type=type,
        starts_at=starts,
        ends_at=ends,
        allowed_species=_clean_species(allowed_species),
        water_type=water_type,
        location_lat=lat,
        location_lng=lng,
        location_radius_km=radius_km,
        max_participants=max_participants,
        is_public=bool(is_public),
        prize=(prize or "").strip() or None,
        session_id=backing.id,
        created_by=organizer_id,
    )
    db.session.add(comp)
    db.session.commit()

    logger.info("[CREATE COMP] %s (%s) by %s", comp.id, comp.type, organizer_id)
    return comp


def cancel_competition(competition_id, organizer_id) -> Competition:
    comp = get_competition_or_404(competition_id)
    require_organizer(comp, organizer_id)

    if comp_is_finished(comp):
        raise CompetitionClosed("Only upcoming or active competitions can be cancelled")

    comp.cancelled_at = utcnow()
    db.session.commit()

    logger.info("[CANCEL COMP] %s by %s", comp.id, organizer_id)
    return comp


def add_award(
    competition_id,
    organizer_id,
    category: str,
    title: str,
    prize: Optional[str] = None,
    position=1,
    target_species: Optional[str] = None,
) -> Award:
    comp = get_competition_or_404(competition_id)
    require_organizer(comp, organizer_id)

    category = (category or "").strip()
    title = (title or "").strip()
    if not category or not title:
        raise InvalidInput("An award needs a category and a title")

    try:
        position = int(position)
    except (TypeError, ValueError):
        raise InvalidInput("position must be a number")
    if position < 1:
        raise InvalidInput("position must be 1 or more")

    award = Award(
        competition_id=comp.id,
        category=category,
        title=title,
        prize=(prize or "").strip() or None,
        position=position,
        target_species=(target_species or "").strip() or None,
    )
    db.session.add(award)
    db.session.commit()
    return award


def list_awards(competition_id) -> list:
    comp = get_competition_or_404(competition_id)
    return (
        Award.query
        .filter_by(competition_id=comp.id)
        .order_by(Award.position.asc(), Award.id.asc())
        .all()
    )
