from catchcomp.errors import NotFound
from catchcomp.extensions import db
from catchcomp.models import FishingSession, SessionParticipant


def get_session_or_404(session_id) -> FishingSession:
    fishing_session = db.session.get(FishingSession, session_id) if session_id is not None else None
    if not fishing_session:
        raise NotFound("Session not found")
    return fishing_session


def user_in_session(fishing_session, user_id) -> bool:
    """Owner, or an active participant."""
    if not fishing_session or not user_id:
        return False

    if fishing_session.owner_id == user_id:
        return True

    return (
        SessionParticipant.query
        .filter_by(session_id=fishing_session.id, user_id=user_id, status="active")
        .first()
        is not None
    )


def add_participant(session_id: int, user_id: str, role: str = "contributor") -> SessionParticipant:
    """
    Idempotent: an existing participant row is returned as-is.
    Caller is responsible for committing.
    """
    existing = SessionParticipant.query.filter_by(session_id=session_id, user_id=user_id).first()
    if existing:
        return existing

    participant = SessionParticipant(
        session_id=session_id,
        user_id=user_id,
        role=role,
        status="active",
    )
    db.session.add(participant)
    return participant
