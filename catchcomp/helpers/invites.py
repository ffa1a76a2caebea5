import logging

from catchcomp.errors import AlreadyDecided, InvalidInput, NotFound, NotInvitee
from catchcomp.extensions import db
from catchcomp.helpers.competition import get_competition_or_404
from catchcomp.helpers.notify import competition_invites_created, emit
from catchcomp.helpers.session import add_participant
from catchcomp.helpers.time import utcnow
from catchcomp.models import Invite

logger = logging.getLogger(__name__)


def invite(competition_id, inviter_id, invitee_ids) -> list:
    """
    One pending invite per distinct invitee. No eligibility check: anyone can
    be invited, entering is a separate step.
    """
    comp = get_competition_or_404(competition_id)

    if isinstance(invitee_ids, str):
        invitee_ids = [invitee_ids]

    seen = []
    for raw in invitee_ids or []:
        invitee_id = (str(raw) if raw is not None else "").strip()
        if invitee_id and invitee_id not in seen:
            seen.append(invitee_id)

    if not seen:
        raise InvalidInput("Pick at least one person to invite")

    invites = [
        Invite(
            competition_id=comp.id,
            inviter_id=inviter_id,
            invitee_id=invitee_id,
            status="pending",
        )
        for invitee_id in seen
    ]
    db.session.add_all(invites)
    db.session.commit()

    logger.info("[INVITE] %s invited %d user(s) to competition %s", inviter_id, len(invites), comp.id)
    emit(competition_invites_created, comp, invites=invites)
    return invites


def respond(invite_id, invitee_id, accept: bool) -> Invite:
    """
    Accept joins the competition's backing session as a contributor.
    Neither answer creates an Entry.
    """
    inv = db.session.get(Invite, invite_id) if invite_id is not None else None
    if not inv:
        raise NotFound("Invite not found")

    if inv.invitee_id != invitee_id:
        raise NotInvitee()

    new_status = "accepted" if accept else "declined"

    updated = (
        Invite.query
        .filter_by(id=inv.id, status="pending")
        .update({"status": new_status, "responded_at": utcnow()}, synchronize_session=False)
    )
    if updated != 1:
        db.session.rollback()
        raise AlreadyDecided(f"This invite was already {inv.status}")

    db.session.expire(inv)

    if accept and inv.competition and inv.competition.session_id:
        add_participant(inv.competition.session_id, invitee_id, role="contributor")

    db.session.commit()

    logger.info("[INVITE %s] invite %s by %s", new_status.upper(), inv.id, invitee_id)
    return inv


def my_invites(user_id) -> list:
    return (
        Invite.query
        .filter_by(invitee_id=user_id, status="pending")
        .order_by(Invite.created_at.desc(), Invite.id.desc())
        .all()
    )
