import logging
from collections import OrderedDict

from catchcomp.errors import InvalidInput, NotFound
from catchcomp.extensions import db
from catchcomp.helpers.competition import get_competition_or_404, require_organizer
from catchcomp.models import CatchValidation, Winner

logger = logging.getLogger(__name__)


def declare_winner(
    competition_id,
    organizer_id,
    winner_user_id,
    category,
    catch_id=None,
    notes=None,
) -> Winner:
    """
    Record a winner under any category the organizer likes. The same user may
    win several categories and a category may hold several winners. A linked
    catch must be tracked in this competition and belong to the winner.
    """
    comp = get_competition_or_404(competition_id)
    require_organizer(comp, organizer_id)

    winner_user_id = (str(winner_user_id) if winner_user_id is not None else "").strip()
    category = (category or "").strip()
    if not winner_user_id:
        raise InvalidInput("winner_user_id is required")
    if not category:
        raise InvalidInput("category is required")

    if catch_id is not None:
        try:
            catch_id = int(catch_id)
        except (TypeError, ValueError):
            raise InvalidInput("catch_id must be a number")
        validation = CatchValidation.query.filter_by(competition_id=comp.id, catch_id=catch_id).first()
        if not validation:
            raise NotFound("That catch is not part of this competition")
        if validation.catch.user_id != winner_user_id:
            raise InvalidInput("That catch belongs to someone else")

    winner = Winner(
        competition_id=comp.id,
        user_id=winner_user_id,
        category=category,
        catch_id=catch_id,
        notes=(notes or "").strip() or None,
        declared_by=organizer_id,
    )
    db.session.add(winner)
    db.session.commit()

    logger.info("[DECLARE WINNER] %s for '%s' in competition %s", winner_user_id, category, comp.id)
    return winner


def remove_winner(winner_id, organizer_id) -> None:
    winner = db.session.get(Winner, winner_id) if winner_id is not None else None
    if not winner:
        raise NotFound("Winner not found")

    comp = get_competition_or_404(winner.competition_id)
    require_organizer(comp, organizer_id)

    db.session.delete(winner)
    db.session.commit()

    logger.info("[REMOVE WINNER] %s from competition %s", winner_id, comp.id)


def winners_by_category(competition_id) -> "OrderedDict[str, list]":
    """Newest declaration first; categories appear in that order too."""
    comp = get_competition_or_404(competition_id)

    winners = (
        Winner.query
        .filter_by(competition_id=comp.id)
        .order_by(Winner.declared_at.desc(), Winner.id.desc())
        .all()
    )

    grouped = OrderedDict()
    for w in winners:
        grouped.setdefault(w.category, []).append(w)
    return grouped
