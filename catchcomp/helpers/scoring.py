from dataclasses import dataclass
from datetime import datetime
from types import SimpleNamespace
from typing import Iterable, Optional

from catchcomp.errors import InvalidInput
from catchcomp.extensions import db
from catchcomp.helpers.eligibility import normalize_species
from catchcomp.helpers.time import isoformat
from catchcomp.models import Catch, CatchValidation, Competition, Entry


@dataclass(frozen=True)
class ScoredCatch:
    """A catch as the calculator sees it: its facts plus its validation status."""

    catch_id: int
    user_id: str
    species: str
    weight_kg: Optional[float]
    length_cm: Optional[float]
    caught_at: Optional[datetime]
    photo_url: Optional[str]
    validation_status: str

    @classmethod
    def from_validation(cls, validation) -> "ScoredCatch":
        c = validation.catch
        return cls(
            catch_id=c.id,
            user_id=c.user_id,
            species=c.species,
            weight_kg=c.weight_kg,
            length_cm=c.length_cm,
            caught_at=c.caught_at,
            photo_url=c.photo_url,
            validation_status=validation.validation_status,
        )

    def to_dict(self):
        return {
            "id": self.catch_id,
            "species": self.species,
            "weight_kg": self.weight_kg,
            "length_cm": self.length_cm,
            "photo_url": self.photo_url,
            "caught_at": isoformat(self.caught_at),
        }


# --- Scoring function ---

def approved_only(catches: Iterable) -> list:
    return [c for c in catches if getattr(c, "validation_status", None) == "approved"]


def calculate_score(competition_type: str, catches: Iterable, vote_tally=0) -> float:
    """
    Score one competitor. Pending and rejected catches are dropped here no
    matter what the caller passed in.

      heaviest_fish     -> heaviest approved weight_kg (0 if none)
      most_catches      -> number of approved catches
      species_diversity -> distinct species among approved catches
      photo_contest     -> vote_tally (comes from the voting service)
    """
    approved = approved_only(catches)

    if competition_type == "heaviest_fish":
        weights = [c.weight_kg for c in approved if c.weight_kg is not None]
        return float(max(weights)) if weights else 0.0

    if competition_type == "most_catches":
        return float(len(approved))

    if competition_type == "species_diversity":
        species = {normalize_species(c.species) for c in approved}
        species.discard("")
        return float(len(species))

    if competition_type == "photo_contest":
        return float(vote_tally or 0)

    raise InvalidInput(f"Unknown competition type: {competition_type}")


def best_catch(catches: Iterable):
    """Heaviest approved catch; earlier and then lower id wins a tie. None if nothing approved."""
    approved = approved_only(catches)
    if not approved:
        return None

    def key(c):
        weight = c.weight_kg
        return (
            weight is None,
            -(weight or 0.0),
            c.caught_at or datetime.max,
            c.catch_id,
        )

    return min(approved, key=key)


def total_weight(catches: Iterable) -> float:
    return round(sum(c.weight_kg or 0.0 for c in approved_only(catches)), 3)


def scoring_session_ids(entry, comp) -> set:
    ids = {entry.session_id}
    if comp.session_id:
        ids.add(comp.session_id)
    return ids


def scoring_catches(entry, comp=None) -> list:
    """
    Catches that count for this entry: approved, still eligible (or
    grandfathered), logged by the entrant in their entry session or the
    competition's backing session.
    """
    comp = comp or db.session.get(Competition, entry.competition_id)

    validations = (
        CatchValidation.query
        .join(Catch, Catch.id == CatchValidation.catch_id)
        .filter(
            CatchValidation.competition_id == entry.competition_id,
            CatchValidation.validation_status == "approved",
            Catch.user_id == entry.user_id,
            Catch.session_id.in_(scoring_session_ids(entry, comp)),
        )
        .all()
    )
    return [ScoredCatch.from_validation(v) for v in validations if v.counts_for_score]


def recompute_entry_score(entry, comp=None) -> float:
    """Refresh the cached score. Caller is responsible for committing."""
    comp = comp or db.session.get(Competition, entry.competition_id)
    entry.score = calculate_score(comp.type, scoring_catches(entry, comp), entry.vote_tally)
    return entry.score


def recompute_competition_scores(comp) -> int:
    entries = Entry.query.filter_by(competition_id=comp.id).all()
    for entry in entries:
        recompute_entry_score(entry, comp)
    return len(entries)


def calculate_competition_score(competition_id, session_id, user_id) -> float:
    """
    Score a (competition, session, user) triple without needing an Entry row,
    e.g. to preview what an entry would be worth.
    """
    comp = db.session.get(Competition, competition_id)
    if not comp:
        return 0.0

    entry = (
        Entry.query.filter_by(competition_id=comp.id, user_id=user_id).first()
    )
    vote_tally = entry.vote_tally if entry else 0

    preview = SimpleNamespace(competition_id=comp.id, user_id=user_id, session_id=session_id)
    return calculate_score(comp.type, scoring_catches(preview, comp), vote_tally)
