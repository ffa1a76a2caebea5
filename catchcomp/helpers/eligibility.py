"""
EligibilityFilter: does a catch (or a whole session) fit a competition's
window and ruleset?

Pure predicates over plain attributes, so they work on model rows and on
anything shaped like them. Nothing here touches the database.
"""
import math
from typing import Optional

EARTH_RADIUS_KM = 6371.0


def normalize_species(name) -> str:
    return (name or "").strip().casefold()


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two lat/lng points."""
    lat1, lng1 = math.radians(lat1), math.radians(lng1)
    lat2, lng2 = math.radians(lat2), math.radians(lng2)

    dlat = lat2 - lat1
    dlng = lng2 - lng1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    c = 2 * math.asin(min(1.0, math.sqrt(a)))
    return EARTH_RADIUS_KM * c


def in_window(comp, when) -> bool:
    """Inclusive on both ends."""
    if when is None:
        return False
    return comp.starts_at <= when <= comp.ends_at


def species_allowed(comp, species) -> bool:
    allowed = comp.allowed_species or []
    if not allowed:
        return True
    wanted = normalize_species(species)
    return any(normalize_species(s) == wanted for s in allowed)


def water_type_matches(comp, water_type) -> bool:
    required = (comp.water_type or "any").strip().lower()
    if required == "any":
        return True
    return (water_type or "").strip().lower() == required


def within_location(comp, lat, lng) -> bool:
    restriction = comp.location_restriction
    if not restriction:
        return True

    # A restricted comp can't accept a catch we can't place
    if lat is None or lng is None:
        return False

    distance = haversine_km(restriction["lat"], restriction["lng"], lat, lng)
    return distance <= restriction["radius_km"]


def is_eligible(comp, catch, session=None) -> bool:
    """All four rules must hold: window, species, water type, location."""
    if session is None:
        session = getattr(catch, "session", None)

    if not in_window(comp, catch.caught_at):
        return False
    if not species_allowed(comp, catch.species):
        return False
    if not water_type_matches(comp, getattr(session, "water_type", None)):
        return False
    if not within_location(comp, catch.latitude, catch.longitude):
        return False
    return True


def session_ineligibility_reason(comp, session) -> Optional[str]:
    """
    Same rules at session-selection granularity. Returns a message the UI can
    show, or None if the session is fine.
    """
    if not in_window(comp, session.started_at):
        return "That session did not start during the competition window."
    if not water_type_matches(comp, session.water_type):
        return f"This competition is {comp.water_type} only."
    return None


def session_is_eligible(comp, session) -> bool:
    return session_ineligibility_reason(comp, session) is None
