from .session import FishingSession, SessionParticipant
from .competition import Competition, COMPETITION_TYPES, WATER_TYPES
from .catch import Catch, CatchValidation, VALIDATION_STATUSES
from .entry import Entry
from .winner import Winner
from .invite import Invite
from .adjustment import TimeAdjustment
from .award import Award

__all__ = [
    "FishingSession",
    "SessionParticipant",
    "Competition",
    "COMPETITION_TYPES",
    "WATER_TYPES",
    "Catch",
    "CatchValidation",
    "VALIDATION_STATUSES",
    "Entry",
    "Winner",
    "Invite",
    "TimeAdjustment",
    "Award",
]
