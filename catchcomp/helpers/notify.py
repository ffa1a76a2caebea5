"""
Fire-and-forget notification events.

The engine only announces what happened; delivery (push, email, in-app) is
whatever subscribes to these signals.
"""
import logging

from blinker import Namespace

logger = logging.getLogger(__name__)

_signals = Namespace()

# sender: Competition. kwargs: adjustment, participant_ids
competition_time_adjusted = _signals.signal("competition-time-adjusted")

# sender: Competition. kwargs: invites
competition_invites_created = _signals.signal("competition-invites-created")


def emit(signal, sender, **payload) -> int:
    """
    Send `signal` to every subscriber. A failing subscriber is logged and
    never undoes the operation that triggered it.
    """
    try:
        results = signal.send(sender, **payload)
    except Exception:
        logger.exception("[NOTIFY] subscriber failed for %s", signal.name)
        return 0

    logger.info("[NOTIFY] %s -> %d receiver(s)", signal.name, len(results))
    return len(results)
