from flask import Blueprint, request, jsonify

from catchcomp.errors import InvalidInput
from catchcomp.helpers.account import require_user_id
from catchcomp.helpers.validation import log_catch, my_catches

catches_bp = Blueprint("catches", __name__)


@catches_bp.route("/api/catches", methods=["POST"])
def api_log_catch():
    """
    Log a catch in one of your sessions.

    Payload:
      {
        "session_id": 42,
        "species": "Cod",
        "weight_kg": 4.2,
        "length_cm": 71,
        "caught_at": "2025-10-01T09:15:00Z",
        "latitude": 59.91,
        "longitude": 10.75,
        "photo_url": "https://..."
      }

    Every competition the session takes part in gets a pending validation
    for the catch if it fits that competition's rules.
    """
    user_id = require_user_id()
    data = request.get_json(force=True, silent=True) or {}

    try:
        session_id = int(data.get("session_id"))
    except (TypeError, ValueError):
        raise InvalidInput("session_id is required")

    catch, validations = log_catch(
        user_id,
        session_id,
        data.get("species"),
        weight_kg=data.get("weight_kg"),
        length_cm=data.get("length_cm"),
        caught_at=data.get("caught_at"),
        latitude=data.get("latitude"),
        longitude=data.get("longitude"),
        photo_url=data.get("photo_url"),
    )

    return jsonify(
        {
            "ok": True,
            "catch": catch.to_dict(),
            "pending_in": [v.competition_id for v in validations],
        }
    ), 201


@catches_bp.route("/api/competitions/<int:competition_id>/my-catches")
def api_my_catches(competition_id):
    user_id = require_user_id()
    rows = my_catches(competition_id, user_id)
    return jsonify({"ok": True, "catches": [v.to_dict() for v in rows]})
