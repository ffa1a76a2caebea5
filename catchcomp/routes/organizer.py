from flask import Blueprint, request, jsonify

from catchcomp.helpers.account import require_user_id
from catchcomp.helpers.competition import add_award, competition_status
from catchcomp.helpers.timing import adjust_end_time
from catchcomp.helpers.validation import approve_catch, pending_catches, reject_catch
from catchcomp.helpers.winners import declare_winner, remove_winner

organizer_bp = Blueprint("organizer", __name__)


# ---- catch review ----

@organizer_bp.route("/api/competitions/<int:competition_id>/pending-catches")
def api_pending_catches(competition_id):
    organizer_id = require_user_id()
    rows = pending_catches(competition_id, organizer_id)
    return jsonify({"ok": True, "catches": [v.to_dict() for v in rows]})


@organizer_bp.route("/api/competitions/<int:competition_id>/catches/<int:catch_id>/approve", methods=["POST"])
def api_approve_catch(competition_id, catch_id):
    organizer_id = require_user_id()
    validation = approve_catch(competition_id, catch_id, organizer_id)
    return jsonify({"ok": True, "catch": validation.to_dict()})


@organizer_bp.route("/api/competitions/<int:competition_id>/catches/<int:catch_id>/reject", methods=["POST"])
def api_reject_catch(competition_id, catch_id):
    """
    Payload: {"reason": "Photo doesn't show the scale"}
    """
    organizer_id = require_user_id()
    data = request.get_json(force=True, silent=True) or {}

    validation = reject_catch(competition_id, catch_id, organizer_id, data.get("reason"))
    return jsonify({"ok": True, "catch": validation.to_dict()})


# ---- schedule ----

@organizer_bp.route("/api/competitions/<int:competition_id>/adjust-time", methods=["POST"])
def api_adjust_time(competition_id):
    """
    Payload: {"new_ends_at": "2025-10-01T20:00:00Z", "reason": "Weather delay"}
    """
    organizer_id = require_user_id()
    data = request.get_json(force=True, silent=True) or {}

    result = adjust_end_time(
        competition_id,
        organizer_id,
        data.get("new_ends_at"),
        reason=data.get("reason"),
    )
    comp = result["competition"]

    return jsonify(
        {
            "ok": True,
            "competition": comp.to_dict(status=competition_status(comp)),
            "adjustment": result["adjustment"].to_dict(),
            "reevaluated": result["reevaluated"],
        }
    )


# ---- winners & awards ----

@organizer_bp.route("/api/competitions/<int:competition_id>/winners", methods=["POST"])
def api_declare_winner(competition_id):
    """
    Payload:
      {
        "user_id": "u_123",
        "category": "Biggest Cod",
        "catch_id": 88,        (optional)
        "notes": "..."         (optional)
      }
    """
    organizer_id = require_user_id()
    data = request.get_json(force=True, silent=True) or {}

    winner = declare_winner(
        competition_id,
        organizer_id,
        data.get("user_id"),
        data.get("category"),
        catch_id=data.get("catch_id"),
        notes=data.get("notes"),
    )
    return jsonify({"ok": True, "winner": winner.to_dict()}), 201


@organizer_bp.route("/api/winners/<int:winner_id>", methods=["DELETE"])
def api_remove_winner(winner_id):
    organizer_id = require_user_id()
    remove_winner(winner_id, organizer_id)
    return jsonify({"ok": True})


@organizer_bp.route("/api/competitions/<int:competition_id>/awards", methods=["POST"])
def api_add_award(competition_id):
    organizer_id = require_user_id()
    data = request.get_json(force=True, silent=True) or {}

    award = add_award(
        competition_id,
        organizer_id,
        data.get("category"),
        data.get("title"),
        prize=data.get("prize"),
        position=data.get("position", 1),
        target_species=data.get("target_species"),
    )
    return jsonify({"ok": True, "award": award.to_dict()}), 201
