from flask import Blueprint, request, jsonify

from catchcomp.errors import InvalidInput
from catchcomp.helpers.account import require_user_id
from catchcomp.helpers.entries import get_my_entry, submit_entry, withdraw_entry

entries_bp = Blueprint("entries", __name__)


@entries_bp.route("/api/competitions/<int:competition_id>/entries", methods=["POST"])
def api_submit_entry(competition_id):
    """
    Payload: {"session_id": 42}
    """
    user_id = require_user_id()
    data = request.get_json(force=True, silent=True) or {}

    try:
        session_id = int(data.get("session_id"))
    except (TypeError, ValueError):
        raise InvalidInput("session_id is required")

    entry = submit_entry(competition_id, user_id, session_id)
    return jsonify({"ok": True, "entry": entry.to_dict()}), 201


@entries_bp.route("/api/entries/<int:entry_id>", methods=["DELETE"])
def api_withdraw_entry(entry_id):
    user_id = require_user_id()
    withdraw_entry(entry_id, user_id)
    return jsonify({"ok": True})


@entries_bp.route("/api/competitions/<int:competition_id>/my-entry")
def api_my_entry(competition_id):
    user_id = require_user_id()
    return jsonify({"ok": True, "entry": get_my_entry(competition_id, user_id)})
