from flask import Blueprint, request, jsonify

from catchcomp.errors import InvalidInput
from catchcomp.helpers.account import require_user_id
from catchcomp.helpers.invites import invite, my_invites, respond

invites_bp = Blueprint("invites", __name__)


@invites_bp.route("/api/competitions/<int:competition_id>/invites", methods=["POST"])
def api_invite(competition_id):
    """
    Payload: {"user_ids": ["u_1", "u_2"]}
    """
    inviter_id = require_user_id()
    data = request.get_json(force=True, silent=True) or {}

    invites = invite(competition_id, inviter_id, data.get("user_ids"))
    return jsonify({"ok": True, "invites": [i.to_dict() for i in invites]}), 201


@invites_bp.route("/api/invites")
def api_my_invites():
    user_id = require_user_id()
    return jsonify({"ok": True, "invites": [i.to_dict() for i in my_invites(user_id)]})


@invites_bp.route("/api/invites/<int:invite_id>/respond", methods=["POST"])
def api_respond_invite(invite_id):
    """
    Payload: {"accept": true}
    """
    user_id = require_user_id()
    data = request.get_json(force=True, silent=True) or {}

    accept = data.get("accept")
    if not isinstance(accept, bool):
        raise InvalidInput("accept must be true or false")

    inv = respond(invite_id, user_id, accept)
    return jsonify({"ok": True, "invite": inv.to_dict()})
