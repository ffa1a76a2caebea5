from flask import Blueprint, request, jsonify

from catchcomp.helpers.account import get_user_id_for_session, require_user_id
from catchcomp.helpers.competition import (
    cancel_competition,
    competition_status,
    create_competition,
    get_competition_or_404,
    is_organizer,
    list_awards,
)
from catchcomp.helpers.leaderboard import build_leaderboard, my_placements, my_rank
from catchcomp.helpers.winners import winners_by_category

competitions_bp = Blueprint("competitions", __name__)


@competitions_bp.route("/api/competitions", methods=["POST"])
def api_create_competition():
    """
    Payload:
      {
        "title": "Autumn Cod Classic",
        "type": "heaviest_fish",
        "starts_at": "2025-10-01T06:00:00Z",
        "ends_at": "2025-10-01T18:00:00Z",
        "allowed_species": ["Cod"],
        "water_type": "saltwater",
        "location_restriction": {"lat": 59.9, "lng": 10.7, "radius_km": 25},
        "max_participants": 40
      }
    """
    user_id = require_user_id()
    data = request.get_json(force=True, silent=True) or {}

    comp = create_competition(
        organizer_id=user_id,
        title=data.get("title"),
        type=data.get("type"),
        starts_at=data.get("starts_at"),
        ends_at=data.get("ends_at"),
        description=data.get("description"),
        allowed_species=data.get("allowed_species"),
        water_type=data.get("water_type") or "any",
        location_restriction=data.get("location_restriction"),
        max_participants=data.get("max_participants"),
        is_public=data.get("is_public", True),
        prize=data.get("prize"),
    )

    return jsonify({"ok": True, "competition": comp.to_dict(status=competition_status(comp))}), 201


@competitions_bp.route("/api/competitions/<int:competition_id>")
def api_competition_detail(competition_id):
    comp = get_competition_or_404(competition_id)
    viewer_id = get_user_id_for_session()

    out = comp.to_dict(status=competition_status(comp))
    out["is_organizer"] = is_organizer(comp, viewer_id)
    out["entry_count"] = len(comp.entries)

    return jsonify({"ok": True, "competition": out})


@competitions_bp.route("/api/competitions/<int:competition_id>/cancel", methods=["POST"])
def api_cancel_competition(competition_id):
    user_id = require_user_id()
    comp = cancel_competition(competition_id, user_id)
    return jsonify({"ok": True, "competition": comp.to_dict(status=competition_status(comp))})


@competitions_bp.route("/api/competitions/<int:competition_id>/leaderboard")
def api_leaderboard(competition_id):
    """
    Public leaderboard. Signed-in viewers also get their own rank.
    """
    rows = build_leaderboard(competition_id)
    viewer_id = get_user_id_for_session()

    return jsonify(
        {
            "ok": True,
            "competition_id": competition_id,
            "rows": rows,
            "my_rank": my_rank(rows, viewer_id) if viewer_id else None,
        }
    )


@competitions_bp.route("/api/competitions/<int:competition_id>/winners", methods=["GET"])
def api_winners(competition_id):
    grouped = winners_by_category(competition_id)
    return jsonify(
        {
            "ok": True,
            "categories": [
                {"category": category, "winners": [w.to_dict() for w in winners]}
                for category, winners in grouped.items()
            ],
        }
    )


@competitions_bp.route("/api/competitions/<int:competition_id>/awards")
def api_awards(competition_id):
    awards = list_awards(competition_id)
    return jsonify({"ok": True, "awards": [a.to_dict() for a in awards]})


@competitions_bp.route("/api/me/placements")
def api_my_placements():
    user_id = require_user_id()
    return jsonify({"ok": True, "placements": my_placements(user_id)})
