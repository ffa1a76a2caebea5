from datetime import timedelta

from catchcomp.helpers.time import utcnow

ORGANIZER = "org-1"


def iso(dt):
    return dt.isoformat() + "Z"


def create_comp(client, **overrides):
    now = utcnow()
    payload = {
        "title": "Fjord Derby",
        "type": "heaviest_fish",
        "starts_at": iso(now - timedelta(hours=2)),
        "ends_at": iso(now + timedelta(hours=2)),
    }
    payload.update(overrides)
    resp = client.post("/api/competitions", json=payload)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["competition"]


def test_requires_sign_in(client):
    resp = client.post("/api/competitions", json={"title": "x"})
    assert resp.status_code == 401
    assert resp.get_json() == {
        "ok": False,
        "error": "NotAuthenticated",
        "message": "You need to be signed in",
    }


def test_create_and_fetch_competition(client, login):
    login(client, ORGANIZER)
    comp = create_comp(client, allowed_species=["Cod", "Ling"], water_type="saltwater")

    assert comp["status"] == "active"
    assert comp["allowed_species"] == ["Cod", "Ling"]
    assert comp["session_id"] is not None

    detail = client.get(f"/api/competitions/{comp['id']}").get_json()["competition"]
    assert detail["is_organizer"] is True
    assert detail["entry_count"] == 0


def test_invalid_window_on_create(client, login):
    login(client, ORGANIZER)
    now = utcnow()
    resp = client.post(
        "/api/competitions",
        json={
            "title": "Backwards",
            "type": "most_catches",
            "starts_at": iso(now),
            "ends_at": iso(now - timedelta(hours=1)),
        },
    )
    assert resp.status_code == 422
    assert resp.get_json()["error"] == "InvalidWindow"


def test_unknown_competition(client):
    resp = client.get("/api/competitions/999")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "NotFound"


def test_full_competition_flow(client, login, make_session):
    login(client, ORGANIZER)
    comp = create_comp(client)
    comp_id = comp["id"]

    fs = make_session("alice", started_at=utcnow() - timedelta(hours=1))

    # alice enters and logs two catches
    login(client, "alice")
    resp = client.post(f"/api/competitions/{comp_id}/entries", json={"session_id": fs.id})
    assert resp.status_code == 201
    entry_id = resp.get_json()["entry"]["id"]

    resp = client.post("/api/catches", json={"session_id": fs.id, "species": "Cod", "weight_kg": 5.4})
    assert resp.status_code == 201
    assert resp.get_json()["pending_in"] == [comp_id]
    big_id = resp.get_json()["catch"]["id"]

    resp = client.post("/api/catches", json={"session_id": fs.id, "species": "Cod", "weight_kg": 9.9})
    fake_id = resp.get_json()["catch"]["id"]

    # competitors can't see the review queue
    assert client.get(f"/api/competitions/{comp_id}/pending-catches").status_code == 403

    # organizer reviews
    login(client, ORGANIZER)
    pending = client.get(f"/api/competitions/{comp_id}/pending-catches").get_json()["catches"]
    assert {c["id"] for c in pending} == {big_id, fake_id}

    assert client.post(f"/api/competitions/{comp_id}/catches/{big_id}/approve").status_code == 200

    resp = client.post(f"/api/competitions/{comp_id}/catches/{fake_id}/reject", json={})
    assert resp.status_code == 422
    assert resp.get_json()["error"] == "ValidationReasonRequired"

    resp = client.post(f"/api/competitions/{comp_id}/catches/{fake_id}/reject", json={"reason": "Scale not visible"})
    assert resp.get_json()["catch"]["rejection_reason"] == "Scale not visible"

    resp = client.post(f"/api/competitions/{comp_id}/catches/{fake_id}/reject", json={"reason": "Again"})
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "AlreadyDecided"

    board = client.get(f"/api/competitions/{comp_id}/leaderboard").get_json()
    assert board["rows"][0]["score"] == 5.4
    assert board["rows"][0]["rank"] == 1
    assert board["my_rank"] is None

    # alice's own view
    login(client, "alice")
    board = client.get(f"/api/competitions/{comp_id}/leaderboard").get_json()
    assert board["my_rank"] == 1

    mine = client.get(f"/api/competitions/{comp_id}/my-entry").get_json()["entry"]
    assert mine["id"] == entry_id
    assert mine["rank"] == 1

    catches = client.get(f"/api/competitions/{comp_id}/my-catches").get_json()["catches"]
    statuses = {c["id"]: c["validation_status"] for c in catches}
    assert statuses == {big_id: "approved", fake_id: "rejected"}

    # organizer can't withdraw alice, alice can
    login(client, ORGANIZER)
    resp = client.delete(f"/api/entries/{entry_id}")
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "NotEntryOwner"

    login(client, "alice")
    assert client.delete(f"/api/entries/{entry_id}").status_code == 200
    assert client.get(f"/api/competitions/{comp_id}/my-entry").get_json()["entry"] is None


def test_duplicate_entry_over_http(client, login, make_session):
    login(client, ORGANIZER)
    comp = create_comp(client)
    fs = make_session("alice", started_at=utcnow() - timedelta(hours=1))

    login(client, "alice")
    client.post(f"/api/competitions/{comp['id']}/entries", json={"session_id": fs.id})
    resp = client.post(f"/api/competitions/{comp['id']}/entries", json={"session_id": fs.id})

    assert resp.status_code == 409
    assert resp.get_json()["error"] == "DuplicateEntry"


def test_adjust_time_over_http(client, login):
    login(client, ORGANIZER)
    comp = create_comp(client)

    resp = client.post(
        f"/api/competitions/{comp['id']}/adjust-time",
        json={"new_ends_at": comp["starts_at"]},
    )
    assert resp.status_code == 422
    assert resp.get_json()["error"] == "InvalidWindow"

    new_end = iso(utcnow() + timedelta(hours=5))
    resp = client.post(
        f"/api/competitions/{comp['id']}/adjust-time",
        json={"new_ends_at": new_end, "reason": "Tide"},
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["adjustment"]["reason"] == "Tide"
    assert body["competition"]["ends_at"] == body["adjustment"]["new_ends_at"]


def test_winners_and_awards_over_http(client, login):
    login(client, ORGANIZER)
    comp = create_comp(client)

    resp = client.post(
        f"/api/competitions/{comp['id']}/awards",
        json={"category": "biggest_single", "title": "Heaviest fish", "prize": "Rod"},
    )
    assert resp.status_code == 201

    resp = client.post(
        f"/api/competitions/{comp['id']}/winners",
        json={"user_id": "alice", "category": "Biggest Cod"},
    )
    assert resp.status_code == 201
    winner_id = resp.get_json()["winner"]["id"]

    login(client, "alice")
    resp = client.post(
        f"/api/competitions/{comp['id']}/winners",
        json={"user_id": "alice", "category": "Self-declared"},
    )
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "NotOrganizer"

    grouped = client.get(f"/api/competitions/{comp['id']}/winners").get_json()["categories"]
    assert [g["category"] for g in grouped] == ["Biggest Cod"]
    assert len(grouped[0]["winners"]) == 1
    assert grouped[0]["winners"][0]["id"] == winner_id

    awards = client.get(f"/api/competitions/{comp['id']}/awards").get_json()["awards"]
    assert [a["title"] for a in awards] == ["Heaviest fish"]

    assert client.delete(f"/api/winners/{winner_id}").status_code == 403
    login(client, ORGANIZER)
    assert client.delete(f"/api/winners/{winner_id}").status_code == 200


def test_invites_over_http(client, login):
    login(client, ORGANIZER)
    comp = create_comp(client)

    resp = client.post(f"/api/competitions/{comp['id']}/invites", json={"user_ids": ["alice"]})
    assert resp.status_code == 201

    login(client, "alice")
    invites = client.get("/api/invites").get_json()["invites"]
    assert [i["competition"]["id"] for i in invites] == [comp["id"]]

    resp = client.post(f"/api/invites/{invites[0]['id']}/respond", json={"accept": True})
    assert resp.get_json()["invite"]["status"] == "accepted"

    resp = client.post(f"/api/invites/{invites[0]['id']}/respond", json={"accept": False})
    assert resp.status_code == 409

    # accepted invitees can log catches in the group session
    resp = client.post("/api/catches", json={"session_id": comp["session_id"], "species": "Ling"})
    assert resp.status_code == 201


def test_invite_accept_must_be_a_boolean(client, login):
    login(client, ORGANIZER)
    comp = create_comp(client)
    client.post(f"/api/competitions/{comp['id']}/invites", json={"user_ids": ["alice"]})

    login(client, "alice")
    invite_id = client.get("/api/invites").get_json()["invites"][0]["id"]

    for payload in ({"accept": "false"}, {"accept": 0}, {}):
        resp = client.post(f"/api/invites/{invite_id}/respond", json=payload)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "InvalidInput"

    resp = client.post("/api/catches", json={"session_id": comp["session_id"], "species": "Ling"})
    assert resp.status_code == 422

    resp = client.post(f"/api/invites/{invite_id}/respond", json={"accept": False})
    assert resp.get_json()["invite"]["status"] == "declined"


def test_cancel_and_placements(client, login):
    login(client, ORGANIZER)
    comp = create_comp(client)

    resp = client.post(f"/api/competitions/{comp['id']}/cancel")
    assert resp.get_json()["competition"]["status"] == "cancelled"

    resp = client.post(f"/api/competitions/{comp['id']}/cancel")
    assert resp.status_code == 409

    assert client.get("/api/me/placements").get_json() == {"ok": True, "placements": []}
