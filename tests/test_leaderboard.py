from datetime import datetime, timedelta

from catchcomp.extensions import db
from catchcomp.helpers.leaderboard import build_leaderboard, my_placements, my_rank, rank_entries
from catchcomp.helpers.leaderboard_cache import LEADERBOARD_CACHE
from catchcomp.helpers.time import utcnow
from catchcomp.helpers.validation import approve_catch
from catchcomp.models import Entry

ORGANIZER = "org-1"


def row(entry_id, user_id, score, submitted_at):
    return {"entry_id": entry_id, "user_id": user_id, "score": score, "submitted_at": submitted_at}


def test_ranks_are_contiguous_and_scores_non_increasing():
    t = datetime(2025, 6, 1, 8, 0)
    rows = rank_entries(
        [
            row(1, "a", 2.0, t),
            row(2, "b", 7.0, t),
            row(3, "c", 4.0, t),
            row(4, "d", 4.0, t + timedelta(minutes=1)),
            row(5, "e", 0.0, t),
        ]
    )

    assert [r["rank"] for r in rows] == [1, 2, 3, 4, 5]
    scores = [r["score"] for r in rows]
    assert scores == sorted(scores, reverse=True)


def test_tie_goes_to_earliest_entry_reproducibly():
    # two entries tied at 4; the earlier one ranks first every time
    early = row(9, "early-bird", 4.0, datetime(2025, 6, 1, 8, 0))
    late = row(2, "late-comer", 4.0, datetime(2025, 6, 1, 9, 30))

    for ordering in ([early, late], [late, early]):
        ranked = rank_entries(ordering)
        assert [r["user_id"] for r in ranked] == ["early-bird", "late-comer"]
        assert [r["rank"] for r in ranked] == [1, 2]


def test_tie_on_time_falls_back_to_entry_id():
    t = datetime(2025, 6, 1, 8, 0)
    ranked = rank_entries([row(8, "x", 1.0, t), row(3, "y", 1.0, t)])
    assert [r["entry_id"] for r in ranked] == [3, 8]


def test_rank_entries_does_not_mutate_input():
    rows = [row(1, "a", 1.0, datetime(2025, 6, 1))]
    rank_entries(rows)
    assert "rank" not in rows[0]


def test_my_rank_lookup():
    t = datetime(2025, 6, 1, 8, 0)
    ranked = rank_entries([row(1, "a", 1.0, t), row(2, "b", 3.0, t)])
    assert my_rank(ranked, "b") == 1
    assert my_rank(ranked, "a") == 2
    assert my_rank(ranked, "nobody") is None


def test_build_leaderboard_rows(make_competition, enter, add_catch):
    comp = make_competition(type="most_catches")
    first = enter(comp, "alice")
    second = enter(comp, "bob")

    for _ in range(2):
        approve_catch(comp.id, add_catch(first, weight_kg=1.5).id, ORGANIZER)
    approve_catch(comp.id, add_catch(second, weight_kg=6.0).id, ORGANIZER)
    add_catch(second)  # still pending

    rows = build_leaderboard(comp.id, use_cache=False)

    assert [r["user_id"] for r in rows] == ["alice", "bob"]
    assert rows[0]["score"] == 2
    assert rows[0]["catch_count"] == 2
    assert rows[0]["total_weight_kg"] == 3.0
    assert rows[1]["score"] == 1
    assert rows[1]["best_catch"]["weight_kg"] == 6.0
    assert rows[0]["entry_id"] == first.id


def test_equal_scores_rank_earliest_entry_first(make_competition, enter, add_catch):
    comp = make_competition(type="most_catches")
    early = enter(comp, "early-bird")
    late = enter(comp, "late-comer")

    # make the timestamps unambiguous
    early.created_at = utcnow() - timedelta(minutes=30)
    db.session.commit()

    for entry in (late, early):
        for _ in range(4):
            approve_catch(comp.id, add_catch(entry).id, ORGANIZER)

    first = build_leaderboard(comp.id, use_cache=False)
    again = build_leaderboard(comp.id, use_cache=False)

    assert [r["score"] for r in first] == [4, 4]
    assert [r["user_id"] for r in first] == ["early-bird", "late-comer"]
    assert first == again


def test_leaderboard_is_cached_until_a_write(make_competition, enter, add_catch):
    comp = make_competition()
    entry = enter(comp, "alice")
    catch = add_catch(entry)

    assert build_leaderboard(comp.id)[0]["score"] == 0
    assert comp.id in LEADERBOARD_CACHE

    approve_catch(comp.id, catch.id, ORGANIZER)
    assert comp.id not in LEADERBOARD_CACHE
    assert build_leaderboard(comp.id)[0]["score"] == 1


def test_cached_rows_are_copies(make_competition, enter):
    comp = make_competition()
    enter(comp, "alice")

    rows = build_leaderboard(comp.id)
    rows[0]["score"] = 1000
    assert build_leaderboard(comp.id)[0]["score"] == 0


def test_empty_leaderboard(make_competition):
    comp = make_competition()
    assert build_leaderboard(comp.id) == []


def test_my_placements_only_counts_finished_podiums(make_competition, enter, add_catch):
    now = utcnow()
    comp = make_competition(type="most_catches")
    entry = enter(comp, "alice")
    approve_catch(comp.id, add_catch(entry).id, ORGANIZER)

    # still running
    assert my_placements("alice") == []

    later = now + timedelta(hours=3)
    placements = my_placements("alice", now=later)
    assert len(placements) == 1
    assert placements[0]["competition_id"] == comp.id
    assert placements[0]["position"] == 1
    assert placements[0]["score"] == 1


def test_my_placements_skips_fourth_place(make_competition, enter, add_catch):
    comp = make_competition(type="most_catches")
    users = ["a", "b", "c", "d"]
    entries = {u: enter(comp, u) for u in users}

    for count, user in zip([4, 3, 2, 1], users):
        for _ in range(count):
            approve_catch(comp.id, add_catch(entries[user]).id, ORGANIZER)

    later = utcnow() + timedelta(hours=3)
    assert my_placements("d", now=later) == []
    assert my_placements("c", now=later)[0]["position"] == 3


def test_withdrawn_entry_drops_off_the_board(make_competition, enter):
    comp = make_competition()
    entry = enter(comp, "alice")
    enter(comp, "bob")

    db.session.delete(db.session.get(Entry, entry.id))
    db.session.commit()

    assert [r["user_id"] for r in build_leaderboard(comp.id, use_cache=False)] == ["bob"]
