from datetime import timedelta

import pytest

from catchcomp import create_app
from catchcomp.config import Config
from catchcomp.extensions import db
from catchcomp.helpers.competition import create_competition
from catchcomp.helpers.entries import submit_entry
from catchcomp.helpers.leaderboard_cache import invalidate_leaderboard_cache
from catchcomp.helpers.time import utcnow
from catchcomp.helpers.validation import log_catch
from catchcomp.models import FishingSession

ORGANIZER = "org-1"


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SECRET_KEY = "test-secret"
    LEADERBOARD_CACHE_TTL = 10.0
    GRANDFATHER_APPROVED_CATCHES = False


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        # ids restart in every fresh database
        invalidate_leaderboard_cache()
        yield app
        db.session.remove()
        db.drop_all()
    invalidate_leaderboard_cache()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login():
    def _login(client, user_id):
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
        return client

    return _login


@pytest.fixture
def make_competition(app):
    def _make(organizer_id=ORGANIZER, type="most_catches", starts_at=None, ends_at=None, **fields):
        now = utcnow()
        return create_competition(
            organizer_id=organizer_id,
            title=fields.pop("title", "Harbour Open"),
            type=type,
            starts_at=starts_at or now - timedelta(hours=2),
            ends_at=ends_at or now + timedelta(hours=2),
            **fields,
        )

    return _make


@pytest.fixture
def make_session(app):
    def _make(owner_id, started_at=None, water_type=None, title="Morning trip"):
        fs = FishingSession(
            owner_id=owner_id,
            title=title,
            water_type=water_type,
            started_at=started_at or utcnow() - timedelta(hours=1),
        )
        db.session.add(fs)
        db.session.commit()
        return fs

    return _make


@pytest.fixture
def enter(make_session):
    """Give `user_id` a session inside the window and enter them with it."""

    def _enter(comp, user_id, water_type=None):
        fs = make_session(user_id, started_at=comp.starts_at + timedelta(minutes=5), water_type=water_type)
        return submit_entry(comp.id, user_id, fs.id)

    return _enter


@pytest.fixture
def add_catch(app):
    def _add(entry, species="Cod", weight_kg=1.0, caught_at=None, **fields):
        catch, _ = log_catch(
            entry.user_id,
            entry.session_id,
            species,
            weight_kg=weight_kg,
            caught_at=caught_at,
            **fields,
        )
        return catch

    return _add
