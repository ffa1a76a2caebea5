from sqlalchemy import UniqueConstraint
from catchcomp.extensions import db
from catchcomp.helpers.time import utcnow, isoformat


class FishingSession(db.Model):
    __tablename__ = "fishing_session"

    id = db.Column(db.Integer, primary_key=True)

    owner_id = db.Column(db.String(64), nullable=False, index=True)
    title = db.Column(db.String(160), nullable=True)

    # "saltwater" / "freshwater" (null if the angler never said)
    water_type = db.Column(db.String(20), nullable=True)

    started_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    ended_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    participants = db.relationship(
        "SessionParticipant",
        back_populates="session",
        lazy=True,
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "title": self.title,
            "water_type": self.water_type,
            "started_at": isoformat(self.started_at),
            "ended_at": isoformat(self.ended_at),
        }


class SessionParticipant(db.Model):
    __tablename__ = "session_participant"

    id = db.Column(db.Integer, primary_key=True)

    session_id = db.Column(
        db.Integer,
        db.ForeignKey("fishing_session.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.String(64), nullable=False, index=True)

    role = db.Column(db.String(20), nullable=False, default="contributor")  # 'owner','contributor'
    status = db.Column(db.String(20), nullable=False, default="active")

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    session = db.relationship("FishingSession", back_populates="participants")

    __table_args__ = (
        UniqueConstraint("session_id", "user_id", name="uq_session_participant"),
    )
