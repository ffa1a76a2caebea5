from sqlalchemy import UniqueConstraint
from catchcomp.extensions import db
from catchcomp.helpers.time import utcnow, isoformat


class Entry(db.Model):
    __tablename__ = "competition_entry"

    id = db.Column(db.Integer, primary_key=True)

    competition_id = db.Column(
        db.Integer,
        db.ForeignKey("competition.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.String(64), nullable=False, index=True)

    session_id = db.Column(
        db.Integer,
        db.ForeignKey("fishing_session.id"),
        nullable=False,
        index=True,
    )

    # Cached; recomputed on every validation / window change
    score = db.Column(db.Float, nullable=False, default=0.0)

    # photo_contest only: tally handed to us by the voting service
    vote_tally = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    competition = db.relationship("Competition", back_populates="entries")
    session = db.relationship("FishingSession")

    __table_args__ = (
        # one entry per competitor per competition
        UniqueConstraint("competition_id", "user_id", name="uq_competition_user"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "competition_id": self.competition_id,
            "user_id": self.user_id,
            "session_id": self.session_id,
            "score": self.score,
            "vote_tally": self.vote_tally,
            "submitted_at": isoformat(self.created_at),
        }
