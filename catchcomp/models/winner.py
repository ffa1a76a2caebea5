from catchcomp.extensions import db
from catchcomp.helpers.time import utcnow, isoformat


class Winner(db.Model):
    __tablename__ = "competition_winner"

    id = db.Column(db.Integer, primary_key=True)

    competition_id = db.Column(
        db.Integer,
        db.ForeignKey("competition.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.String(64), nullable=False, index=True)

    # Free-form ("Biggest Bass", "Junior Angler", ...). Not unique.
    category = db.Column(db.String(120), nullable=False)

    catch_id = db.Column(db.Integer, db.ForeignKey("catch.id"), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    declared_by = db.Column(db.String(64), nullable=False)
    declared_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "competition_id": self.competition_id,
            "user_id": self.user_id,
            "category": self.category,
            "catch_id": self.catch_id,
            "notes": self.notes,
            "declared_at": isoformat(self.declared_at),
        }
