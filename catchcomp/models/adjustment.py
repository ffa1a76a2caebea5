from catchcomp.extensions import db
from catchcomp.helpers.time import utcnow, isoformat


class TimeAdjustment(db.Model):
    __tablename__ = "competition_time_adjustment"

    id = db.Column(db.Integer, primary_key=True)
    competition_id = db.Column(db.Integer, db.ForeignKey("competition.id", ondelete="CASCADE"), nullable=False, index=True)

    adjusted_by = db.Column(db.String(64), nullable=False)
    old_ends_at = db.Column(db.DateTime, nullable=False)
    new_ends_at = db.Column(db.DateTime, nullable=False)
    reason = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "competition_id": self.competition_id,
            "adjusted_by": self.adjusted_by,
            "old_ends_at": isoformat(self.old_ends_at),
            "new_ends_at": isoformat(self.new_ends_at),
            "reason": self.reason,
            "created_at": isoformat(self.created_at),
        }
