from catchcomp.extensions import db
from catchcomp.helpers.time import utcnow, isoformat


class Invite(db.Model):
    __tablename__ = "competition_invite"

    id = db.Column(db.Integer, primary_key=True)
    competition_id = db.Column(db.Integer, db.ForeignKey("competition.id", ondelete="CASCADE"), nullable=False, index=True)

    inviter_id = db.Column(db.String(64), nullable=False)
    invitee_id = db.Column(db.String(64), nullable=False, index=True)

    status = db.Column(db.String(12), nullable=False, default="pending")  # 'pending','accepted','declined'
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    responded_at = db.Column(db.DateTime, nullable=True)

    competition = db.relationship("Competition")

    def to_dict(self):
        out = {
            "id": self.id,
            "competition_id": self.competition_id,
            "inviter_id": self.inviter_id,
            "invitee_id": self.invitee_id,
            "status": self.status,
            "created_at": isoformat(self.created_at),
            "responded_at": isoformat(self.responded_at),
        }
        if self.competition is not None:
            out["competition"] = {
                "id": self.competition.id,
                "title": self.competition.title,
                "type": self.competition.type,
                "starts_at": isoformat(self.competition.starts_at),
                "ends_at": isoformat(self.competition.ends_at),
            }
        return out
