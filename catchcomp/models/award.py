from catchcomp.extensions import db
from catchcomp.helpers.time import utcnow


class Award(db.Model):
    __tablename__ = "competition_award"

    id = db.Column(db.Integer, primary_key=True)
    competition_id = db.Column(db.Integer, db.ForeignKey("competition.id", ondelete="CASCADE"), nullable=False, index=True)

    # e.g. "biggest_single", "most_catches" - display only
    category = db.Column(db.String(40), nullable=False)
    title = db.Column(db.String(160), nullable=False)
    prize = db.Column(db.String(255), nullable=True)
    position = db.Column(db.Integer, nullable=False, default=1)

    # Optional species the award targets ("Cod")
    target_species = db.Column(db.String(120), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "competition_id": self.competition_id,
            "category": self.category,
            "title": self.title,
            "prize": self.prize,
            "position": self.position,
            "target_species": self.target_species,
        }
