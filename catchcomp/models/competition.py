from catchcomp.extensions import db
from catchcomp.helpers.time import utcnow, isoformat

COMPETITION_TYPES = ("heaviest_fish", "most_catches", "species_diversity", "photo_contest")
WATER_TYPES = ("saltwater", "freshwater", "any")


class Competition(db.Model):
    __tablename__ = "competition"

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(160), nullable=False)
    description = db.Column(db.Text, nullable=True)

    # One of COMPETITION_TYPES; decides the scoring formula
    type = db.Column(db.String(32), nullable=False)

    # Naive UTC. Only TimeAdjuster moves ends_at once the comp exists.
    starts_at = db.Column(db.DateTime, nullable=False)
    ends_at = db.Column(db.DateTime, nullable=False)

    # --- ruleset ---
    allowed_species = db.Column(db.JSON, nullable=True)  # ["Cod", "Bass"] or null
    water_type = db.Column(db.String(20), nullable=False, default="any")
    location_lat = db.Column(db.Float, nullable=True)
    location_lng = db.Column(db.Float, nullable=True)
    location_radius_km = db.Column(db.Float, nullable=True)
    max_participants = db.Column(db.Integer, nullable=True)

    is_public = db.Column(db.Boolean, nullable=False, default=True)
    prize = db.Column(db.String(255), nullable=True)

    # Backing group session used for catch attribution
    session_id = db.Column(
        db.Integer,
        db.ForeignKey("fishing_session.id"),
        nullable=True,
        index=True,
    )
    session = db.relationship("FishingSession")

    # Organizer (opaque user id, immutable)
    created_by = db.Column(db.String(64), nullable=False, index=True)

    # The only persisted status override; everything else is derived from time
    cancelled_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    entries = db.relationship(
        "Entry",
        back_populates="competition",
        lazy=True,
        cascade="all, delete-orphan",
    )

    @property
    def location_restriction(self):
        if self.location_lat is None or self.location_lng is None or self.location_radius_km is None:
            return None
        return {
            "lat": self.location_lat,
            "lng": self.location_lng,
            "radius_km": self.location_radius_km,
        }

    def to_dict(self, status=None):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "status": status,
            "starts_at": isoformat(self.starts_at),
            "ends_at": isoformat(self.ends_at),
            "allowed_species": list(self.allowed_species or []),
            "water_type": self.water_type,
            "location_restriction": self.location_restriction,
            "max_participants": self.max_participants,
            "is_public": self.is_public,
            "prize": self.prize,
            "session_id": self.session_id,
            "created_by": self.created_by,
            "cancelled_at": isoformat(self.cancelled_at),
            "created_at": isoformat(self.created_at),
        }
