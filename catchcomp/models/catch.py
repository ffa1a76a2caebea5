from sqlalchemy import UniqueConstraint
from catchcomp.extensions import db
from catchcomp.helpers.time import utcnow, isoformat

VALIDATION_STATUSES = ("pending", "approved", "rejected")


class Catch(db.Model):
    __tablename__ = "catch"

    id = db.Column(db.Integer, primary_key=True)

    session_id = db.Column(
        db.Integer,
        db.ForeignKey("fishing_session.id"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.String(64), nullable=False, index=True)

    species = db.Column(db.String(120), nullable=False)
    weight_kg = db.Column(db.Float, nullable=True)
    length_cm = db.Column(db.Float, nullable=True)

    caught_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)

    photo_url = db.Column(db.String(512), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    session = db.relationship("FishingSession")

    def to_dict(self):
        return {
            "id": self.id,
            "session_id": self.session_id,
            "user_id": self.user_id,
            "species": self.species,
            "weight_kg": self.weight_kg,
            "length_cm": self.length_cm,
            "caught_at": isoformat(self.caught_at),
            "latitude": self.latitude,
            "longitude": self.longitude,
            "photo_url": self.photo_url,
        }


class CatchValidation(db.Model):
    """
    Validation state of one catch inside one competition.

    pending -> approved | rejected, organizer only, terminal once decided.
    rejection_reason is set iff validation_status == 'rejected'.
    """
    __tablename__ = "catch_validation"

    id = db.Column(db.Integer, primary_key=True)

    competition_id = db.Column(
        db.Integer,
        db.ForeignKey("competition.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    catch_id = db.Column(
        db.Integer,
        db.ForeignKey("catch.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    validation_status = db.Column(db.String(12), nullable=False, default="pending", index=True)
    rejection_reason = db.Column(db.Text, nullable=True)

    # Latest EligibilityFilter verdict (window can move after the catch was logged)
    is_eligible = db.Column(db.Boolean, nullable=False, default=True)

    # Approved before a window shortening pushed it outside; still scores
    grandfathered = db.Column(db.Boolean, nullable=False, default=False)

    decided_by = db.Column(db.String(64), nullable=True)
    decided_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    catch = db.relationship("Catch")

    __table_args__ = (
        UniqueConstraint("competition_id", "catch_id", name="uq_competition_catch"),
    )

    @property
    def counts_for_score(self) -> bool:
        return self.validation_status == "approved" and (self.is_eligible or self.grandfathered)

    def to_dict(self):
        out = self.catch.to_dict() if self.catch else {"id": self.catch_id}
        out.update(
            {
                "competition_id": self.competition_id,
                "validation_status": self.validation_status,
                "rejection_reason": self.rejection_reason,
                "is_eligible": self.is_eligible,
                "grandfathered": self.grandfathered,
                "decided_by": self.decided_by,
                "decided_at": isoformat(self.decided_at),
            }
        )
        return out
