"""
Error taxonomy for the competition engine.

Every error is recoverable by the caller: routes render them as JSON
({"ok": false, "error": <kind>, "message": ...}) with a matching status code.
Database and network failures are not wrapped here; they propagate as-is.
"""
import logging

from flask import jsonify

from catchcomp.extensions import db

logger = logging.getLogger(__name__)


class CompetitionError(Exception):
    kind = "CompetitionError"
    status_code = 400
    default_message = "Competition request failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"ok": False, "error": self.kind, "message": self.message}


class NotAuthenticated(CompetitionError):
    kind = "NotAuthenticated"
    status_code = 401
    default_message = "You need to be signed in"


class NotOrganizer(CompetitionError):
    kind = "NotOrganizer"
    status_code = 403
    default_message = "Only the competition organizer can do that"


class NotInvitee(CompetitionError):
    kind = "NotInvitee"
    status_code = 403
    default_message = "This invite was sent to someone else"


class NotEntryOwner(CompetitionError):
    kind = "NotEntryOwner"
    status_code = 403
    default_message = "Only the competitor who entered can withdraw this entry"


class NotFound(CompetitionError):
    kind = "NotFound"
    status_code = 404
    default_message = "Not found"


class DuplicateEntry(CompetitionError):
    kind = "DuplicateEntry"
    status_code = 409
    default_message = "You have already entered this competition"


class InvalidSession(CompetitionError):
    kind = "InvalidSession"
    status_code = 422
    default_message = "That session is not eligible for this competition"


class InvalidWindow(CompetitionError):
    kind = "InvalidWindow"
    status_code = 422
    default_message = "The competition must end after it starts"


class AlreadyDecided(CompetitionError):
    kind = "AlreadyDecided"
    status_code = 409
    default_message = "This has already been decided"


class ValidationReasonRequired(CompetitionError):
    kind = "ValidationReasonRequired"
    status_code = 422
    default_message = "A reason is required when rejecting a catch"


class CompetitionClosed(CompetitionError):
    kind = "CompetitionClosed"
    status_code = 409
    default_message = "That competition has ended or was cancelled"


class CompetitionFull(CompetitionError):
    kind = "CompetitionFull"
    status_code = 409
    default_message = "That competition is full"


class InvalidInput(CompetitionError):
    kind = "InvalidInput"
    status_code = 400
    default_message = "Invalid request"


def register_error_handlers(app):
    @app.errorhandler(CompetitionError)
    def handle_competition_error(err):
        # Nothing from a failed operation may be left half-written
        db.session.rollback()
        logger.info("[%s] %s", err.kind, err.message)
        return jsonify(err.to_dict()), err.status_code
