from .competitions import competitions_bp
from .entries import entries_bp
from .catches import catches_bp
from .organizer import organizer_bp
from .invites import invites_bp

def register_blueprints(app):
    app.register_blueprint(competitions_bp)
    app.register_blueprint(entries_bp)
    app.register_blueprint(catches_bp)
    app.register_blueprint(organizer_bp)
    app.register_blueprint(invites_bp)
