import logging

from dotenv import load_dotenv

load_dotenv()

from catchcomp import create_app  # noqa: E402
from catchcomp.config import LOG_LEVEL  # noqa: E402
from catchcomp.extensions import db  # noqa: E402

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

api = create_app()


def init_db():
    """Ensure DB tables exist."""
    db.create_all()


# Run DB bootstrap once at startup
with api.app_context():
    init_db()

if __name__ == "__main__":
    api.run(debug=True)
