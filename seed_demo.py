# seed_demo.py
import random
from datetime import timedelta

from catchcomp import create_app
from catchcomp.extensions import db
from catchcomp.helpers.competition import create_competition
from catchcomp.helpers.entries import submit_entry
from catchcomp.helpers.time import utcnow
from catchcomp.helpers.validation import approve_catch, log_catch
from catchcomp.models import Competition, FishingSession

SPECIES = ["Cod", "Pollock", "Mackerel", "Ling", "Haddock"]


def main(num_anglers=25, organizer_id="demo-organizer"):
    app = create_app()
    with app.app_context():
        db.create_all()
        print(f"Existing competitions: {Competition.query.count()}")

        now = utcnow()
        comp = create_competition(
            organizer_id=organizer_id,
            title="Demo Harbour Derby",
            type="heaviest_fish",
            starts_at=now - timedelta(hours=3),
            ends_at=now + timedelta(hours=3),
            allowed_species=SPECIES,
            water_type="saltwater",
        )

        for i in range(num_anglers):
            user_id = f"demo-angler-{i + 1}"
            fs = FishingSession(
                owner_id=user_id,
                title=f"Demo trip {i + 1}",
                water_type="saltwater",
                started_at=comp.starts_at + timedelta(minutes=10),
            )
            db.session.add(fs)
            db.session.commit()

            submit_entry(comp.id, user_id, fs.id)

            for _ in range(random.randint(1, 4)):
                catch, _ = log_catch(
                    user_id,
                    fs.id,
                    random.choice(SPECIES),
                    weight_kg=round(random.uniform(0.4, 12.0), 2),
                    caught_at=comp.starts_at + timedelta(minutes=random.randint(15, 170)),
                )
                if random.random() < 0.7:
                    approve_catch(comp.id, catch.id, organizer_id)

        print(f"Seeded competition {comp.id} with {num_anglers} anglers.")


if __name__ == "__main__":
    main()
