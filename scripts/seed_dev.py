from datetime import datetime, timedelta, timezone

from prizewheel.db.engine import make_engine, get_sessionmaker
from prizewheel.models import Base
from prizewheel.wheel.catalog import DEFAULT_CATALOG
from prizewheel.wheel.state import Registration
from prizewheel.workflows import record_win, register_beneficiary


def main() -> None:
    """Seed the development database with sample beneficiaries and awards."""
    engine = make_engine()

    with engine.connect() as conn:
        conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
        Base.metadata.drop_all(bind=conn)
        conn.exec_driver_sql("PRAGMA foreign_keys=ON")
        conn.commit()

    Base.metadata.create_all(engine)
    Session = get_sessionmaker(engine)

    now = datetime.now(timezone.utc)

    winners = [
        ("Ana Perez", "12345678", 2, now - timedelta(days=3)),
        ("Luis Quispe", "23456789", 1, now - timedelta(days=2)),
        ("Rosa Huaman", "34567890", 6, now - timedelta(days=1)),
        ("Jorge Flores", "45678901", 4, now),
    ]

    with Session.begin() as session:
        for name, national_id, ordinal, awarded_at in winners:
            registration = Registration(
                name=name,
                national_id=national_id,
                registration_date=awarded_at.date(),
            )
            record_win(
                session,
                registration,
                DEFAULT_CATALOG.get(ordinal),
                awarded_at=awarded_at,
            )

        # A participant who landed on the loss slice with loss persistence on.
        register_beneficiary(
            session,
            Registration(
                name="Carmen Rojas",
                national_id="56789012",
                registration_date=now.date(),
                phone_number="987654321",
            ),
        )

    print(f"Seeded {len(winners)} winners and 1 non-winning beneficiary.")


if __name__ == "__main__":
    main()
