import unittest
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from prizewheel.models import Award, Base, Beneficiary


class DBTestCase(unittest.TestCase):
    def setUp(self):
        # In-memory SQLite for isolation
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )

    def tearDown(self):
        self.engine.dispose()

    def _beneficiary(self, national_id="12345678", name="Ana Perez"):
        return Beneficiary(
            name=name,
            national_id=national_id,
            registration_date=date(2026, 10, 19),
        )

    def test_get_by_national_id(self):
        with self.Session() as session:
            session.add(self._beneficiary())
            session.commit()

            found = Beneficiary.get_by_national_id(session, "12345678")
            self.assertIsNotNone(found)
            assert found is not None
            self.assertEqual(found.name, "Ana Perez")
            self.assertIsNone(Beneficiary.get_by_national_id(session, "87654321"))

    def test_national_id_is_unique(self):
        with self.Session() as session:
            session.add(self._beneficiary())
            session.commit()

            session.add(self._beneficiary(name="Someone Else"))
            with self.assertRaises(IntegrityError):
                session.commit()

    def test_beneficiary_to_json(self):
        with self.Session() as session:
            beneficiary = Beneficiary(
                name="Luis Quispe",
                national_id="23456789",
                registration_date=date(2026, 10, 18),
                phone_number="987654321",
            )
            session.add(beneficiary)
            session.commit()

            data = beneficiary.to_json()
            self.assertEqual(data["national_id"], "23456789")
            self.assertEqual(data["phone_number"], "987654321")
            self.assertEqual(data["registration_date"], "2026-10-18")
            self.assertIsInstance(data["created_at"], str)

    def test_award_to_json_inlines_beneficiary(self):
        awarded_at = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)
        with self.Session() as session:
            beneficiary = self._beneficiary()
            award = Award(
                beneficiary=beneficiary,
                prize_ordinal=2,
                prize_label="S/150.00 DESCT EN TU PROXIMO CURSO",
                created_at=awarded_at,
            )
            session.add(award)
            session.commit()

            data = award.to_json()
            self.assertEqual(data["name"], "Ana Perez")
            self.assertEqual(data["national_id"], "12345678")
            self.assertEqual(data["prize_ordinal"], 2)
            self.assertEqual(data["prize"], "S/150.00 DESCT EN TU PROXIMO CURSO")
            self.assertEqual(data["created_at"], "2026-10-19T15:00:00+00:00")

    def test_awards_ordered_by_recency(self):
        base = datetime(2026, 10, 1, tzinfo=timezone.utc)
        with self.Session() as session:
            for offset, national_id in enumerate(["11111111", "22222222", "33333333"]):
                session.add(
                    Award(
                        beneficiary=self._beneficiary(national_id=national_id),
                        prize_ordinal=1,
                        prize_label="Prize",
                        created_at=base + timedelta(days=offset),
                    )
                )
            session.commit()

        with self.Session() as session:
            latest = Award.latest(session)
        # Beneficiary is eagerly loaded, so it stays readable after close.
        assert latest is not None
        self.assertEqual(latest.beneficiary.national_id, "33333333")

        with self.Session() as session:
            ordered = Award.ordered_by_recency(session)
            self.assertEqual(
                [a.beneficiary.national_id for a in ordered],
                ["33333333", "22222222", "11111111"],
            )
            self.assertEqual(len(Award.ordered_by_recency(session, limit=2)), 2)
            with self.assertRaises(ValueError):
                Award.ordered_by_recency(session, limit=-1)


if __name__ == "__main__":
    unittest.main()
