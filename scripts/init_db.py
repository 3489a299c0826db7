from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import func, inspect, select

from prizewheel.db.engine import get_sessionmaker, make_engine
from prizewheel.models import Award, Beneficiary

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations up to the requested revision."""
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def report() -> None:
    """Print the tables of the configured database and their row counts."""
    engine = make_engine()
    tables = sorted(inspect(engine).get_table_names())
    print("Current tables:", ", ".join(tables))

    if {Beneficiary.__tablename__, Award.__tablename__} <= set(tables):
        Session = get_sessionmaker(engine)
        with Session() as session:
            beneficiaries = session.scalar(select(func.count(Beneficiary.id)))
            awards = session.scalar(select(func.count(Award.id)))
        print(f"Beneficiaries: {beneficiaries}, awards: {awards}")
    engine.dispose()


def main() -> None:
    """Apply migrations (default to head) and report the resulting schema."""
    upgrade_db()
    report()


if __name__ == "__main__":
    main()
