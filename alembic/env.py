from __future__ import annotations

import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy.engine import Connection, Engine
from dotenv import load_dotenv

# Make the repo importable when alembic runs from anywhere, then read .env
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))
load_dotenv(ROOT_DIR / ".env")

from prizewheel.config import WheelSettings  # noqa: E402
from prizewheel.db.engine import make_engine  # noqa: E402
from prizewheel.models import Base  # noqa: E402 - import registers beneficiaries/awards

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# The campaign settings own DB_URL resolution (relative sqlite paths included).
DATABASE_URL = WheelSettings.from_env().database_url

# ConfigParser interpolation treats '%' specially.
config.set_main_option("sqlalchemy.url", DATABASE_URL.replace("%", "%%"))


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting to the database."""

    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a live connection.

    SQLite cannot ALTER constraints in place, so batch mode is switched on
    for it; the unique constraint on ``beneficiaries.national_id`` depends
    on that when it is changed.
    """

    connectable: Engine | Connection = make_engine(database_url=DATABASE_URL)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.engine.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
