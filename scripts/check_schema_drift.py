from __future__ import annotations

import sys

from alembic.autogenerate import compare_metadata
from alembic.runtime.migration import MigrationContext

from prizewheel.db.engine import make_engine
from prizewheel.models import Base


def main() -> int:
    """Compare the ORM models with the configured database.

    Exit codes: 0 when they match, 1 when differences exist, 2 on errors.
    """
    engine = make_engine()
    url_display = engine.url.render_as_string(hide_password=True)
    try:
        with engine.connect() as connection:
            context = MigrationContext.configure(
                connection=connection,
                opts={
                    "compare_type": True,
                    "compare_server_default": True,
                    "render_as_batch": connection.dialect.name == "sqlite",
                },
            )
            diffs = compare_metadata(context, Base.metadata)
    except Exception as exc:
        print(f"Schema drift check: ERROR for {url_display}: {exc}", file=sys.stderr)
        return 2
    finally:
        engine.dispose()

    if not diffs:
        print(f"Schema drift check: OK (no differences) for {url_display}.")
        return 0

    print(f"Schema drift check: FAILED for {url_display}. Differences detected:")
    for diff in diffs:
        print(f"- {diff}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
