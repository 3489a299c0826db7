"""Print the winners list, optionally filtered by national ID and date range.

Usage::

    python scripts/list_winners.py --dni 123 --from 2026-10-01 --to 2026-10-31
"""

from __future__ import annotations

import argparse
import json
from datetime import date

from prizewheel.config import WheelSettings
from prizewheel.db.engine import get_sessionmaker, make_engine
from prizewheel.store import RecordStore


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--dni", dest="national_id", help="national ID substring")
    parser.add_argument("--from", dest="start_date", type=date.fromisoformat)
    parser.add_argument("--to", dest="end_date", type=date.fromisoformat)
    parser.add_argument("--limit", type=int)
    parser.add_argument("--json", action="store_true", help="print JSON rows")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    settings = WheelSettings.from_env()
    engine = make_engine(settings.database_url)
    store = RecordStore(get_sessionmaker(engine))

    rows = [
        award.to_json()
        for award in store.search_winners(
            national_id_query=args.national_id,
            start_date=args.start_date,
            end_date=args.end_date,
            limit=args.limit,
        )
    ]
    engine.dispose()

    if args.json:
        print(json.dumps(rows, ensure_ascii=False, indent=2))
        return 0

    if not rows:
        print(
            "No winners match that national ID."
            if args.national_id
            else "No winners registered yet."
        )
        return 0

    for row in rows:
        print(
            f"{row['created_at']}  {row['national_id']:<10} {row['name']:<30} {row['prize']}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
