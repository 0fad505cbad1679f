from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from app.config import build_sqlalchemy_db_url, settings  # noqa: E402
from app.database import Base, build_engine, mask_db_url  # noqa: E402
import app.models  # noqa: F401,E402  # registers profiles and drafts on Base.metadata


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create the profiles and drafts tables. The server only does this itself on SQLite."
    )
    parser.add_argument(
        "--db-url",
        default=None,
        help="Target DB URL (defaults to DB_URL / DB_* from .env or the environment).",
    )
    parser.add_argument(
        "--i-understand",
        action="store_true",
        help="Required safety flag. Prevents accidental DDL against shared DBs.",
    )
    args = parser.parse_args(argv)

    if not args.i_understand:
        print("Refusing to run without --i-understand (safety).")
        return 2

    url = args.db_url or build_sqlalchemy_db_url(settings)
    print("creating store tables on:", mask_db_url(url))

    engine = build_engine(url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()
    print("tables:", ", ".join(sorted(Base.metadata.tables)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
