from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ..db import SessionLocal
from ..services.seed_service import SEED_PATH, seed_database


def main() -> None:
    parser = argparse.ArgumentParser(description="Load demo brands, models, trims and content (no-op if brands exist)")
    parser.add_argument("--file", type=Path, default=SEED_PATH, help="Seed YAML file")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)
    db = SessionLocal()
    try:
        result = seed_database(db, args.file)
        print(result.message)
    finally:
        db.close()


if __name__ == "__main__":
    main()
