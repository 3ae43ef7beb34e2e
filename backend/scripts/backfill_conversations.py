"""Link legacy vehicle-scoped messages to conversations.

Usage (from backend directory):
    python scripts/backfill_conversations.py
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from gearboxe.db.session import SessionLocal
from gearboxe.services.backfill import backfill_legacy_messages


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Assign conversation ids to legacy messages.")
    parser.add_argument("--verbose", action="store_true", help="Log at INFO level.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    with SessionLocal() as db:
        result = backfill_legacy_messages(db)

    print("Backfill complete")
    print(f"messages_linked={result.messages_linked}")
    print(f"conversations_created={result.conversations_created}")
    print(f"conversations_reused={result.conversations_reused}")


if __name__ == "__main__":
    main()
