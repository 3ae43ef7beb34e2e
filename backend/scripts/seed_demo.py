"""Seed a demo buyer/seller exchange about one vehicle.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from sqlalchemy import delete, select

# Make `gearboxe` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from gearboxe.db.session import SessionLocal
from gearboxe.models.conversation import Conversation
from gearboxe.models.message import Message
from gearboxe.models.vehicle import Vehicle
from gearboxe.services.messages import send_message
from gearboxe.services.users import upsert_user_from_identity
from gearboxe.services.vehicles import create_vehicle


DEFAULT_SELLER_SUBJECT = "user_demo_seller"
DEFAULT_BUYER_SUBJECT = "user_demo_buyer"
DEFAULT_VEHICLE_TITLE = "2016 Subaru WRX STI Limited"


def build_demo_exchange() -> list[tuple[str, str]]:
    """Return a deterministic buyer/seller thread as (speaker, content) pairs."""

    return [
        ("buyer", "Is this still available?"),
        ("seller", "Yes! It'll be at the Saturday popup too."),
        ("buyer", "Great. Any rust or accident history?"),
        ("seller", "Clean title, no accidents. Happy to send the inspection report."),
    ]


def reset_vehicle(db, vehicle_title: str) -> None:
    """Remove demo vehicles and everything conversation-scoped under them."""

    vehicle_ids = list(db.scalars(select(Vehicle.id).where(Vehicle.title == vehicle_title)))
    if not vehicle_ids:
        return
    db.execute(delete(Message).where(Message.vehicle_id.in_(vehicle_ids)))
    db.execute(delete(Conversation).where(Conversation.vehicle_id.in_(vehicle_ids)))
    db.execute(delete(Vehicle).where(Vehicle.id.in_(vehicle_ids)))
    db.commit()


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed a demo buyer/seller conversation.")
    parser.add_argument("--seller", default=DEFAULT_SELLER_SUBJECT, help="Identity subject of the seller.")
    parser.add_argument("--buyer", default=DEFAULT_BUYER_SUBJECT, help="Identity subject of the buyer.")
    parser.add_argument(
        "--vehicle-title",
        default=DEFAULT_VEHICLE_TITLE,
        help=f"Title of the demo listing (default: {DEFAULT_VEHICLE_TITLE})",
    )
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Do not delete an existing demo listing and its messages before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    base = datetime.now(timezone.utc) - timedelta(hours=1)

    with SessionLocal() as db:
        if not args.no_reset:
            reset_vehicle(db, args.vehicle_title)

        seller = upsert_user_from_identity(db, external_id=args.seller, first_name="Sam", last_name="Seller")
        buyer = upsert_user_from_identity(db, external_id=args.buyer, first_name="Bea", last_name="Buyer")
        vehicle = create_vehicle(db, owner_id=seller.id, title=args.vehicle_title)

        created = []
        for idx, (speaker, content) in enumerate(build_demo_exchange()):
            sender, recipient = (buyer, seller) if speaker == "buyer" else (seller, buyer)
            created.append(
                send_message(
                    db,
                    sender_id=sender.id,
                    recipient_id=recipient.id,
                    vehicle_id=vehicle.id,
                    content=content,
                    sent_at=base + timedelta(minutes=idx),
                )
            )
        conversation_id = created[0].conversation_id
        vehicle_id = vehicle.id

    print("Seed complete")
    print(f"vehicle_id={vehicle_id}")
    print(f"conversation_id={conversation_id}")
    print(f"messages_created={len(created)}")
    print()
    print("Inspect (send the identity subject in X-Auth-Subject):")
    print(f"  GET /conversations/{conversation_id}/messages")
    print("  GET /me/conversations")
    print("  GET /me/unread-count")


if __name__ == "__main__":
    main()
