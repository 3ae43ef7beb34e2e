"""Tests for linking legacy vehicle-scoped messages to conversations."""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gearboxe.models.base import Base
from gearboxe.models.conversation import Conversation
from gearboxe.models.message import Message
from gearboxe.models.user import User
from gearboxe.models.vehicle import Vehicle
from gearboxe.services.backfill import backfill_legacy_messages
from gearboxe.services.conversations import find_conversation, get_or_create_conversation
from gearboxe.services.messages import list_messages_for_conversation

T0 = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class LegacyBackfillTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self.db.execute(delete(Message))
        self.db.execute(delete(Conversation))
        self.db.execute(delete(Vehicle))
        self.db.execute(delete(User))
        self.db.commit()

        seller = User(external_id="user_seller", name="Sam Seller", email="sam@example.com", role="user")
        buyer = User(external_id="user_buyer", name="Bea Buyer", email="bea@example.com", role="user")
        other_buyer = User(external_id="user_other", name="Olli Other", email="olli@example.com", role="user")
        self.db.add_all([seller, buyer, other_buyer])
        self.db.flush()
        vehicle = Vehicle(user_id=seller.id, title="2016 Subaru WRX STI")
        self.db.add(vehicle)
        self.db.commit()
        self.seller_id = seller.id
        self.buyer_id = buyer.id
        self.other_buyer_id = other_buyer.id
        self.vehicle_id = vehicle.id

    def tearDown(self) -> None:
        self.db.close()

    def _legacy(self, sender_id: int, recipient_id: int, content: str, minutes: int) -> Message:
        message = Message(
            conversation_id=None,
            sender_id=sender_id,
            recipient_id=recipient_id,
            vehicle_id=self.vehicle_id,
            content=content,
            read=False,
            created_at=T0 + timedelta(minutes=minutes),
        )
        self.db.add(message)
        return message

    def test_groups_legacy_messages_into_new_conversations(self) -> None:
        self._legacy(self.buyer_id, self.seller_id, "Available?", 0)
        self._legacy(self.seller_id, self.buyer_id, "Yes", 1)
        self._legacy(self.buyer_id, self.seller_id, "Great", 4)
        self._legacy(self.seller_id, self.other_buyer_id, "Following up", 2)
        self.db.commit()

        result = backfill_legacy_messages(self.db)

        self.assertEqual(result.messages_linked, 4)
        self.assertEqual(result.conversations_created, 2)
        self.assertEqual(result.conversations_reused, 0)
        self.assertEqual(
            self.db.scalar(select(func.count(Message.id)).where(Message.conversation_id.is_(None))),
            0,
        )

        buyer_thread = find_conversation(self.db, self.vehicle_id, self.seller_id, self.buyer_id)
        self.assertEqual(buyer_thread.participant1_id, self.buyer_id)
        self.assertEqual(buyer_thread.created_at.replace(tzinfo=None), T0.replace(tzinfo=None))
        self.assertEqual(
            buyer_thread.last_message_at.replace(tzinfo=None),
            (T0 + timedelta(minutes=4)).replace(tzinfo=None),
        )
        self.assertEqual(
            [m.content for m in list_messages_for_conversation(self.db, buyer_thread.id)],
            ["Available?", "Yes", "Great"],
        )

        other_thread = find_conversation(self.db, self.vehicle_id, self.other_buyer_id, self.seller_id)
        self.assertEqual(other_thread.participant1_id, self.seller_id)

    def test_reuses_existing_conversation_and_advances_last_message_at(self) -> None:
        existing = get_or_create_conversation(self.db, self.vehicle_id, self.seller_id, self.buyer_id, now=T0)
        existing_id = existing.id
        self._legacy(self.buyer_id, self.seller_id, "Legacy question", 30)
        self.db.commit()

        result = backfill_legacy_messages(self.db)

        self.assertEqual(result.conversations_created, 0)
        self.assertEqual(result.conversations_reused, 1)
        self.assertEqual(result.messages_linked, 1)
        refreshed = self.db.scalar(select(Conversation).where(Conversation.id == existing_id))
        self.assertEqual(refreshed.participant1_id, self.seller_id)
        self.assertEqual(
            refreshed.last_message_at.replace(tzinfo=None),
            (T0 + timedelta(minutes=30)).replace(tzinfo=None),
        )

    def test_second_run_links_nothing(self) -> None:
        self._legacy(self.buyer_id, self.seller_id, "Available?", 0)
        self.db.commit()
        backfill_legacy_messages(self.db)

        result = backfill_legacy_messages(self.db)

        self.assertEqual(result.messages_linked, 0)
        self.assertEqual(result.conversations_created, 0)
        self.assertEqual(result.conversations_reused, 0)
        self.assertEqual(self.db.scalar(select(func.count(Conversation.id))), 1)


if __name__ == "__main__":
    unittest.main()
