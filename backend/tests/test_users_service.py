"""Tests for identity resolution and role management."""

from __future__ import annotations

import unittest

from sqlalchemy import create_engine, delete
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gearboxe.models.base import Base
from gearboxe.models.conversation import Conversation
from gearboxe.models.message import Message
from gearboxe.models.user import User
from gearboxe.models.vehicle import Vehicle
from gearboxe.services.errors import InvalidInputError, NotFoundError
from gearboxe.services.users import get_user, resolve_user, update_user_role, upsert_user_from_identity
from gearboxe.services.vehicles import create_vehicle, get_vehicle

class UserServiceTests(unittest.TestCase):
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

    def tearDown(self) -> None:
        self.db.close()

    def test_upsert_creates_then_refreshes_profile(self) -> None:
        created = upsert_user_from_identity(
            self.db, external_id="user_abc", first_name="Bea", last_name="Buyer", email="bea@example.com"
        )
        self.assertEqual(created.name, "Bea Buyer")
        self.assertEqual(created.role, "user")

        refreshed = upsert_user_from_identity(self.db, external_id="user_abc", first_name="Beatrice")

        self.assertEqual(refreshed.id, created.id)
        self.assertEqual(refreshed.name, "Beatrice")
        self.assertEqual(refreshed.email, "")
        self.assertEqual(get_user(self.db, created.id).name, "Beatrice")

    def test_upsert_without_name_uses_placeholder(self) -> None:
        user = upsert_user_from_identity(self.db, external_id="user_nameless")
        self.assertEqual(user.name, "User")

    def test_upsert_requires_subject(self) -> None:
        with self.assertRaises(InvalidInputError):
            upsert_user_from_identity(self.db, external_id="   ")

    def test_resolve_user_matches_external_id(self) -> None:
        user = upsert_user_from_identity(self.db, external_id="user_abc", first_name="Bea")

        self.assertEqual(resolve_user(self.db, " user_abc ").id, user.id)
        self.assertIsNone(resolve_user(self.db, "user_missing"))
        self.assertIsNone(resolve_user(self.db, ""))

    def test_update_role(self) -> None:
        upsert_user_from_identity(self.db, external_id="user_abc", first_name="Bea")

        updated = update_user_role(self.db, "user_abc", "admin")

        self.assertEqual(updated.role, "admin")
        self.assertEqual(resolve_user(self.db, "user_abc").role, "admin")

    def test_update_role_rejects_unknown_role_and_user(self) -> None:
        upsert_user_from_identity(self.db, external_id="user_abc", first_name="Bea")

        with self.assertRaises(InvalidInputError):
            update_user_role(self.db, "user_abc", "owner")
        with self.assertRaises(NotFoundError):
            update_user_role(self.db, "user_missing", "admin")

    def test_create_vehicle_trims_title_and_rejects_blank(self) -> None:
        owner = upsert_user_from_identity(self.db, external_id="user_abc", first_name="Sam")

        vehicle = create_vehicle(self.db, owner_id=owner.id, title="  2016 Subaru WRX STI ")

        self.assertEqual(get_vehicle(self.db, vehicle.id).title, "2016 Subaru WRX STI")
        self.assertEqual(vehicle.user_id, owner.id)
        with self.assertRaises(InvalidInputError):
            create_vehicle(self.db, owner_id=owner.id, title="   ")
        self.assertIsNone(get_vehicle(self.db, vehicle.id + 1))

if __name__ == "__main__":
    unittest.main()
