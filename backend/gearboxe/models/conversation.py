"""Conversation ORM model."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gearboxe.models.base import Base, IdMixin


class Conversation(Base, IdMixin):
    """Thread between two users about one vehicle.

    ``participant1_id``/``participant2_id`` keep the assignment made at creation
    (first sender first). ``participant_low_id``/``participant_high_id`` hold the
    same pair in canonical order and back the one-conversation-per-key constraint.
    """

    __tablename__ = "conversations"
    __table_args__ = (
        UniqueConstraint(
            "vehicle_id",
            "participant_low_id",
            "participant_high_id",
            name="uq_conversations_vehicle_participants",
        ),
    )

    vehicle_id: Mapped[int] = mapped_column(
        ForeignKey("vehicles.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    participant1_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    participant2_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    participant_low_id: Mapped[int] = mapped_column(nullable=False)
    participant_high_id: Mapped[int] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    last_message_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    def other_participant_id(self, user_id: int) -> int:
        return self.participant2_id if self.participant1_id == user_id else self.participant1_id

    def has_participant(self, user_id: int) -> bool:
        return user_id in (self.participant1_id, self.participant2_id)
