"""Conversation lookup-or-create services."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gearboxe.models.conversation import Conversation
from gearboxe.services.errors import InvalidInputError

logger = logging.getLogger(__name__)


def participant_pair(user_a: int, user_b: int) -> tuple[int, int]:
    """Return the pair in canonical (low, high) order."""

    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)


def get_conversation(db: Session, conversation_id: int) -> Conversation | None:
    return db.scalar(select(Conversation).where(Conversation.id == conversation_id))


def find_conversation(db: Session, vehicle_id: int, user_a: int, user_b: int) -> Conversation | None:
    """Return the conversation for a vehicle and unordered participant pair."""

    low_id, high_id = participant_pair(user_a, user_b)
    stmt = select(Conversation).where(
        Conversation.vehicle_id == vehicle_id,
        Conversation.participant_low_id == low_id,
        Conversation.participant_high_id == high_id,
    )
    return db.scalar(stmt)


def get_or_create_conversation(
    db: Session,
    vehicle_id: int,
    sender_id: int,
    recipient_id: int,
    *,
    now: datetime | None = None,
) -> Conversation:
    """Return the existing conversation for the key or create it.

    A concurrent creator that commits first makes our insert violate
    ``uq_conversations_vehicle_participants``; the session is rolled back and
    the winning row is returned instead.
    """

    if not vehicle_id or not sender_id or not recipient_id:
        raise InvalidInputError("vehicle_id, sender_id and recipient_id are required.")
    if sender_id == recipient_id:
        raise InvalidInputError("A conversation needs two distinct participants.")

    existing = find_conversation(db, vehicle_id, sender_id, recipient_id)
    if existing is not None:
        return existing

    timestamp = now or datetime.now(timezone.utc)
    low_id, high_id = participant_pair(sender_id, recipient_id)
    conversation = Conversation(
        vehicle_id=vehicle_id,
        participant1_id=sender_id,
        participant2_id=recipient_id,
        participant_low_id=low_id,
        participant_high_id=high_id,
        created_at=timestamp,
        last_message_at=timestamp,
    )
    db.add(conversation)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        winner = find_conversation(db, vehicle_id, sender_id, recipient_id)
        if winner is None:
            raise
        logger.info(
            "messaging.conversation_race_resolved vehicle_id=%s participants=%s,%s conversation_id=%s",
            vehicle_id,
            low_id,
            high_id,
            winner.id,
        )
        return winner

    db.refresh(conversation)
    logger.info(
        "messaging.conversation_created conversation_id=%s vehicle_id=%s sender_id=%s recipient_id=%s",
        conversation.id,
        vehicle_id,
        sender_id,
        recipient_id,
    )
    return conversation


def touch_conversation(
    db: Session,
    conversation_id: int,
    timestamp: datetime,
    *,
    commit: bool = True,
) -> None:
    """Advance the conversation's latest activity to ``timestamp``.

    Older timestamps leave ``last_message_at`` unchanged, so a send that commits
    after a newer one cannot move it backwards.
    """

    db.execute(
        update(Conversation)
        .where(
            Conversation.id == conversation_id,
            Conversation.last_message_at < timestamp,
        )
        .values(last_message_at=timestamp)
        .execution_options(synchronize_session=False)
    )
    if commit:
        db.commit()
