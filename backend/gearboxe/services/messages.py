"""Message send, retrieval and read-state services."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from gearboxe.config import get_settings
from gearboxe.models.message import Message
from gearboxe.services.conversations import get_or_create_conversation, touch_conversation
from gearboxe.services.errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def send_message(
    db: Session,
    *,
    sender_id: int,
    recipient_id: int,
    vehicle_id: int,
    content: str,
    sent_at: datetime | None = None,
) -> Message:
    """Append a message, creating the conversation on first send."""

    trimmed_content = (content or "").strip()
    if not trimmed_content:
        raise InvalidInputError("Message content cannot be empty.")
    if sender_id == recipient_id:
        raise InvalidInputError("Cannot send a message to yourself.")

    timestamp = sent_at or datetime.now(timezone.utc)
    conversation = get_or_create_conversation(db, vehicle_id, sender_id, recipient_id, now=timestamp)

    message = Message(
        conversation_id=conversation.id,
        sender_id=sender_id,
        recipient_id=recipient_id,
        vehicle_id=vehicle_id,
        content=trimmed_content,
        read=False,
        created_at=timestamp,
    )
    db.add(message)
    touch_conversation(db, conversation.id, timestamp, commit=False)
    db.commit()
    db.refresh(message)
    logger.info(
        "messaging.send conversation_id=%s message_id=%s sender_id=%s recipient_id=%s",
        conversation.id,
        message.id,
        sender_id,
        recipient_id,
    )
    return message


def get_message(db: Session, message_id: int) -> Message | None:
    return db.scalar(select(Message).where(Message.id == message_id))


def list_messages_for_conversation(db: Session, conversation_id: int) -> list[Message]:
    """Return conversation messages ordered deterministically."""

    stmt = (
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    return list(db.scalars(stmt).all())


def list_messages_for_vehicle(db: Session, vehicle_id: int) -> list[Message]:
    """Return every message about a vehicle, including rows not yet linked to a conversation."""

    stmt = (
        select(Message)
        .where(Message.vehicle_id == vehicle_id)
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    return list(db.scalars(stmt).all())


def mark_message_read(db: Session, message_id: int) -> tuple[Message, bool]:
    """Flip one message to read; returns the message and whether it changed."""

    message = get_message(db, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    if message.read:
        return message, False
    message.read = True
    db.commit()
    db.refresh(message)
    return message, True


def mark_conversation_read(db: Session, conversation_id: int, user_id: int) -> int:
    """Mark every unread message addressed to ``user_id`` in a conversation as read.

    Runs as one UPDATE so readers never see a partially-read thread. Transient
    database errors are retried up to ``mark_read_max_attempts`` times.
    """

    max_attempts = max(1, get_settings().mark_read_max_attempts)
    stmt = (
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.recipient_id == user_id,
            Message.read.is_(False),
        )
        .values(read=True)
        .execution_options(synchronize_session=False)
    )
    for attempt in range(1, max_attempts + 1):
        try:
            result = db.execute(stmt)
            db.commit()
        except OperationalError:
            db.rollback()
            if attempt == max_attempts:
                logger.exception(
                    "messaging.mark_conversation_read_failed conversation_id=%s user_id=%s attempts=%d",
                    conversation_id,
                    user_id,
                    attempt,
                )
                raise
            logger.warning(
                "messaging.mark_conversation_read_retry conversation_id=%s user_id=%s attempt=%d",
                conversation_id,
                user_id,
                attempt,
            )
            continue
        marked = int(result.rowcount or 0)
        logger.info(
            "messaging.mark_conversation_read conversation_id=%s user_id=%s marked=%d",
            conversation_id,
            user_id,
            marked,
        )
        return marked
    return 0


def unread_count_for_user(db: Session, user_id: int) -> int:
    """Count unread messages addressed to a user across all conversations."""

    stmt = select(func.count(Message.id)).where(
        Message.recipient_id == user_id,
        Message.read.is_(False),
    )
    return int(db.scalar(stmt) or 0)
