"""One-time migration linking legacy vehicle-scoped messages to conversations."""

from __future__ import annotations

import logging
from collections import defaultdict
from time import perf_counter

from sqlalchemy import select
from sqlalchemy.orm import Session

from gearboxe.models.conversation import Conversation
from gearboxe.models.message import Message
from gearboxe.schemas.conversation import LegacyBackfillResult
from gearboxe.services.conversations import find_conversation, participant_pair

logger = logging.getLogger(__name__)


def backfill_legacy_messages(db: Session) -> LegacyBackfillResult:
    """Assign every message without a conversation to its derived conversation.

    Messages are grouped by vehicle and unordered participant pair. A group joins
    the existing conversation for its key, or a new one whose first participant
    is the earliest sender. Running it again links nothing.
    """

    started = perf_counter()
    stmt = (
        select(Message)
        .where(Message.conversation_id.is_(None))
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    groups: dict[tuple[int, int, int], list[Message]] = defaultdict(list)
    for message in db.scalars(stmt):
        low_id, high_id = participant_pair(message.sender_id, message.recipient_id)
        groups[(message.vehicle_id, low_id, high_id)].append(message)

    result = LegacyBackfillResult()
    for (vehicle_id, low_id, high_id), messages in groups.items():
        first, last = messages[0], messages[-1]
        conversation = find_conversation(db, vehicle_id, low_id, high_id)
        if conversation is None:
            conversation = Conversation(
                vehicle_id=vehicle_id,
                participant1_id=first.sender_id,
                participant2_id=first.recipient_id,
                participant_low_id=low_id,
                participant_high_id=high_id,
                created_at=first.created_at,
                last_message_at=last.created_at,
            )
            db.add(conversation)
            db.flush()
            result.conversations_created += 1
        else:
            if conversation.last_message_at < last.created_at:
                conversation.last_message_at = last.created_at
            result.conversations_reused += 1

        for message in messages:
            message.conversation_id = conversation.id
        result.messages_linked += len(messages)

    db.commit()
    logger.info(
        "messaging.legacy_backfill messages_linked=%d conversations_created=%d conversations_reused=%d total_ms=%.2f",
        result.messages_linked,
        result.conversations_created,
        result.conversations_reused,
        (perf_counter() - started) * 1000.0,
    )
    return result
