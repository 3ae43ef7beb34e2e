"""Per-user inbox projection over conversations and messages."""

from __future__ import annotations

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session, aliased

from gearboxe.models.conversation import Conversation
from gearboxe.models.message import Message
from gearboxe.models.user import User
from gearboxe.models.vehicle import Vehicle
from gearboxe.schemas.conversation import ConversationSummary
from gearboxe.schemas.message import MessageRead

UNKNOWN_USER_NAME = "Unknown User"
UNKNOWN_VEHICLE_TITLE = "Unknown Vehicle"


def list_conversations_for_user(db: Session, user_id: int) -> list[ConversationSummary]:
    """Return inbox rows ordered by most recent message first.

    Conversations without any message are left out.
    """

    ranked_messages = (
        select(
            Message.id.label("message_id"),
            Message.conversation_id.label("conversation_id"),
            func.row_number()
            .over(
                partition_by=Message.conversation_id,
                order_by=(Message.created_at.desc(), Message.id.desc()),
            )
            .label("position"),
        )
        .where(Message.conversation_id.is_not(None))
        .subquery()
    )
    latest_messages = (
        select(ranked_messages.c.conversation_id, ranked_messages.c.message_id)
        .where(ranked_messages.c.position == 1)
        .subquery()
    )
    unread_counts = (
        select(
            Message.conversation_id.label("conversation_id"),
            func.count(Message.id).label("unread_count"),
        )
        .where(
            Message.recipient_id == user_id,
            Message.read.is_(False),
            Message.conversation_id.is_not(None),
        )
        .group_by(Message.conversation_id)
        .subquery()
    )

    peer = aliased(User)
    peer_id = case(
        (Conversation.participant1_id == user_id, Conversation.participant2_id),
        else_=Conversation.participant1_id,
    )
    stmt = (
        select(
            Conversation,
            Message,
            peer.name.label("peer_name"),
            Vehicle.title.label("vehicle_title"),
            func.coalesce(unread_counts.c.unread_count, 0).label("unread_count"),
        )
        .join(latest_messages, latest_messages.c.conversation_id == Conversation.id)
        .join(Message, Message.id == latest_messages.c.message_id)
        .outerjoin(peer, peer.id == peer_id)
        .outerjoin(Vehicle, Vehicle.id == Conversation.vehicle_id)
        .outerjoin(unread_counts, unread_counts.c.conversation_id == Conversation.id)
        .where(or_(Conversation.participant1_id == user_id, Conversation.participant2_id == user_id))
        .order_by(Message.created_at.desc(), Conversation.id.desc())
    )

    rows = db.execute(stmt).all()
    return [
        ConversationSummary(
            conversation_id=conversation.id,
            vehicle_id=conversation.vehicle_id,
            other_user_id=conversation.other_participant_id(user_id),
            other_user_name=peer_name or UNKNOWN_USER_NAME,
            vehicle_title=vehicle_title or UNKNOWN_VEHICLE_TITLE,
            last_message=MessageRead.model_validate(message),
            unread_count=int(unread_count or 0),
            last_message_at=message.created_at,
        )
        for conversation, message, peer_name, vehicle_title, unread_count in rows
    ]
