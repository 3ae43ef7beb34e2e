"""Conversation and inbox schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from gearboxe.schemas.message import MessageRead


class ConversationRead(BaseModel):
    """Serialized conversation record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    vehicle_id: int
    participant1_id: int
    participant2_id: int
    created_at: datetime
    last_message_at: datetime


class ConversationSummary(BaseModel):
    """One inbox row for a user."""

    conversation_id: int
    vehicle_id: int
    other_user_id: int
    other_user_name: str
    vehicle_title: str
    last_message: MessageRead
    unread_count: int
    last_message_at: datetime


class ConversationReadResult(BaseModel):
    """Result of marking a conversation as read for one user."""

    conversation_id: int
    marked_count: int


class LegacyBackfillResult(BaseModel):
    """Counts produced by the legacy message backfill."""

    messages_linked: int = 0
    conversations_created: int = 0
    conversations_reused: int = 0
