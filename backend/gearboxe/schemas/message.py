"""Message request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SendMessageRequest(BaseModel):
    """Payload for sending one message about a vehicle."""

    recipient_id: int = Field(ge=1)
    vehicle_id: int = Field(ge=1)
    content: str = Field(min_length=1)


class MessageRead(BaseModel):
    """Serialized message."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    conversation_id: int | None
    sender_id: int
    recipient_id: int
    vehicle_id: int
    content: str
    read: bool
    created_at: datetime


class MessageReadState(BaseModel):
    """Result of marking one message as read."""

    id: int
    read: bool
    changed: bool


class UnreadCount(BaseModel):
    count: int
