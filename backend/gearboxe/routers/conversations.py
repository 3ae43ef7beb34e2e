"""Conversation lookup, thread and read-marking routes."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from gearboxe.authorization import ParticipantPair, require
from gearboxe.db.dependencies import get_db
from gearboxe.identity import get_current_user
from gearboxe.models.user import User
from gearboxe.schemas.common import ApiResponse
from gearboxe.schemas.conversation import ConversationRead, ConversationReadResult
from gearboxe.schemas.message import MessageRead
from gearboxe.services.conversations import find_conversation, get_conversation
from gearboxe.services.errors import AuthorizationError
from gearboxe.services.messages import list_messages_for_conversation, mark_conversation_read

router = APIRouter(prefix="/conversations")


@router.get("/lookup", response_model=ApiResponse[ConversationRead | None])
def lookup_conversation(
    vehicle_id: int = Query(..., ge=1),
    user_a: int = Query(..., ge=1),
    user_b: int = Query(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ConversationRead | None]:
    """Find the conversation for a vehicle and participant pair, in either order."""

    try:
        require(current_user, "conversation:lookup", ParticipantPair(user_a, user_b))
    except AuthorizationError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc

    conversation = find_conversation(db, vehicle_id, user_a, user_b)
    if conversation is None:
        return ApiResponse(data=None)
    return ApiResponse(data=ConversationRead.model_validate(conversation))


@router.get("/{conversation_id}/messages", response_model=ApiResponse[list[MessageRead]])
def get_conversation_messages(
    conversation_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[list[MessageRead]]:
    """List thread messages oldest first; empty for a conversation not created yet."""

    conversation = get_conversation(db, conversation_id)
    if conversation is None:
        return ApiResponse(data=[])
    try:
        require(current_user, "conversation:read", conversation)
    except AuthorizationError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc

    records = list_messages_for_conversation(db, conversation_id)
    return ApiResponse(data=[MessageRead.model_validate(message) for message in records])


@router.post("/{conversation_id}/read", response_model=ApiResponse[ConversationReadResult])
def read_conversation(
    conversation_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[ConversationReadResult]:
    """Mark every message addressed to the caller in this thread as read."""

    conversation = get_conversation(db, conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    try:
        require(current_user, "conversation:mark_read", conversation)
    except AuthorizationError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc

    marked = mark_conversation_read(db, conversation_id, current_user.id)
    return ApiResponse(data=ConversationReadResult(conversation_id=conversation_id, marked_count=marked))
