"""Message send and read-state routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from gearboxe.authorization import SendIntent, authorize, require
from gearboxe.db.dependencies import get_db
from gearboxe.identity import get_current_user
from gearboxe.models.user import User
from gearboxe.schemas.common import ApiResponse
from gearboxe.schemas.message import MessageRead, MessageReadState, SendMessageRequest
from gearboxe.services.errors import AuthorizationError, InvalidInputError, NotFoundError
from gearboxe.services.messages import get_message, list_messages_for_vehicle, mark_message_read, send_message
from gearboxe.services.users import get_user
from gearboxe.services.vehicles import get_vehicle

router = APIRouter()


@router.post("/messages", response_model=ApiResponse[MessageRead], status_code=201)
def create_message(
    payload: SendMessageRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[MessageRead]:
    """Send a message to another user about a vehicle."""

    try:
        require(current_user, "message:send", SendIntent(current_user.id, payload.recipient_id))
    except AuthorizationError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    if get_user(db, payload.recipient_id) is None:
        raise HTTPException(status_code=404, detail="Recipient not found")
    if get_vehicle(db, payload.vehicle_id) is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")

    try:
        message = send_message(
            db,
            sender_id=current_user.id,
            recipient_id=payload.recipient_id,
            vehicle_id=payload.vehicle_id,
            content=payload.content,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ApiResponse(data=MessageRead.model_validate(message))


@router.post("/messages/{message_id}/read", response_model=ApiResponse[MessageReadState])
def read_message(
    message_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[MessageReadState]:
    """Mark one message as read; a no-op for anyone but its recipient."""

    message = get_message(db, message_id)
    if message is None:
        raise HTTPException(status_code=404, detail="Message not found")
    if not authorize(current_user, "message:mark_read", message):
        return ApiResponse(data=MessageReadState(id=message.id, read=message.read, changed=False))

    try:
        updated, changed = mark_message_read(db, message_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(data=MessageReadState(id=updated.id, read=updated.read, changed=changed))


@router.get("/vehicles/{vehicle_id}/messages", response_model=ApiResponse[list[MessageRead]])
def get_vehicle_messages(
    vehicle_id: int = Path(..., ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[list[MessageRead]]:
    """List every message about a vehicle, including legacy rows."""

    vehicle = get_vehicle(db, vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    try:
        require(current_user, "vehicle:read_messages", vehicle)
    except AuthorizationError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc

    records = list_messages_for_vehicle(db, vehicle_id)
    return ApiResponse(data=[MessageRead.model_validate(message) for message in records])
