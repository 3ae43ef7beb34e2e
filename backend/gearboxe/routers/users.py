"""Current-user inbox and role management routes."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from gearboxe.authorization import require
from gearboxe.db.dependencies import get_db
from gearboxe.identity import get_current_user
from gearboxe.models.user import User
from gearboxe.schemas.common import ApiResponse
from gearboxe.schemas.conversation import ConversationSummary
from gearboxe.schemas.message import UnreadCount
from gearboxe.schemas.user import UserRead, UserRoleUpdateRequest
from gearboxe.services.errors import AuthorizationError, NotFoundError
from gearboxe.services.inbox import list_conversations_for_user
from gearboxe.services.messages import unread_count_for_user
from gearboxe.services.users import update_user_role

router = APIRouter()


@router.get("/me", response_model=ApiResponse[UserRead])
def get_me(current_user: User = Depends(get_current_user)) -> ApiResponse[UserRead]:
    return ApiResponse(data=UserRead.model_validate(current_user))


@router.get("/me/conversations", response_model=ApiResponse[list[ConversationSummary]])
def get_my_conversations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[list[ConversationSummary]]:
    """Inbox rows for the caller, most recently active first."""

    return ApiResponse(data=list_conversations_for_user(db, current_user.id))


@router.get("/me/unread-count", response_model=ApiResponse[UnreadCount])
def get_my_unread_count(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[UnreadCount]:
    """Badge count of unread messages addressed to the caller."""

    return ApiResponse(data=UnreadCount(count=unread_count_for_user(db, current_user.id)))


@router.patch("/users/{external_id}/role", response_model=ApiResponse[UserRead])
def patch_user_role(
    payload: UserRoleUpdateRequest,
    external_id: str = Path(..., min_length=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse[UserRead]:
    """Assign a role to another user (super admins only)."""

    try:
        require(current_user, "user:manage_roles")
    except AuthorizationError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    try:
        updated = update_user_role(db, external_id, payload.role)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return ApiResponse(data=UserRead.model_validate(updated))
