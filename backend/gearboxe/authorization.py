"""Single policy gate for messaging actions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from gearboxe.models.conversation import Conversation
from gearboxe.models.message import Message
from gearboxe.models.user import User
from gearboxe.models.vehicle import Vehicle
from gearboxe.services.errors import AuthorizationError

Action = Literal[
    "message:send",
    "message:mark_read",
    "conversation:read",
    "conversation:mark_read",
    "conversation:lookup",
    "vehicle:read_messages",
    "user:manage_roles",
]

ADMIN_ROLES = frozenset({"admin", "superAdmin"})


@dataclass(frozen=True, slots=True)
class SendIntent:
    """Resource for ``message:send``: who is sending to whom."""

    sender_id: int
    recipient_id: int


@dataclass(frozen=True, slots=True)
class ParticipantPair:
    """Resource for ``conversation:lookup``."""

    user_a: int
    user_b: int


def is_admin(principal: User) -> bool:
    return principal.role in ADMIN_ROLES


def is_super_admin(principal: User) -> bool:
    return principal.role == "superAdmin"


def _can_send(principal: User, resource: Any) -> bool:
    return isinstance(resource, SendIntent) and resource.sender_id == principal.id


def _can_mark_message(principal: User, resource: Any) -> bool:
    return isinstance(resource, Message) and resource.recipient_id == principal.id


def _can_read_conversation(principal: User, resource: Any) -> bool:
    if not isinstance(resource, Conversation):
        return False
    return resource.has_participant(principal.id) or is_admin(principal)


def _can_mark_conversation(principal: User, resource: Any) -> bool:
    return isinstance(resource, Conversation) and resource.has_participant(principal.id)


def _can_lookup(principal: User, resource: Any) -> bool:
    if not isinstance(resource, ParticipantPair):
        return False
    return principal.id in (resource.user_a, resource.user_b) or is_admin(principal)


def _can_read_vehicle_messages(principal: User, resource: Any) -> bool:
    if not isinstance(resource, Vehicle):
        return False
    return resource.user_id == principal.id or is_admin(principal)


def _can_manage_roles(principal: User, resource: Any) -> bool:
    return is_super_admin(principal)


_POLICIES: dict[str, Callable[[User, Any], bool]] = {
    "message:send": _can_send,
    "message:mark_read": _can_mark_message,
    "conversation:read": _can_read_conversation,
    "conversation:mark_read": _can_mark_conversation,
    "conversation:lookup": _can_lookup,
    "vehicle:read_messages": _can_read_vehicle_messages,
    "user:manage_roles": _can_manage_roles,
}


def authorize(principal: User | None, action: Action, resource: Any = None) -> bool:
    """Return whether ``principal`` may perform ``action`` on ``resource``.

    Unknown actions and anonymous principals are denied.
    """

    if principal is None:
        return False
    policy = _POLICIES.get(action)
    if policy is None:
        return False
    return policy(principal, resource)


def require(principal: User | None, action: Action, resource: Any = None) -> None:
    """Raise ``AuthorizationError`` unless ``authorize`` allows the action."""

    if not authorize(principal, action, resource):
        raise AuthorizationError(f"Not allowed: {action}")
