"""ORM models package exports."""

from gearboxe.models.conversation import Conversation
from gearboxe.models.message import Message
from gearboxe.models.user import USER_ROLES, User
from gearboxe.models.vehicle import Vehicle

__all__ = [
    "USER_ROLES",
    "User",
    "Vehicle",
    "Conversation",
    "Message",
]
