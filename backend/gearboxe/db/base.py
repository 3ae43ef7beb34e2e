"""SQLAlchemy metadata registry import for Alembic."""

from gearboxe.models import Conversation, Message, User, Vehicle
from gearboxe.models.base import Base

__all__ = ["Base", "User", "Vehicle", "Conversation", "Message"]
