"""User schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

UserRole = Literal["user", "admin", "superAdmin"]


class UserRead(BaseModel):
    """Serialized user projection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str
    name: str
    email: str
    role: str
    created_at: datetime


class UserRoleUpdateRequest(BaseModel):
    role: UserRole
