"""User ORM model."""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from gearboxe.models.base import Base, CreatedAtMixin, IdMixin

USER_ROLES = ("user", "admin", "superAdmin")


class User(Base, IdMixin, CreatedAtMixin):
    """Local projection of an identity-provider account."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin', 'superAdmin')", name="ck_users_role"),
    )

    external_id: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), default="", nullable=False)
    role: Mapped[str] = mapped_column(String(16), default="user", nullable=False)
