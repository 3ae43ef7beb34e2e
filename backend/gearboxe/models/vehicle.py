"""Vehicle listing ORM model."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from gearboxe.models.base import Base, CreatedAtMixin, IdMixin


class Vehicle(Base, IdMixin, CreatedAtMixin):
    """Listing referenced by conversations; messaging never mutates it."""

    __tablename__ = "vehicles"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
