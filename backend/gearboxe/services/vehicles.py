"""Vehicle lookup used for display projection."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from gearboxe.models.vehicle import Vehicle
from gearboxe.services.errors import InvalidInputError


def get_vehicle(db: Session, vehicle_id: int) -> Vehicle | None:
    return db.scalar(select(Vehicle).where(Vehicle.id == vehicle_id))


def create_vehicle(db: Session, *, owner_id: int, title: str) -> Vehicle:
    """Persist a minimal vehicle projection."""

    clean_title = (title or "").strip()
    if not clean_title:
        raise InvalidInputError("Vehicle title cannot be empty.")
    vehicle = Vehicle(user_id=owner_id, title=clean_title)
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return vehicle
