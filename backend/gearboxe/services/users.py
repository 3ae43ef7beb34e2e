"""Identity resolution and user projection services."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from gearboxe.models.user import USER_ROLES, User
from gearboxe.services.errors import InvalidInputError, NotFoundError


def resolve_user(db: Session, external_id: str) -> User | None:
    """Map an identity-provider subject to the local user record."""

    clean_external_id = (external_id or "").strip()
    if not clean_external_id:
        return None
    return db.scalar(select(User).where(User.external_id == clean_external_id))


def get_user(db: Session, user_id: int) -> User | None:
    return db.scalar(select(User).where(User.id == user_id))


def upsert_user_from_identity(
    db: Session,
    *,
    external_id: str,
    first_name: str | None = None,
    last_name: str | None = None,
    email: str | None = None,
) -> User:
    """Create or refresh a user from identity-provider profile data.

    New users start with the ``user`` role; refreshing an existing user only
    touches name and email.
    """

    clean_external_id = (external_id or "").strip()
    if not clean_external_id:
        raise InvalidInputError("Identity subject is required.")

    name = f"{first_name or ''} {last_name or ''}".strip() or "User"
    user = resolve_user(db, clean_external_id)
    if user is None:
        user = User(external_id=clean_external_id, name=name, email=email or "", role="user")
        db.add(user)
    else:
        user.name = name
        user.email = email or ""
    db.commit()
    db.refresh(user)
    return user


def update_user_role(db: Session, external_id: str, role: str) -> User:
    """Assign a role to the user identified by ``external_id``."""

    if role not in USER_ROLES:
        raise InvalidInputError(f"Unknown role: {role}")
    user = resolve_user(db, external_id)
    if user is None:
        raise NotFoundError("User not found")
    user.role = role
    db.commit()
    db.refresh(user)
    return user
