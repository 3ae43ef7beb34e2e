"""Principal resolution for request handlers."""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from gearboxe.config import get_settings
from gearboxe.db.dependencies import get_db
from gearboxe.models.user import User
from gearboxe.services.users import resolve_user


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the gateway-authenticated subject to the local user."""

    subject = request.headers.get(get_settings().identity_header, "").strip()
    if not subject:
        raise HTTPException(status_code=401, detail="Not authenticated")
    user = resolve_user(db, subject)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user
