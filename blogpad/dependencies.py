from dataclasses import dataclass
from typing import Optional
from fastapi import Cookie, Depends
from sqlalchemy.orm import Session
from blogpad.auth import get_user_from_session
from blogpad.config import get_settings
from blogpad.database import get_db
from blogpad.errors import AuthError
from blogpad.models import User

settings = get_settings()


@dataclass(frozen=True)
class RequestContext:
    """
    Authenticated identity for one request.

    Built by require_auth and passed explicitly to handlers that need it.
    """
    session_id: str
    user: User

    @property
    def user_id(self) -> int:
        return self.user.id


def require_auth(
    session_id: Optional[str] = Cookie(None, alias=settings.cookie_name),
    db: Session = Depends(get_db)
) -> RequestContext:
    """
    Gate for protected routes.

    Raises AuthError (401) when the cookie is missing, unknown or expired.
    """
    if not session_id:
        raise AuthError()

    user = get_user_from_session(db, session_id)
    if user is None:
        raise AuthError()

    return RequestContext(session_id=session_id, user=user)
