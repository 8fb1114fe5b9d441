from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHashError
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.orm import Session
from blogpad.models import User, Session as SessionModel
from blogpad.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

# Argon2id with fixed cost parameters; salt is generated per hash
ph = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4)

# Verified against when the email is unknown so both failure paths cost the same
_DUMMY_HASH = ph.hash("blogpad-dummy-password")


def hash_password(password: str) -> str:
    """
    Hash password using Argon2id.

    Returns hash string that includes algorithm parameters and salt.
    Format: $argon2id$v=19$m=65536,t=3,p=4$salt$hash
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against stored hash.

    Uses constant-time comparison internally to prevent timing attacks.
    Returns False for any error to avoid information leakage.
    """
    try:
        return ph.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHashError):
        return False


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """
    Look up user by email and check the password.

    Returns None both for an unknown email and for a wrong password,
    so callers cannot tell the two apart.
    """
    user = db.query(User).filter(User.email == email.lower()).first()

    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


def generate_session_id() -> str:
    """
    Generate cryptographically secure session identifier.

    Uses 32 bytes (256 bits) of randomness.
    Hex encoded = 64 character string.
    """
    return secrets.token_hex(32)


def create_session(db: Session, user_id: int) -> str:
    """
    Create new session for user.

    Returns session_id to be stored in cookie.
    Session expires after configured duration.
    """
    session_id = generate_session_id()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.session_expire_minutes)

    session = SessionModel(
        session_id=session_id,
        user_id=user_id,
        expires_at=expires_at
    )

    db.add(session)
    db.commit()

    return session_id


def get_user_from_session(db: Session, session_id: str) -> Optional[User]:
    """
    Validate session and retrieve associated user.

    Returns None if:
    - Session doesn't exist
    - Session is expired
    - User doesn't exist

    Expired and missing sessions are indistinguishable to callers.
    """
    session = db.query(SessionModel).filter(
        SessionModel.session_id == session_id,
        SessionModel.expires_at > datetime.now(timezone.utc)
    ).first()

    if not session:
        return None

    return db.query(User).filter(User.id == session.user_id).first()


def delete_session(db: Session, session_id: str) -> bool:
    """
    Delete session (logout).

    Returns True if session was deleted, False if not found.
    """
    result = db.query(SessionModel).filter(
        SessionModel.session_id == session_id
    ).delete()

    db.commit()
    return result > 0


def cleanup_expired_sessions(db: Session) -> int:
    """
    Remove expired sessions from database.

    Returns number of sessions cleaned up.
    """
    result = db.query(SessionModel).filter(
        SessionModel.expires_at <= datetime.now(timezone.utc)
    ).delete()

    db.commit()
    if result:
        logger.info("Purged %d expired sessions", result)
    return result
