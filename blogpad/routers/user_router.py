import logging
from fastapi import APIRouter, Depends, status, Response, Cookie
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Optional
from blogpad.database import get_db
from blogpad.models import User
from blogpad.schemas import (
    SignupRequest,
    LoginRequest,
    AuthResponse,
    UserResponse,
    UserListResponse,
    MessageResponse,
)
from blogpad.auth import hash_password, authenticate, create_session, delete_session
from blogpad.dependencies import RequestContext, require_auth
from blogpad.errors import AuthError, ConflictError, ServerError
from blogpad.config import get_settings

router = APIRouter(prefix="/api/v1/users", tags=["users"])
settings = get_settings()
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    request: SignupRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Create new user account and log it in.

    Error cases:
    - 400: Missing or empty field (request validation)
    - 409: Email already exists
    - 500: Database error
    """
    # Normalize email to prevent duplicate accounts with different casing
    email = request.email.lower()

    user = User(
        username=request.username,
        email=email,
        password_hash=hash_password(request.password)
    )

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating user %s", email)
        raise ServerError("Error creating user")

    # Implicit login with the new account
    session_id = create_session(db, user.id)
    _set_session_cookie(response, session_id)

    return AuthResponse(
        message="User created successfully",
        user=UserResponse.model_validate(user)
    )


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and create session.

    Unknown email and wrong password produce the same 401 response
    so the endpoint cannot be used to discover registered emails.
    """
    user = authenticate(db, request.email, request.password)

    if user is None:
        logger.warning("Failed login attempt for %s", request.email.lower())
        raise AuthError("Invalid email or password")

    session_id = create_session(db, user.id)
    _set_session_cookie(response, session_id)

    logger.info("User %s logged in", user.id)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(user)
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    session_id: Optional[str] = Cookie(None, alias=settings.cookie_name),
    db: Session = Depends(get_db)
):
    """
    Delete the server-side session and clear the cookie.

    Returns success even if session doesn't exist (idempotent).
    """
    if session_id:
        delete_session(db, session_id)

    _clear_session_cookie(response)

    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
def get_current_user_info(context: RequestContext = Depends(require_auth)):
    return context.user


@router.get("", response_model=UserListResponse)
def list_users(db: Session = Depends(get_db)):
    try:
        users = db.query(User).order_by(User.id).all()
    except SQLAlchemyError:
        logger.exception("Error fetching users")
        raise ServerError("Error fetching users")

    return UserListResponse(data=[UserResponse.model_validate(u) for u in users])


def _cookie_domain() -> Optional[str]:
    return settings.cookie_domain if settings.cookie_domain != "localhost" else None


def _set_session_cookie(response: Response, session_id: str):
    """
    Set session cookie with security flags.

    The cookie only contains the session ID (opaque token).
    All user data stays server-side.
    """
    response.set_cookie(
        key=settings.cookie_name,
        value=session_id,
        httponly=settings.cookie_httponly,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=settings.session_expire_minutes * 60,
        path="/",
        domain=_cookie_domain()
    )


def _clear_session_cookie(response: Response):
    response.delete_cookie(
        key=settings.cookie_name,
        path="/",
        domain=_cookie_domain(),
        secure=settings.cookie_secure,
        httponly=True,
        samesite=settings.cookie_samesite
    )
