import logging
import secrets
from datetime import timedelta

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlmodel import Session, select

from core.config import settings
from core.database import get_session
from models.session_token import SessionToken
from models.user import User, UserRole
from utils.clock import utcnow

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticationError(Exception):
    """Phone number and password did not identify a user."""


class UserNotFoundError(AuthenticationError):
    pass


class InvalidPasswordError(AuthenticationError):
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def check_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def authenticate(session: Session, phone: str, password: str) -> User:
    """
    Resolve a phone number + password to a user.

    Raises UserNotFoundError before any password comparison when no user has
    the phone number, and InvalidPasswordError when the check fails or errors.
    """
    phone = phone.strip()
    user = session.exec(select(User).where(User.phone_number == phone)).first()
    if not user:
        raise UserNotFoundError("User not found!")

    try:
        matched = check_password(password, user.password_hash)
    except (ValueError, TypeError) as e:
        # unreadable or unknown hash format
        logger.warning("Password check errored for user %s: %s", user.id, e)
        matched = False

    if not matched:
        raise InvalidPasswordError("Invalid password!")
    return user


# Sessions
def create_session(session: Session, user: User) -> SessionToken:
    token = SessionToken(
        user_id=user.id,
        phone=user.phone_number,
        token=secrets.token_urlsafe(32),
        expires_at=utcnow() + timedelta(hours=settings.session_ttl_hours),
    )
    session.add(token)
    session.commit()
    session.refresh(token)
    return token


def revoke_session(session: Session, token: SessionToken) -> None:
    token.revoked = True
    session.add(token)
    session.commit()


def refresh_session(session: Session, token: SessionToken) -> SessionToken:
    """Replace ``token`` with a new one carrying a fresh expiry."""
    user = session.get(User, token.user_id)
    token.revoked = True
    session.add(token)
    return create_session(session, user)


def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> SessionToken:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = session.exec(
        select(SessionToken).where(SessionToken.token == credentials.credentials)
    ).first()
    if not token or not token.is_active(utcnow()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired or invalid",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def get_current_user(
    current_session: SessionToken = Depends(get_current_session),
    session: Session = Depends(get_session),
) -> User:
    user = session.get(User, current_session.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User no longer exists")
    return user


def employee_required(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.employee:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Employees only")
    return current_user


def admin_required(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return current_user
