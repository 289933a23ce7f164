import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from core.database import get_session
from models.session_token import SessionToken
from schemas.auth import LoginRequest, LoginResponse, SessionUser
from utils.security import (
    InvalidPasswordError,
    UserNotFoundError,
    authenticate,
    create_session,
    get_current_session,
    refresh_session,
    revoke_session,
)

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)

# Same message for both failure classes
LOGIN_FAILED = "Invalid phone number or password"


def _login_response(token: SessionToken) -> LoginResponse:
    return LoginResponse(
        token=token.token,
        expires_at=token.expires_at,
        user=SessionUser(id=token.user_id, phone=token.phone),
    )


@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest, session: Session = Depends(get_session)):
    try:
        user = authenticate(session, req.phone, req.password)
    except UserNotFoundError:
        logger.info("Login failed for %s: user not found", req.phone)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=LOGIN_FAILED)
    except InvalidPasswordError:
        logger.info("Login failed for %s: invalid password", req.phone)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=LOGIN_FAILED)

    token = create_session(session, user)
    logger.info("User %s signed in", user.id)
    return _login_response(token)


@router.post("/logout")
def logout(
    current_session: SessionToken = Depends(get_current_session),
    session: Session = Depends(get_session),
):
    revoke_session(session, current_session)
    logger.info("User %s signed out", current_session.user_id)
    return {"message": "Signed out"}


@router.post("/refresh", response_model=LoginResponse)
def refresh(
    current_session: SessionToken = Depends(get_current_session),
    session: Session = Depends(get_session),
):
    token = refresh_session(session, current_session)
    logger.info("Session refreshed for user %s", token.user_id)
    return _login_response(token)


@router.get("/me", response_model=SessionUser)
def me(current_session: SessionToken = Depends(get_current_session)):
    return SessionUser(id=current_session.user_id, phone=current_session.phone)
