"""
Authentication endpoints: register, login, profile, password reset and change.
"""
import logging
from datetime import timedelta
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chamber import schemas
from chamber.api import deps
from chamber.core import security
from chamber.core.config import Settings
from chamber.db.base_class import utcnow
from chamber.models.user import User
from chamber.schemas.auth import (
    RegisterRequest, LoginRequest, ForgotPasswordRequest,
    ResetPasswordRequest, ChangePasswordRequest,
)
from chamber.services.email import EmailService
from chamber.services.realtime import Broadcaster, ADMIN_ROOMS

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_CREDENTIALS = "Invalid email or password"
INVALID_RESET_TOKEN = "Invalid or expired reset token"


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def _auth_payload(message: str, user: User, settings: Settings) -> dict:
    return {
        "message": message,
        "token": security.create_access_token(user, settings),
        "user": user,
    }


@router.post(
    "/register",
    response_model=schemas.AuthResponse,
    status_code=201,
    dependencies=[Depends(deps.auth_rate_limit)],
)
def register(
    *,
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    user_in: RegisterRequest,
) -> Any:
    """Create a 'user' account and return a bearer token for it."""
    if find_user_by_email(db, user_in.email):
        raise HTTPException(status_code=400, detail="User already exists with this email")

    user = User(
        name=user_in.name,
        email=user_in.email,
        hashed_password=security.hash_password(user_in.password, settings.BCRYPT_ROUNDS),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration of the same email
        db.rollback()
        raise HTTPException(status_code=400, detail="User already exists with this email")
    db.refresh(user)
    logger.info(f"Registered user id={user.id}")
    return _auth_payload("User registered successfully", user, settings)


@router.post(
    "/login",
    response_model=schemas.AuthResponse,
    dependencies=[Depends(deps.auth_rate_limit)],
)
def login(
    *,
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    credentials: LoginRequest,
) -> Any:
    user = find_user_by_email(db, credentials.email)
    if not user or not security.verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS)
    return _auth_payload("Login successful", user, settings)


@router.get("/profile", response_model=schemas.UserProfile)
def read_profile(
    db: Session = Depends(deps.get_db),
    claims: schemas.TokenClaims = Depends(deps.get_current_claims),
) -> Any:
    user = db.query(User).filter(User.id == claims.user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post(
    "/forgot-password",
    response_model=schemas.auth.ForgotPasswordResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(deps.auth_rate_limit)],
)
def forgot_password(
    *,
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    email_service: EmailService = Depends(deps.get_email_service),
    request_in: ForgotPasswordRequest,
) -> Any:
    """
    Store a hashed one-hour reset token and mail the raw token as a link.

    When every email provider fails the link is only returned in the response
    if EXPOSE_RESET_URL_ON_EMAIL_FAILURE is enabled.
    """
    user = find_user_by_email(db, request_in.email)
    if not user:
        raise HTTPException(status_code=404, detail="No account found with this email address")

    raw_token, hashed_token = security.generate_reset_token()
    user.reset_password_token = hashed_token
    user.reset_password_expires = utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.commit()

    reset_url = f"{settings.CLIENT_URL.rstrip('/')}/reset-password/{raw_token}"
    result = email_service.send_reset_email(user.email, reset_url, user.name)

    if result.success:
        message = f"Password reset link has been sent to your email address via {result.method}. Please check your inbox."
    else:
        logger.warning(f"Reset email for user id={user.id} could not be delivered")
        message = "Password reset link generated but the email could not be delivered. Please try again later."

    expose = not result.success and settings.EXPOSE_RESET_URL_ON_EMAIL_FAILURE
    return {
        "message": message,
        "success": True,
        "email_sent": result.success,
        "email_method": result.method,
        "reset_url": reset_url if expose else None,
    }


@router.get("/verify-reset-token/{token}", response_model=schemas.auth.ResetTokenStatus)
def verify_reset_token(token: str, db: Session = Depends(deps.get_db)) -> Any:
    user = db.query(User).filter(
        User.reset_password_token == security.hash_reset_token(token),
        User.reset_password_expires > utcnow(),
    ).first()
    if not user:
        raise HTTPException(status_code=400, detail=INVALID_RESET_TOKEN)
    return {"message": "Reset token is valid", "success": True, "email": user.email, "name": user.name}


@router.post(
    "/reset-password/{token}",
    response_model=schemas.Message,
    dependencies=[Depends(deps.auth_rate_limit)],
)
def reset_password(
    token: str,
    *,
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    reset_in: ResetPasswordRequest,
) -> Any:
    # Single conditional UPDATE: the token is consumed exactly once
    updated = db.query(User).filter(
        User.reset_password_token == security.hash_reset_token(token),
        User.reset_password_expires > utcnow(),
    ).update(
        {
            User.hashed_password: security.hash_password(reset_in.new_password, settings.BCRYPT_ROUNDS),
            User.reset_password_token: None,
            User.reset_password_expires: None,
            User.updated_at: utcnow(),
        },
        synchronize_session=False,
    )
    db.commit()
    if not updated:
        raise HTTPException(
            status_code=400,
            detail=f"{INVALID_RESET_TOKEN}. Please request a new password reset.",
        )
    return {"message": "Password has been reset successfully. You can now login with your new password."}


@router.post("/change-password", response_model=schemas.Message)
def change_password(
    *,
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    claims: schemas.TokenClaims = Depends(deps.get_current_claims),
    change_in: ChangePasswordRequest,
) -> Any:
    user = db.query(User).filter(User.id == claims.user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not security.verify_password(change_in.current_password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Current password is incorrect")

    user.hashed_password = security.hash_password(change_in.new_password, settings.BCRYPT_ROUNDS)
    db.commit()
    db.refresh(user)

    event = schemas.to_event(schemas.UserProfile, user)
    broadcaster.publish(
        "admin-password-changed",
        {"id": event["id"], "updatedAt": event["updatedAt"]},
        rooms=ADMIN_ROOMS,
    )
    return {"message": "Password changed successfully"}
