"""
Admin account management. Every route requires an admin token.
"""
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chamber import schemas
from chamber.api import deps
from chamber.core import security
from chamber.core.config import Settings
from chamber.models.user import User, ROLE_ADMIN
from chamber.schemas.auth import AdminCreate, ProfileUpdate
from chamber.services.realtime import Broadcaster, ADMIN_ROOMS

router = APIRouter()


@router.get("/users", response_model=List[schemas.UserProfile])
def list_admins(
    db: Session = Depends(deps.get_db),
    _: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    return db.query(User).filter(User.role == ROLE_ADMIN).order_by(User.created_at.asc(), User.id.asc()).all()


@router.post("/users", response_model=schemas.UserEnvelope, status_code=201)
def create_admin(
    *,
    db: Session = Depends(deps.get_db),
    settings: Settings = Depends(deps.get_settings),
    _: schemas.TokenClaims = Depends(deps.require_admin),
    admin_in: AdminCreate,
) -> Any:
    if db.query(User).filter(User.email == admin_in.email).first():
        raise HTTPException(status_code=400, detail="An account with this email already exists")

    admin = User(
        name=admin_in.name,
        email=admin_in.email,
        hashed_password=security.hash_password(admin_in.password, settings.BCRYPT_ROUNDS),
        role=ROLE_ADMIN,
    )
    db.add(admin)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="An account with this email already exists")
    db.refresh(admin)
    return {"message": "Admin created successfully", "user": admin}


@router.put("/profile", response_model=schemas.UserEnvelope)
def update_profile(
    *,
    db: Session = Depends(deps.get_db),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    claims: schemas.TokenClaims = Depends(deps.require_admin),
    profile_in: ProfileUpdate,
) -> Any:
    """Change the caller's own name and email."""
    taken = db.query(User).filter(User.email == profile_in.email, User.id != claims.user_id).first()
    if taken:
        raise HTTPException(status_code=400, detail="This email is already taken by another user")

    user = db.query(User).filter(User.id == claims.user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    user.name = profile_in.name
    user.email = profile_in.email
    db.commit()
    db.refresh(user)

    event = schemas.to_event(schemas.UserProfile, user)
    broadcaster.publish(
        "admin-profile-updated",
        {key: event[key] for key in ("id", "name", "email", "updatedAt")},
        rooms=ADMIN_ROOMS,
    )
    return {"message": "Profile updated successfully", "user": user}


@router.delete("/users/{id}", response_model=schemas.Message)
def delete_admin(
    id: int,
    *,
    db: Session = Depends(deps.get_db),
    claims: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    if id == claims.user_id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    user = db.query(User).filter(User.id == id).first()
    if not user:
        raise HTTPException(status_code=404, detail="Admin not found")
    db.delete(user)
    db.commit()
    return {"message": "Admin deleted successfully"}
