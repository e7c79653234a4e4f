"""
Request dependencies: database session, bearer-token claims, admin gate,
shared services and body parsing for endpoints that accept JSON or multipart.
"""
import json
from typing import Any, Dict, Generator, Optional, Tuple, Type

import jwt
from fastapi import Depends, Header, HTTPException, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from chamber.core import security
from chamber.core.config import Settings
from chamber.core.errors import format_validation_error
from chamber.schemas.auth import TokenClaims
from chamber.services.email import EmailService
from chamber.services.image_optimizer import ImageOptimizer
from chamber.services.realtime import Broadcaster
from chamber.services.storage import UploadStorage
from chamber.state import AppState


def get_state(request: Request) -> AppState:
    return request.app.state.chamber


def get_settings(state: AppState = Depends(get_state)) -> Settings:
    return state.settings


def get_db(state: AppState = Depends(get_state)) -> Generator:
    db = state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_storage(state: AppState = Depends(get_state)) -> UploadStorage:
    return state.storage


def get_image_optimizer(state: AppState = Depends(get_state)) -> ImageOptimizer:
    return state.image_optimizer


def get_email_service(state: AppState = Depends(get_state)) -> EmailService:
    return state.email


def get_broadcaster(state: AppState = Depends(get_state)) -> Broadcaster:
    return state.broadcaster


# -- Auth ---------------------------------------------------------

def get_current_claims(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> TokenClaims:
    """401 when no bearer token is sent, 403 when it fails verification."""
    token = None
    if authorization:
        scheme, _, value = authorization.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            token = value.strip()
    if not token:
        raise HTTPException(status_code=401, detail="Access token required")
    try:
        payload = security.decode_access_token(token, settings)
        return TokenClaims.model_validate(payload)
    except (jwt.PyJWTError, ValidationError):
        raise HTTPException(status_code=403, detail="Invalid or expired token")


def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    if not claims.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return claims


def auth_rate_limit(request: Request, state: AppState = Depends(get_state)) -> None:
    client = request.client.host if request.client else "unknown"
    retry_after = state.auth_limiter.hit(client)
    if retry_after is not None:
        raise HTTPException(
            status_code=429,
            detail="Too many requests, please try again later",
            headers={"Retry-After": str(retry_after)},
        )


# -- Bodies ---------------------------------------------------------

async def read_payload(request: Request, file_field: Optional[str] = None) -> Tuple[Dict[str, Any], Optional[UploadFile]]:
    """Read a JSON object or a form body. Returns (fields, uploaded file or None)."""
    content_type = request.headers.get("content-type", "")
    upload = None

    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        form = await request.form()
        fields: Dict[str, Any] = {}
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if key == file_field and value.filename:
                    upload = value
                elif key != file_field:
                    raise HTTPException(status_code=400, detail=f"Unexpected file field: {key}")
                continue
            fields[key] = value
        return fields, upload

    body = await request.body()
    if not body:
        return {}, None
    try:
        data = json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail="Malformed JSON body")
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return data, None


def validated_body(model: Type[BaseModel], file_field: Optional[str] = None):
    """Dependency factory: validate a JSON or form body against ``model``."""

    async def dependency(request: Request) -> Tuple[BaseModel, Optional[UploadFile]]:
        data, upload = await read_payload(request, file_field)
        try:
            return model.model_validate(data), upload
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=format_validation_error(e.errors()))

    return dependency
