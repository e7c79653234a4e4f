from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from chamber import schemas
from chamber.api import deps
from chamber.models.notice import Notice
from chamber.services.realtime import Broadcaster
from chamber.services.storage import UploadError, UploadStorage

logger = logging.getLogger(__name__)

router = APIRouter()

PUBLIC_CACHE_CONTROL = "public, max-age=300"


def _store_pdf(storage: UploadStorage, upload: Optional[UploadFile]) -> Optional[dict]:
    if upload is None:
        return None
    try:
        return storage.save_upload(upload, "pdfFile").as_pdf_file()
    except UploadError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _stored_filename(notice: Notice) -> Optional[str]:
    return (notice.pdf_file or {}).get("filename")


# ========== PUBLIC ==========

@router.get("", response_model=List[schemas.Notice])
def read_notices(response: Response, db: Session = Depends(deps.get_db)) -> Any:
    """Active notices, newest first."""
    response.headers["Cache-Control"] = PUBLIC_CACHE_CONTROL
    return (
        db.query(Notice)
        .filter(Notice.is_active.is_(True))
        .order_by(Notice.created_at.desc(), Notice.id.desc())
        .all()
    )


# ========== ADMIN ==========

@router.get("/admin", response_model=List[schemas.Notice])
def read_all_notices(
    db: Session = Depends(deps.get_db),
    _: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    """Every notice, including deactivated ones."""
    return db.query(Notice).order_by(Notice.created_at.desc(), Notice.id.desc()).all()


@router.post("", response_model=schemas.NoticeEnvelope, status_code=201)
def create_notice(
    *,
    db: Session = Depends(deps.get_db),
    storage: UploadStorage = Depends(deps.get_storage),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    claims: schemas.TokenClaims = Depends(deps.require_admin),
    body=Depends(deps.validated_body(schemas.NoticeCreate, file_field="pdfFile")),
) -> Any:
    """Create a notice from JSON or multipart (optional ``pdfFile`` part)."""
    notice_in, upload = body
    pdf_file = _store_pdf(storage, upload)

    notice = Notice(
        title=notice_in.title,
        content=notice_in.content,
        priority=notice_in.priority,
        author=claims.email,
        pdf_file=pdf_file,
    )
    db.add(notice)
    try:
        db.commit()
    except Exception:
        db.rollback()
        if pdf_file:
            storage.delete(pdf_file["filename"])
        raise
    db.refresh(notice)
    logger.info(f"Notice {notice.id} created by {claims.email}")

    broadcaster.publish("notice-created", schemas.to_event(schemas.Notice, notice))
    return {"message": "Notice created successfully", "notice": notice}


@router.put("/{id}", response_model=schemas.NoticeEnvelope)
def update_notice(
    id: int,
    *,
    db: Session = Depends(deps.get_db),
    storage: UploadStorage = Depends(deps.get_storage),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    _: schemas.TokenClaims = Depends(deps.require_admin),
    body=Depends(deps.validated_body(schemas.NoticeUpdate, file_field="pdfFile")),
) -> Any:
    """Partial update; only supplied fields change. A new ``pdfFile`` replaces the old one."""
    notice_in, upload = body
    notice = db.query(Notice).filter(Notice.id == id).first()
    if not notice:
        raise HTTPException(status_code=404, detail="Notice not found")

    for field, value in notice_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(notice, field, value)

    old_filename = None
    pdf_file = _store_pdf(storage, upload)
    if pdf_file:
        old_filename = _stored_filename(notice)
        notice.pdf_file = pdf_file

    try:
        db.commit()
    except Exception:
        db.rollback()
        if pdf_file:
            storage.delete(pdf_file["filename"])
        raise
    db.refresh(notice)
    if old_filename:
        storage.delete(old_filename)

    broadcaster.publish("notice-updated", schemas.to_event(schemas.Notice, notice))
    return {"message": "Notice updated successfully", "notice": notice}


@router.delete("/{id}", response_model=schemas.Message)
def delete_notice(
    id: int,
    *,
    db: Session = Depends(deps.get_db),
    storage: UploadStorage = Depends(deps.get_storage),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    _: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    """Hard delete, including the attached file."""
    notice = db.query(Notice).filter(Notice.id == id).first()
    if not notice:
        raise HTTPException(status_code=404, detail="Notice not found")

    filename = _stored_filename(notice)
    db.delete(notice)
    db.commit()
    if filename:
        storage.delete(filename)

    broadcaster.publish("notice-deleted", {"id": id})
    return {"message": "Notice deleted successfully"}
