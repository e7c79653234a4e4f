from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from chamber import schemas
from chamber.api import deps
from chamber.models.form_submission import FormSubmission
from chamber.services.storage import UploadError, UploadStorage

logger = logging.getLogger(__name__)

router = APIRouter()


def _save_submission(db: Session, form_in: schemas.FormSubmissionCreate, pdf_file: Optional[dict] = None) -> FormSubmission:
    submission = FormSubmission(**form_in.model_dump(), pdf_file=pdf_file)
    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info(f"Form submission {submission.id} received (category={submission.category})")
    return submission


@router.post("/submit", response_model=schemas.FormSubmissionEnvelope, status_code=201)
def submit_form(
    *,
    db: Session = Depends(deps.get_db),
    form_in: schemas.FormSubmissionCreate,
) -> Any:
    submission = _save_submission(db, form_in)
    return {"message": "Form submitted successfully", "submission": submission}


@router.post("/submit-with-file", response_model=schemas.FormSubmissionEnvelope, status_code=201)
def submit_form_with_file(
    *,
    db: Session = Depends(deps.get_db),
    storage: UploadStorage = Depends(deps.get_storage),
    body=Depends(deps.validated_body(schemas.FormSubmissionCreate, file_field="pdfFile")),
) -> Any:
    """Multipart submission with an optional ``pdfFile`` attachment."""
    form_in, upload = body
    pdf_file = None
    if upload is not None:
        try:
            pdf_file = storage.save_upload(upload, "pdfFile").as_pdf_file()
        except UploadError as e:
            raise HTTPException(status_code=400, detail=str(e))

    try:
        submission = _save_submission(db, form_in, pdf_file)
    except Exception:
        db.rollback()
        if pdf_file:
            storage.delete(pdf_file["filename"])
        raise
    return {"message": "Form submitted successfully", "submission": submission}


@router.get("/submissions", response_model=List[schemas.FormSubmission])
def read_submissions(
    db: Session = Depends(deps.get_db),
    _: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    return db.query(FormSubmission).order_by(FormSubmission.submitted_at.desc(), FormSubmission.id.desc()).all()


@router.delete("/submissions/{id}", response_model=schemas.Message)
def delete_submission(
    id: int,
    *,
    db: Session = Depends(deps.get_db),
    storage: UploadStorage = Depends(deps.get_storage),
    _: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    submission = db.query(FormSubmission).filter(FormSubmission.id == id).first()
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")

    filename = (submission.pdf_file or {}).get("filename")
    db.delete(submission)
    db.commit()
    if filename:
        storage.delete(filename)
    return {"message": "Submission deleted successfully"}
