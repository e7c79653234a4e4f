from typing import Any, List
import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from chamber import schemas
from chamber.api import deps
from chamber.models.gallery import GalleryImage
from chamber.services.image_optimizer import ImageOptimizer
from chamber.services.realtime import Broadcaster
from chamber.services.storage import UploadError, UploadStorage, is_image

logger = logging.getLogger(__name__)

router = APIRouter()

PUBLIC_CACHE_CONTROL = "public, max-age=600"


def _gallery_order(query):
    return query.order_by(GalleryImage.order.asc(), GalleryImage.uploaded_at.desc(), GalleryImage.id.desc())


@router.get("", response_model=List[schemas.GalleryImage])
def read_gallery(response: Response, db: Session = Depends(deps.get_db)) -> Any:
    """Active images by manual order, then newest first."""
    response.headers["Cache-Control"] = PUBLIC_CACHE_CONTROL
    return _gallery_order(db.query(GalleryImage).filter(GalleryImage.is_active.is_(True))).all()


@router.get("/admin", response_model=List[schemas.GalleryImage])
def read_all_gallery(
    db: Session = Depends(deps.get_db),
    _: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    return _gallery_order(db.query(GalleryImage)).all()


@router.post("/upload", response_model=schemas.GalleryImageEnvelope, status_code=201)
def upload_image(
    *,
    db: Session = Depends(deps.get_db),
    storage: UploadStorage = Depends(deps.get_storage),
    optimizer: ImageOptimizer = Depends(deps.get_image_optimizer),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    claims: schemas.TokenClaims = Depends(deps.require_admin),
    body=Depends(deps.validated_body(schemas.GalleryImageCreate, file_field="image")),
) -> Any:
    """
    Multipart upload: ``image`` file part plus title, description, altText,
    category and order fields. The image is resized/recompressed in place
    before the row is written; optimization failure keeps the original file.
    """
    image_in, upload = body
    if upload is None:
        raise HTTPException(status_code=400, detail="No image file provided")
    if not is_image(upload.content_type):
        raise HTTPException(status_code=400, detail="Only image files allowed")

    try:
        stored = storage.save_upload(upload, "image", allowed=is_image)
    except UploadError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = optimizer.optimize(stored.path)
    if result.success:
        logger.info(f"Gallery image optimized to {result.width}x{result.height}")

    image = GalleryImage(
        **image_in.model_dump(),
        image_url=storage.url_for(stored.filename),
        uploaded_by=claims.name,
    )
    db.add(image)
    try:
        db.commit()
    except Exception:
        db.rollback()
        storage.delete(stored.filename)
        raise
    db.refresh(image)

    broadcaster.publish("gallery-image-created", schemas.to_event(schemas.GalleryImage, image))
    return {"message": "Image uploaded successfully", "image": image}


@router.put("/{id}", response_model=schemas.GalleryImageEnvelope)
def update_image(
    id: int,
    *,
    db: Session = Depends(deps.get_db),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    _: schemas.TokenClaims = Depends(deps.require_admin),
    image_in: schemas.GalleryImageUpdate,
) -> Any:
    image = db.query(GalleryImage).filter(GalleryImage.id == id).first()
    if not image:
        raise HTTPException(status_code=404, detail="Image not found")

    for field, value in image_in.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(image, field, value)
    db.commit()
    db.refresh(image)

    broadcaster.publish("gallery-image-updated", schemas.to_event(schemas.GalleryImage, image))
    return {"message": "Image updated successfully", "image": image}


@router.delete("/{id}", response_model=schemas.Message)
def delete_image(
    id: int,
    *,
    db: Session = Depends(deps.get_db),
    storage: UploadStorage = Depends(deps.get_storage),
    broadcaster: Broadcaster = Depends(deps.get_broadcaster),
    _: schemas.TokenClaims = Depends(deps.require_admin),
) -> Any:
    """Remove the row and its backing file."""
    image = db.query(GalleryImage).filter(GalleryImage.id == id).first()
    if not image:
        raise HTTPException(status_code=404, detail="Image not found")

    filename = image.filename
    db.delete(image)
    db.commit()
    storage.delete(filename)

    broadcaster.publish("gallery-image-deleted", {"id": id})
    return {"message": "Image deleted successfully"}
