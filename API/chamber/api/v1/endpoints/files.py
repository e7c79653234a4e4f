from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from chamber.api import deps
from chamber.services.storage import UploadStorage

router = APIRouter()

FILE_CACHE_CONTROL = "public, max-age=86400"


@router.get("/{filename}")
def read_file(filename: str, storage: UploadStorage = Depends(deps.get_storage)) -> FileResponse:
    """Serve a stored upload by its generated name."""
    if not storage.exists(filename):
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(storage.path_for(filename), headers={"Cache-Control": FILE_CACHE_CONTROL})
