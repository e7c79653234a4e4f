"""
Local upload directory.

Files are written under collision-resistant names
(``<field>-<epoch ms>-<random>.<ext>``). Deletion is best-effort: failures
are logged, never raised.
"""
import logging
import os
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
PDF_MIMETYPE = "application/pdf"


class UploadError(ValueError):
    """Rejected upload (type or size); maps to a 400 response."""


def is_pdf_or_image(mimetype: Optional[str]) -> bool:
    mimetype = (mimetype or "").lower()
    return mimetype == PDF_MIMETYPE or mimetype.startswith("image/")


def is_image(mimetype: Optional[str]) -> bool:
    return (mimetype or "").lower().startswith("image/")


@dataclass
class StoredFile:
    filename: str
    original_name: str
    mimetype: str
    size: int
    path: Path

    def as_pdf_file(self) -> Dict[str, Any]:
        """Shape persisted in the ``pdf_file`` JSON column."""
        return {
            "filename": self.filename,
            "original_name": self.original_name,
            "mimetype": self.mimetype,
            "size": self.size,
        }


class UploadStorage:
    def __init__(self, directory: str, max_size: int, public_prefix: str = "/api/files"):
        self.directory = Path(directory)
        self.max_size = max_size
        self.public_prefix = public_prefix.rstrip("/")

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def _unique_name(self, field_name: str, original_name: str) -> str:
        ext = Path(original_name or "").suffix.lower()
        suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"{field_name}-{suffix}{ext}"

    def path_for(self, filename: str) -> Path:
        """Resolve a stored filename; rejects anything that is not a bare name."""
        if not filename or filename != os.path.basename(filename) or filename in (".", ".."):
            raise ValueError(f"Invalid file name: {filename!r}")
        return self.directory / filename

    def url_for(self, filename: str) -> str:
        return f"{self.public_prefix}/{filename}"

    def save(
        self,
        source: BinaryIO,
        original_name: str,
        mimetype: Optional[str],
        field_name: str = "file",
        allowed=is_pdf_or_image,
    ) -> StoredFile:
        if not allowed(mimetype):
            raise UploadError("Only PDF and image files allowed")

        self.ensure_directory()
        filename = self._unique_name(field_name, original_name)
        path = self.directory / filename

        size = 0
        with open(path, "wb") as out:
            while True:
                chunk = source.read(_CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_size:
                    break
                out.write(chunk)

        if size > self.max_size:
            self.delete(filename)
            raise UploadError(f"File too large. Maximum size is {self.max_size // (1024 * 1024)} MB")

        logger.info(f"Stored upload {filename} ({size} bytes, {mimetype})")
        return StoredFile(
            filename=filename,
            original_name=original_name or filename,
            mimetype=(mimetype or "").lower(),
            size=size,
            path=path,
        )

    def save_upload(self, upload: Any, field_name: str, allowed=is_pdf_or_image) -> StoredFile:
        """Store a Starlette/FastAPI UploadFile."""
        upload.file.seek(0)
        return self.save(upload.file, upload.filename or "", upload.content_type, field_name, allowed)

    def delete(self, filename: Optional[str]) -> bool:
        if not filename:
            return False
        try:
            path = self.path_for(filename)
            path.unlink()
            logger.info(f"Deleted stored file {filename}")
            return True
        except FileNotFoundError:
            logger.warning(f"Stored file already gone: {filename}")
        except (OSError, ValueError) as e:
            logger.error(f"Error deleting stored file {filename}: {e}")
        return False

    def exists(self, filename: str) -> bool:
        try:
            return self.path_for(filename).is_file()
        except ValueError:
            return False

