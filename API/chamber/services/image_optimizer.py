"""
Resize + recompress uploaded images in place.

- Fits inside max_width x max_height, keeping aspect ratio, never upscaling
- JPEG: progressive, optimized, fixed quality
- PNG: optimized, compression level 9
- WebP: fixed quality, slowest/best method
Any failure leaves the original file untouched.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("JPEG", "PNG", "WEBP")


@dataclass
class OptimizationResult:
    success: bool
    original_size: int = 0
    optimized_size: int = 0
    width: int = 0
    height: int = 0
    error: Optional[str] = None

    @property
    def saved_percent(self) -> float:
        if not self.original_size:
            return 0.0
        return round((self.original_size - self.optimized_size) / self.original_size * 100, 1)


def _format_bytes(num: int) -> str:
    size = float(num)
    for unit in ("Bytes", "KB", "MB"):
        if size < 1024:
            return f"{round(size, 2)} {unit}"
        size /= 1024
    return f"{round(size, 2)} GB"


class ImageOptimizer:
    def __init__(self, max_width: int = 1920, max_height: int = 1080, quality: int = 90):
        self.max_width = max_width
        self.max_height = max_height
        self.quality = quality

    def calculate_dimensions(self, width: int, height: int) -> Tuple[int, int]:
        """Largest size that fits the bounds with the same aspect ratio (no upscaling)."""
        if width <= self.max_width and height <= self.max_height:
            return width, height
        scale = min(self.max_width / width, self.max_height / height)
        return max(1, round(width * scale)), max(1, round(height * scale))

    def _save_options(self, fmt: str) -> dict:
        if fmt == "JPEG":
            return {"quality": self.quality, "optimize": True, "progressive": True}
        if fmt == "PNG":
            return {"optimize": True, "compress_level": 9}
        return {"quality": self.quality, "method": 6}

    def optimize(self, path: Path) -> OptimizationResult:
        path = Path(path)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            original_size = path.stat().st_size
            with Image.open(path) as img:
                fmt = (img.format or "").upper()
                if fmt not in SUPPORTED_FORMATS:
                    return OptimizationResult(success=False, original_size=original_size,
                                              error=f"Unsupported image format: {fmt or 'unknown'}")

                logger.info(f"Optimizing image {path.name}: {img.width}x{img.height}, {_format_bytes(original_size)}")
                img = ImageOps.exif_transpose(img)
                width, height = self.calculate_dimensions(img.width, img.height)
                if (width, height) != img.size:
                    img = img.resize((width, height), Image.LANCZOS)
                if fmt == "JPEG" and img.mode not in ("RGB", "L"):
                    img = img.convert("RGB")
                img.save(tmp_path, format=fmt, **self._save_options(fmt))

            os.replace(tmp_path, path)
            optimized_size = path.stat().st_size
            result = OptimizationResult(
                success=True,
                original_size=original_size,
                optimized_size=optimized_size,
                width=width,
                height=height,
            )
            logger.info(f"Optimized {path.name}: {width}x{height}, {_format_bytes(optimized_size)} "
                        f"(saved {result.saved_percent}%)")
            return result
        except Exception as e:
            logger.warning(f"Image optimization failed for {path.name}, keeping original: {e}")
            if tmp_path.exists():
                tmp_path.unlink()
            return OptimizationResult(success=False, error=str(e))
