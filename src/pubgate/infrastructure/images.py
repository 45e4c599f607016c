"""Image I/O — metadata, spec checks, and blur placeholders via Pillow.

Remote sources (``http://`` / ``https://``) are fetched with requests;
everything else is read from disk.
"""

from __future__ import annotations

import base64
import math
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import TYPE_CHECKING

import requests
from PIL import Image, ImageFilter, ImageOps, UnidentifiedImageError

from pubgate.domain.issues import ValidationIssue
from pubgate.domain.types import Category

if TYPE_CHECKING:
    from pubgate.config.guidelines import ImageSpec

_JPEG_FORMATS = frozenset({"jpeg", "jpg", "mpo"})


@dataclass(frozen=True)
class ImageMetadata:
    """Measured properties of an image file."""

    width: int
    height: int
    format: str
    size_kb: int

    @property
    def aspect_ratio(self) -> str:
        divisor = math.gcd(self.width, self.height) or 1
        return f"{self.width // divisor}:{self.height // divisor}"


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_image(source: str | Path, *, timeout: float = 10.0) -> bytes:
    """Raw bytes of an image from a URL or a local path.

    Raises:
        FileNotFoundError: If a local file does not exist.
        requests.RequestException: If a remote fetch fails.
    """
    if isinstance(source, str) and is_remote(source):
        response = requests.get(source, timeout=timeout)
        response.raise_for_status()
        return response.content

    path = Path(source)
    if not path.is_file():
        msg = f"Image file not found: {path}"
        raise FileNotFoundError(msg)
    return path.read_bytes()


def get_image_metadata(source: Path | bytes) -> ImageMetadata:
    """Dimensions, format and rounded size of an image on disk or in memory.

    Raises:
        OSError: If the file cannot be read or is not an image.
    """
    if isinstance(source, bytes):
        size_kb = round(len(source) / 1024)
        fp: Path | BytesIO = BytesIO(source)
    else:
        size_kb = round(source.stat().st_size / 1024)
        fp = source
    with Image.open(fp) as img:
        width, height = img.size
        fmt = (img.format or "unknown").lower()
    return ImageMetadata(width=width, height=height, format=fmt, size_kb=size_kb)


def validate_image_spec(
    source: Path | bytes, spec: ImageSpec, *, field: str
) -> list[ValidationIssue]:
    """Check an image against its role's spec.

    Wrong dimensions are errors; an oversized file or a non-JPEG format
    are warnings.  An unreadable image is reported as a warning so a
    single bad asset never fails an otherwise valid document.
    """
    try:
        meta = get_image_metadata(source)
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as exc:
        return [
            ValidationIssue.warning(
                Category.IMAGES,
                f"Failed to validate {field} image: {exc}",
                field=field,
                suggestion="Ensure the image file is a valid JPEG",
            )
        ]

    issues: list[ValidationIssue] = []
    if (meta.width, meta.height) != (spec.width, spec.height):
        issues.append(
            ValidationIssue.error(
                Category.IMAGES,
                f"Incorrect dimensions: {meta.width}x{meta.height} "
                f"(expected {spec.width}x{spec.height})",
                field=field,
                suggestion=f"Resize the image to {spec.width}x{spec.height}",
            )
        )
    if meta.size_kb > spec.max_size_kb:
        issues.append(
            ValidationIssue.warning(
                Category.IMAGES,
                f"Large file size: {meta.size_kb}KB (recommended max: {spec.max_size_kb}KB)",
                field=field,
                suggestion="Consider optimizing the image to reduce file size",
            )
        )
    if meta.format not in _JPEG_FORMATS:
        issues.append(
            ValidationIssue.warning(
                Category.IMAGES,
                f"Non-JPEG format: {meta.format} (JPEG recommended for consistency)",
                field=field,
                suggestion="Convert the image to JPEG",
            )
        )
    return issues


def generate_blur_placeholder(data: bytes, *, size: int = 10, quality: int = 50) -> str:
    """Tiny, heavily blurred JPEG preview as a ``data:`` URL.

    Raises:
        OSError: If *data* is not a decodable image.
    """
    with Image.open(BytesIO(data)) as img:
        thumb = ImageOps.fit(img.convert("RGB"), (size, size))
    blurred = thumb.filter(ImageFilter.GaussianBlur(1))
    buf = BytesIO()
    blurred.save(buf, format="JPEG", quality=quality)
    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"
