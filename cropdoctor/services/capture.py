"""
Capture boundary: turns an uploaded file into an ImageRef.

Anything that is not a usable image raises CaptureUnavailable, so the
workflow never sees the capture and stays in the capture phase.
"""
import logging
from io import BytesIO
from typing import Optional

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from cropdoctor.core.config import settings
from cropdoctor.core.exceptions import CaptureUnavailable
from cropdoctor.models.workflow import ImageRef

logger = logging.getLogger(__name__)


def _safe_filename(name: Optional[str]) -> str:
    """Sanitize filename to prevent path traversal."""
    name = name or ""
    for ch in '<>:"/\\|?*':
        name = name.replace(ch, "_")
    return name.strip() or "capture"


def image_ref_from_bytes(data: bytes, filename: Optional[str], content_type: Optional[str]) -> ImageRef:
    ctype = (content_type or "").lower()
    if ctype not in set(settings.ALLOWED_MIME):
        raise CaptureUnavailable(f"Unsupported file type: {ctype or 'unknown'}")

    fname = _safe_filename(filename)
    if not data:
        raise CaptureUnavailable("No image data received")

    max_bytes = settings.MAX_IMAGE_MB * 1024 * 1024
    if len(data) > max_bytes:
        raise CaptureUnavailable(f"File {fname} exceeds {settings.MAX_IMAGE_MB}MB")

    try:
        with Image.open(BytesIO(data)) as im:
            width, height = im.size
    except (UnidentifiedImageError, OSError):
        raise CaptureUnavailable(f"File {fname} is not a readable image")

    return ImageRef(
        filename=fname,
        content_type=ctype,
        size_bytes=len(data),
        width=width,
        height=height,
    )


async def image_ref_from_upload(upload: Optional[UploadFile]) -> ImageRef:
    if upload is None:
        raise CaptureUnavailable("No image provided")
    data = await upload.read()
    ref = image_ref_from_bytes(data, upload.filename, upload.content_type)
    logger.info(f"Captured {ref.filename} ({ref.width}x{ref.height}, {ref.size_bytes} bytes)")
    return ref
