"""Validation for user-supplied files before they reach object storage"""

import logging
from dataclasses import dataclass

from fastapi import HTTPException, UploadFile

from ..config import MAX_UPLOAD_BYTES

logger = logging.getLogger(__name__)

IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}

DOCUMENT_TYPES = {
    "application/pdf": ".pdf",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
}

DANGEROUS_CHARS = ["..", "/", "\\", "<", ">", ":", '"', "|", "?", "*"]


@dataclass
class ValidatedFile:
    data: bytes
    content_type: str
    extension: str


def _check_filename(filename: str) -> None:
    for char in DANGEROUS_CHARS:
        if char in filename:
            logger.warning(f"❌ Dangerous character '{char}' detected in filename: '{filename}'")
            raise HTTPException(
                status_code=400, detail=f"Invalid filename - contains dangerous character '{char}'"
            )
    if len(filename) > 255:
        raise HTTPException(status_code=400, detail="Filename too long - maximum 255 characters")


async def read_upload(
    file: UploadFile,
    allowed_types: dict[str, str],
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> ValidatedFile:
    """
    Read an upload and check its declared type, filename and size.

    Returns the bytes plus the storage extension for the content type.
    Raises HTTPException(400) on anything unacceptable.
    """
    content_type = (file.content_type or "").lower()
    if content_type not in allowed_types:
        allowed = ", ".join(sorted({ext.lstrip(".").upper() for ext in allowed_types.values()}))
        raise HTTPException(
            status_code=400, detail=f"Invalid file type. Allowed types: {allowed}"
        )

    if file.filename:
        _check_filename(file.filename)

    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=(
                f"File size exceeds {max_bytes / (1024 * 1024):.0f}MB limit. "
                f"Your file is {len(data) / (1024 * 1024):.2f}MB."
            ),
        )

    return ValidatedFile(data=data, content_type=content_type, extension=allowed_types[content_type])
