"""
User photo storage on Cloudinary.

Uploads are staged to a local temp file first; the temp file is removed
whether or not the upload succeeds.
"""

import logging
import re
from pathlib import Path
from typing import Optional
from uuid import uuid4

import cloudinary.uploader
from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

from .exceptions import PhotoUploadError

logger = logging.getLogger(__name__)


def stage_upload(uploaded_file: UploadedFile) -> Path:
    """Write an uploaded file to the staging directory and return its path."""
    temp_dir = Path(settings.UPLOAD_TEMP_DIR)
    temp_dir.mkdir(parents=True, exist_ok=True)

    suffix = Path(uploaded_file.name or '').suffix
    path = temp_dir / f"{uuid4().hex}{suffix}"
    with open(path, 'wb') as destination:
        for chunk in uploaded_file.chunks():
            destination.write(chunk)
    return path


def upload_user_photo(uploaded_file: UploadedFile) -> str:
    """
    Upload a user photo and return its secure URL.

    Args:
        uploaded_file: File received in the multipart ``foto`` field

    Returns:
        HTTPS URL of the stored image

    Raises:
        PhotoUploadError: If staging or the Cloudinary upload fails
    """
    path = None
    try:
        path = stage_upload(uploaded_file)
        result = cloudinary.uploader.upload(
            str(path),
            folder=settings.CLOUDINARY_USER_FOLDER,
        )
        return result['secure_url']
    except Exception as e:
        logger.exception("Photo upload failed for %s", uploaded_file.name)
        raise PhotoUploadError(f"No se pudo subir la foto: {e}") from e
    finally:
        if path is not None:
            path.unlink(missing_ok=True)


def extract_public_id(photo_url: Optional[str]) -> Optional[str]:
    """
    Recover the Cloudinary public id from a delivery URL.

    ``https://res.cloudinary.com/demo/image/upload/v1/users/abc123.jpg``
    gives ``users/abc123``.
    """
    if not photo_url:
        return None

    folder = settings.CLOUDINARY_USER_FOLDER
    match = re.search(rf'/{re.escape(folder)}/([^./]+)\.', photo_url)
    if not match:
        return None
    return f"{folder}/{match.group(1)}"


def delete_user_photo(photo_url: Optional[str]) -> bool:
    """
    Remove a previously stored photo.

    Returns True if a destroy call was issued. Failures are logged, not
    raised: the owning record has already moved on to the new photo.
    """
    public_id = extract_public_id(photo_url)
    if not public_id:
        return False

    try:
        cloudinary.uploader.destroy(public_id)
    except Exception:
        logger.exception("Could not delete photo %s", public_id)
        return False

    logger.info("Deleted photo %s", public_id)
    return True
