"""
Menu image storage - the public bucket behind logos, banners and item photos.

Bucket policy (coarser than the table policy):
- Anyone can read objects in the bucket (public URLs)
- Any authenticated caller can upload, replace or delete objects
- Objects must be JPEG, PNG, WebP or GIF and at most MENU_IMAGE_MAX_BYTES

Objects are stored on Django's default storage under the bucket prefix.
"""

import logging
import secrets
import time
from dataclasses import dataclass

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import UploadedFile

from apps.web.core.auth import Caller
from apps.web.core.exceptions import AccessDenied, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

# Restaurant and item fields an uploaded image can be attached to
IMAGE_FIELDS = ("logo_url", "banner_image_url", "image_url")


@dataclass(frozen=True)
class StoredImage:
    """An object in the image bucket."""

    name: str
    url: str


def _bucket() -> str:
    return str(settings.MENU_IMAGE_BUCKET)


def _require_authenticated(caller: Caller, action: str) -> None:
    if caller.is_anonymous:
        logger.warning("Access denied: image %s for %s", action, caller)
        raise AccessDenied()


def validate_image(upload: UploadedFile) -> None:
    """
    Check an upload against the bucket limits.

    Raises:
        ValidationFailed: if the file is too large or not an allowed image type
    """
    allowed = settings.MENU_IMAGE_CONTENT_TYPES
    if upload.content_type not in allowed:
        raise ValidationFailed(
            "Please upload an image file",
            details=[
                {
                    "field": "file",
                    "message": f"Content type must be one of {', '.join(allowed)}",
                }
            ],
        )

    max_bytes = settings.MENU_IMAGE_MAX_BYTES
    if upload.size is None or upload.size > max_bytes:
        raise ValidationFailed(
            "Image is too large",
            details=[{"field": "file", "message": f"Maximum size is {max_bytes} bytes"}],
        )


def _object_name(field: str, content_type: str) -> str:
    """Generate a collision-resistant object name: {bucket}/{field}-{random}-{ms}.{ext}"""
    extension = EXTENSIONS.get(content_type, "bin")
    stamp = int(time.time() * 1000)
    return f"{_bucket()}/{field}-{secrets.token_hex(6)}-{stamp}.{extension}"


def _check_object_name(name: str) -> str:
    """Reject names outside the bucket."""
    if not name.startswith(f"{_bucket()}/") or ".." in name.split("/"):
        raise NotFound("Image not found")
    return name


def public_url(name: str) -> str:
    """Public URL of an object. Reads are unconditional."""
    return str(default_storage.url(_check_object_name(name)))


def upload_image(caller: Caller, upload: UploadedFile, field: str = "image_url") -> StoredImage:
    """
    Store a new image.

    Args:
        caller: Must be authenticated
        upload: The uploaded file
        field: Which image field the upload is for; used as the name prefix

    Returns:
        StoredImage with the object name and its public URL
    """
    _require_authenticated(caller, "upload")
    if field not in IMAGE_FIELDS:
        raise ValidationFailed(
            "Unknown image field",
            details=[{"field": "field", "message": f"Must be one of {', '.join(IMAGE_FIELDS)}"}],
        )
    validate_image(upload)

    name = default_storage.save(_object_name(field, str(upload.content_type)), upload)
    logger.info("Uploaded image %s (%d bytes) for %s", name, upload.size, caller)
    return StoredImage(name=name, url=public_url(name))


def replace_image(caller: Caller, name: str, upload: UploadedFile) -> StoredImage:
    """
    Overwrite an existing object with new content under the same name.

    The upload must have the content type the name's extension implies.
    If writing the new content fails, the previous content is put back.
    """
    _require_authenticated(caller, "update")
    _check_object_name(name)
    if not default_storage.exists(name):
        raise NotFound("Image not found")
    validate_image(upload)

    extension = EXTENSIONS.get(str(upload.content_type))
    if not name.endswith(f".{extension}"):
        raise ValidationFailed(
            "Image type does not match",
            details=[{"field": "file", "message": f"Upload must be the same type as {name}"}],
        )

    with default_storage.open(name, "rb") as existing:
        previous = existing.read()

    default_storage.delete(name)
    try:
        stored = default_storage.save(name, upload)
    except Exception:
        logger.exception("Replacing image %s failed, restoring previous content", name)
        default_storage.save(name, ContentFile(previous))
        raise

    logger.info("Replaced image %s for %s", stored, caller)
    return StoredImage(name=stored, url=public_url(stored))


def delete_image(caller: Caller, name: str) -> None:
    """Remove an object from the bucket."""
    _require_authenticated(caller, "delete")
    _check_object_name(name)
    if not default_storage.exists(name):
        raise NotFound("Image not found")

    default_storage.delete(name)
    logger.info("Deleted image %s for %s", name, caller)
