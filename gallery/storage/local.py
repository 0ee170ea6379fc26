from typing import List
import base64
import binascii
import logging
import os
import time
from ..core.errors import ErrorKind, ImageServiceError
from ..core.models import ImageListing, UploadRequest
from .naming import compose_filename
from .sniff import sniff_extension

"""Filesystem-backed storage for uploaded images.

The directory is the only source of truth: listings are derived from it on
every call and nothing about an upload is kept besides the file itself.
"""

logger = logging.getLogger(__name__)

LISTING_DESCRIPTION = "Uploaded image"
PUBLIC_PREFIX = "/uploads/"


def _decode_image(data_base64: str) -> bytes:
    # line breaks from wrapped encoders are skipped, anything else must be strict
    unwrapped = data_base64.replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(unwrapped, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.warning("Error decoding base64 image: %s", e)
        raise ImageServiceError(ErrorKind.INVALID_IMAGE_ENCODING) from e


class ImageStore:
    """Uploads and listings bound to a single storage directory."""

    def __init__(self, upload_dir: str):
        self.upload_dir = upload_dir

    def ensure_directory(self) -> None:
        os.makedirs(self.upload_dir, mode=0o755, exist_ok=True)

    def save_upload(self, request: UploadRequest) -> str:
        """Decode, name and write an uploaded image. Returns the stored filename.

        Nothing touches the disk until every validation step has passed.
        Filenames are not checked for existence, so two uploads with the same
        title in the same second end up as one file.
        """
        if not request.image:
            raise ImageServiceError(ErrorKind.MISSING_IMAGE_DATA)

        data_bytes = _decode_image(request.image)
        extension = sniff_extension(data_bytes)
        filename = compose_filename(request.title, extension, int(time.time()))
        path = os.path.join(self.upload_dir, filename)

        try:
            with open(path, "wb") as f:
                f.write(data_bytes)
        except (OSError, ValueError) as e:
            logger.error("Error saving file %s: %s", path, e)
            raise ImageServiceError(ErrorKind.STORAGE_WRITE_FAILURE) from e

        logger.info(
            "Image uploaded successfully: %s (Title: %s, Description: %s)",
            filename,
            request.title,
            request.description,
        )
        return filename

    def list_images(self, base_url: str = "") -> List[ImageListing]:
        """Project every regular file in the directory into an ImageListing.

        Entries come back sorted by name. Titles are the filename without its
        extension; the submitted title and description are never stored.
        """
        try:
            with os.scandir(self.upload_dir) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.error("Error reading uploads directory %s: %s", self.upload_dir, e)
            raise ImageServiceError(ErrorKind.DIRECTORY_READ_FAILURE) from e

        items: List[ImageListing] = []
        for entry in entries:
            try:
                if entry.is_dir():
                    continue
                info = entry.stat()
            except OSError as e:
                # removed between scandir and stat
                logger.warning("Error getting file info for %s: %s", entry.name, e)
                continue

            items.append(
                ImageListing(
                    name=entry.name,
                    size=info.st_size,
                    upload_time=int(info.st_mtime),
                    title=os.path.splitext(entry.name)[0],
                    description=LISTING_DESCRIPTION,
                    url=f"{base_url.rstrip('/')}{PUBLIC_PREFIX}{entry.name}",
                )
            )
        return items
