import logging
import os
import time
from dataclasses import dataclass
from typing import Optional, Tuple

from app.errors import InvalidArgument
from app.settings import Settings, settings

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = ("jpg", "jpeg", "png", "webp")


@dataclass
class UploadedImage:
    filename: str
    content: bytes


class MediaService:
    def __init__(self, repo, settings_obj: Settings = settings):
        self.repo = repo
        self.settings = settings_obj

    def upload(self, image: UploadedImage) -> str:
        """
        Store an uploaded image and return the public URL it is served from.
        """
        extension = os.path.splitext(image.filename or "")[1].lower().lstrip(".")
        if extension not in ALLOWED_FORMATS:
            raise InvalidArgument(
                "Unsupported image format",
                details=f"Allowed formats: {', '.join(ALLOWED_FORMATS)}",
            )
        if not image.content:
            raise InvalidArgument("Uploaded image is empty")
        if len(image.content) > self.settings.MEDIA_MAX_BYTES:
            raise InvalidArgument(
                "Uploaded image is too large",
                details=f"Limit is {self.settings.MEDIA_MAX_BYTES} bytes",
            )

        public_name = f"blog_{int(time.time() * 1000)}.{extension}"
        doc = self.repo.store(
            public_name,
            image.content,
            get_content_type_from_filename(public_name),
            self.settings.MEDIA_FOLDER,
        )
        logger.info(f"Stored image {image.filename} as {doc['_id']}/{public_name}")
        return f"{self.settings.BLOG_API_URL}/images/{doc['_id']}/{public_name}"

    def fetch(
        self, media_id: str, filename: str
    ) -> Tuple[Optional[bytes], Optional[str]]:
        """
        Retrieve a stored image and its content type
        """
        doc = self.repo.get_media(media_id)
        if not doc or doc.get("filename") != filename:
            logger.warning(f"Image not found: {media_id}/{filename}")
            return None, None

        image_data = self.repo.read(doc, filename)
        if not image_data:
            logger.warning(f"No image data found for: {media_id}/{filename}")
            return None, None

        # Verify we have the complete image data
        expected_size = doc.get("size")
        if expected_size and len(image_data) != expected_size:
            logger.warning(
                f"Image size mismatch for {media_id}/{filename}. Expected: {expected_size}, Got: {len(image_data)}"
            )
            return None, None

        return image_data, get_content_type_from_filename(filename)


def get_content_type_from_filename(filename: str) -> str:
    """
    Determine content type from file extension
    """
    filename = filename.lower()
    if filename.endswith((".jpg", ".jpeg")):
        return "image/jpeg"
    elif filename.endswith(".png"):
        return "image/png"
    elif filename.endswith(".webp"):
        return "image/webp"
    else:
        return "application/octet-stream"
