"""
Image upload service.

Validates uploaded images and writes them to the blob store under a
generated name.
"""

from dataclasses import dataclass
from io import BytesIO

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from blogapi.configs.settings import settings
from blogapi.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
)
from blogapi.monitoring import get_logger
from blogapi.services.storage import StorageService, generate_blob_name, get_storage_service

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded image read into memory."""

    filename: str | None
    content_type: str | None
    data: bytes

    @classmethod
    async def from_upload(cls, file: UploadFile | None) -> "ImageUpload | None":
        """Read a multipart file, treating an empty part as no file."""
        if file is None or not file.filename:
            return None
        data = await file.read()
        if not data:
            return None
        return cls(filename=file.filename, content_type=file.content_type, data=data)


class ImageService:
    """
    Service for validating and storing uploaded images.

    Used for post cover images and user profile pictures.
    """

    def __init__(self, storage: StorageService | None = None) -> None:
        self.storage = storage or get_storage_service()
        self.max_size_bytes = settings.IMAGE_MAX_SIZE_MB * 1024 * 1024
        self.allowed_types = settings.IMAGE_ALLOWED_TYPES

    def validate_content_type(self, content_type: str | None) -> None:
        """
        Validate the content type of the uploaded file.

        Raises:
            UnsupportedImageTypeError: If content type is not allowed
        """
        if not content_type or content_type not in self.allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.allowed_types,
            )

    def validate_file_size(self, file_data: bytes) -> None:
        """
        Validate the size of the uploaded file.

        Raises:
            ImageTooLargeError: If file exceeds maximum size
        """
        actual_size = len(file_data)
        if actual_size > self.max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.IMAGE_MAX_SIZE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    def validate_image_content(self, file_data: bytes) -> None:
        """
        Validate that the bytes decode as an image.

        Raises:
            InvalidImageError: If file is not a valid image
        """
        try:
            with Image.open(BytesIO(file_data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            mssg = f"Invalid or corrupted image file: {e!s}"
            raise InvalidImageError(mssg) from e

    def validate(self, upload: ImageUpload) -> None:
        """Run every image check, cheapest first."""
        self.validate_content_type(upload.content_type)
        self.validate_file_size(upload.data)
        self.validate_image_content(upload.data)

    async def store(self, upload: ImageUpload) -> str:
        """
        Validate an image and write it to the blob store.

        Args:
            upload: Image read from the request

        Returns:
            str: Generated blob name

        Raises:
            UploadError: If validation or the write fails
        """
        self.validate(upload)
        return await self.storage.save(generate_blob_name(upload.filename), upload.data)

    async def discard(self, name: str | None) -> None:
        """
        Delete a stored blob, ignoring names that are not ours to delete.

        Cleanup failures are logged and not raised; callers run this after
        their outcome is already decided.
        """
        if not name or name == settings.DEFAULT_PROFILE_PICTURE:
            return
        try:
            await self.storage.delete(name)
        except (OSError, StorageError):
            logger.exception(f"Failed to delete blob {name}")
