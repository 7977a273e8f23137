"""
Foodies Backend — Recipe Image Storage Service
================================================

What:  Validates, stores, and removes recipe thumbnail images.
Why:   Uploads are the only place user bytes touch the disk; every check
       lives here so routes and RecipeService never handle raw paths.
How:   Extension allow-list, size limit, Pillow decode of the actual bytes,
       then an async write to a date-organized directory with a UUID name.
Who:   RecipeService.create_recipe stores images; the recipes route removes
       them after a delete; the files route serves them from storage_root.

Security Model:
    1. Extension check:  fast rejection of obviously wrong uploads
    2. Size check:       Content-Length first, then the actual byte count
    3. Content check:    Pillow must recognize the bytes as PNG, JPEG or WEBP
                         and the detected format must agree with the extension
    4. UUID filename:    no user input ever reaches the file system path
"""

import io
import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
from PIL import Image, UnidentifiedImageError

from foodies.config import settings
from foodies.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

# Pillow format name → extensions that may carry it
ALLOWED_FORMATS = {
    "PNG": {".png"},
    "JPEG": {".jpg", ".jpeg"},
    "WEBP": {".webp"},
}

ALLOWED_EXTENSIONS = {ext for exts in ALLOWED_FORMATS.values() for ext in exts}

# Relative directory under storage_root for recipe images
RECIPE_IMAGE_DIR = "recipes"

# URL prefix under which routes/files.py serves storage_root
PUBLIC_URL_PREFIX = "/api/files"


class FileService:
    """
    Manages the recipe image lifecycle.

    Directory Structure:
        storage/
        └── recipes/
            └── 2024/
                └── 05/
                    └── 17/
                        └── 3f2c...e1.jpg
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_extension(self, filename: str) -> str:
        """Returns the lowercase extension or raises ValidationError."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="thumb",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Reject empty files and files above settings.max_file_size.

        The Content-Length check short-circuits before looking at the bytes;
        the actual size check catches clients that under-report.
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(message="Uploaded image is empty", field="thumb")

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"Image is too large. Maximum size is {max_mb:.0f}MB.",
                field="thumb",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"Image is too large ({actual_size / (1024 * 1024):.1f}MB). Maximum size is {max_mb:.0f}MB.",
                field="thumb",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_image_content(self, content: bytes, extension: str) -> str:
        """
        Decode the bytes with Pillow and check the detected format.

        Returns:
            Pillow format name ("PNG", "JPEG", "WEBP")

        Raises:
            ValidationError: not an image (including headers declaring more
                pixels than Image.MAX_IMAGE_PIXELS allows), an unsupported
                format, or a format that does not match the file extension
        """
        try:
            with Image.open(io.BytesIO(content)) as image:
                image_format = image.format
                image.verify()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
            raise ValidationError(
                message="Uploaded file is not a valid image",
                field="thumb",
                context={"reason": type(e).__name__},
            )

        allowed_exts = ALLOWED_FORMATS.get(image_format or "")
        if not allowed_exts:
            raise ValidationError(
                message=f"Image format '{image_format}' is not supported. Use PNG, JPEG or WEBP.",
                field="thumb",
                context={"detected_format": image_format},
            )
        if extension not in allowed_exts:
            raise ValidationError(
                message=f"File extension '{extension}' does not match image content ({image_format})",
                field="thumb",
                context={"detected_format": image_format, "extension": extension},
            )
        return image_format

    def _generate_storage_path(self, extension: str) -> Tuple[Path, str]:
        """Returns (absolute_path, relative_path) for recipes/YYYY/MM/DD/<uuid><ext>."""
        now = datetime.now(timezone.utc)
        relative_path = f"{RECIPE_IMAGE_DIR}/{now.strftime('%Y/%m/%d')}/{uuid.uuid4()}{extension}"
        return self.storage_root / relative_path, relative_path

    async def store_file(self, content: bytes, extension: str) -> Tuple[str, str]:
        """
        Write validated bytes to disk without blocking the event loop.

        Raises:
            FileStorageError if directory creation or the write fails.
        """
        absolute_path, relative_path = self._generate_storage_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save the recipe image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("Image stored: %s (%d bytes)", relative_path, len(content))
        return str(absolute_path), relative_path

    async def validate_and_store(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> Tuple[str, str]:
        """
        Full pipeline, cheapest check first.

        Returns:
            (absolute_path, relative_path)
        """
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        self.validate_image_content(content, ext)
        return await self.store_file(content, ext)

    def public_url(self, relative_path: str) -> str:
        return f"{PUBLIC_URL_PREFIX}/{relative_path}"

    def path_from_public_url(self, url: Optional[str]) -> Optional[str]:
        """
        Map a URL produced by public_url() back to an absolute path.

        Returns None for URLs this service did not produce (external links)
        or that would resolve outside storage_root.
        """
        prefix = f"{PUBLIC_URL_PREFIX}/"
        if not url or not url.startswith(prefix):
            return None
        candidate = (self.storage_root / url[len(prefix):]).resolve()
        if not candidate.is_relative_to(self.storage_root):
            return None
        return str(candidate)

    async def cleanup_file(self, file_path: str) -> None:
        """
        Best-effort removal of a stored image.

        Called after a failed recipe insert and after a recipe is deleted.
        A leftover file is not a user-facing error, so failures are logged
        and swallowed.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Removed image: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to remove image %s: %s", file_path, str(e))


file_service = FileService()
