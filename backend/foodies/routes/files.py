"""
Foodies Backend — Stored File Route
=====================================

What:  GET /api/files/{path} serves recipe images written by FileService.
Why:   storage_root sits outside any static web root; serving through the
       API keeps path checks and cache headers in one place.

Security:
    The requested path is resolved against storage_root and rejected if it
    escapes it (../../etc/passwd), so only files under storage_root are ever
    read.
"""

import mimetypes

from fastapi import APIRouter
from fastapi.responses import FileResponse

from foodies.exceptions import NotFoundError, ValidationError
from foodies.schemas.common import ErrorResponse
from foodies.services.file_service import file_service

router = APIRouter(prefix="/api", tags=["Files"])


@router.get(
    "/files/{file_path:path}",
    summary="Serve an uploaded recipe image",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Invalid file path", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_file(file_path: str) -> FileResponse:
    storage_root = file_service.storage_root
    full_path = (storage_root / file_path).resolve()

    if not full_path.is_relative_to(storage_root):
        raise ValidationError(message="Invalid file path", field="file_path")

    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)

    media_type = mimetypes.guess_type(full_path.name)[0] or "application/octet-stream"
    # Stored names are UUIDs and never overwritten, so the content is immutable
    return FileResponse(
        path=str(full_path),
        media_type=media_type,
        headers={"Cache-Control": "public, max-age=86400"},
    )
