"""
LocalPros Backend — Stored File Route
=======================================

What:  Serves uploaded images (profile pictures and portfolio photos).
Who:   <Image> components in the app that reference `/api/files/...` URLs.

Security:
    - paths resolve relative to STORAGE_ROOT and may not escape it (400)
    - only files that exist are served (404)
"""

import mimetypes

from fastapi import APIRouter
from fastapi.responses import FileResponse

from localpros.schemas.common import ErrorResponse
from localpros.services.file_service import file_service

router = APIRouter(prefix="/api", tags=["Files"])


@router.get(
    "/files/{file_path:path}",
    summary="Serve uploaded image files",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Invalid path", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_file(file_path: str) -> FileResponse:
    full_path = file_service.resolve_path(file_path)
    media_type, _ = mimetypes.guess_type(full_path.name)
    return FileResponse(
        path=str(full_path),
        media_type=media_type or "application/octet-stream",
        headers={"Cache-Control": "public, max-age=86400"},
    )
