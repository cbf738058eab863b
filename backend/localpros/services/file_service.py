"""
LocalPros Backend — Image Storage Service
===========================================

What:  Validates, stores, resolves and removes uploaded images (profile
       pictures and portfolio photos).
How:   Extension, size and magic-byte checks, then an async write into a
       date-organized directory under a UUID filename.
Who:   AccountService (profile image), PortfolioService (portfolio batch
       uploads) and the /api/files route that serves stored images.

Security Model:
    1. Extension check:   cheap first rejection (.png .jpg .jpeg .webp)
    2. Size check:        declared and actual size, empty files rejected
    3. MIME type check:   libmagic inspects the header bytes of the content
    4. UUID filename:     no user input ever reaches the file system path
    5. Path resolution:   served paths must stay inside STORAGE_ROOT

Directory Structure:
    storage/
    └── 2024/
        └── 01/
            └── 15/
                ├── a1b2c3d4-5678.jpg
                └── e5f6g7h8-9012.webp

The database stores paths relative to the storage root; clients receive
them as `/api/files/<relative path>` URLs.
"""

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from localpros.config import settings
from localpros.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

FILES_URL_PREFIX = "/api/files"

# Session.info key holding paths to delete after the next commit
PENDING_CLEANUP_KEY = "localpros.pending_file_cleanup"

# ── Allowed File Types ────────────────────────────────────────────────────
ALLOWED_MIME_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/webp": ".webp",
}

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}


def file_url(relative_path: Optional[str]) -> Optional[str]:
    """Public URL of a stored file, or None when nothing is stored."""
    if not relative_path:
        return None
    return f"{FILES_URL_PREFIX}/{relative_path}"


class FileService:
    """
    Manages the upload → validate → store → serve → cleanup lifecycle.

    Lifecycle of an uploaded image:
        1. Route reads the multipart upload → validate_and_store()
        2. Extension check, size check, MIME check
        3. File written to YYYY/MM/DD/<uuid><ext>
        4. Relative path returned and stored on the owning row
        5. Replaced or deleted images are removed after commit (cleanup_after_commit)
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                          If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_extension(self, filename: str) -> str:
        """
        What:    Checks that the file extension is in the allowed list.
        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if extension is not allowed.
        """
        ext = Path(filename or "").suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or 'unknown'}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="file",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Validate file size against the configured maximum.

        The declared Content-Length is checked first; the actual byte count
        is checked too, since clients can misreport it.

        Raises:
            ValidationError for empty or oversized files
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(message="The uploaded file is empty.", field="file")

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image.",
                field="file",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def _detect_mime_type(self, file_content: bytes) -> str:
        import magic

        return magic.from_buffer(file_content[:2048], mime=True)

    def validate_mime_type(self, file_content: bytes, filename: str) -> str:
        """
        Validate the actual MIME type by inspecting the file's header bytes.

        Returns:
            Detected MIME type string (e.g., "image/jpeg")

        Raises:
            ValidationError if the content is not an allowed image type
            FileStorageError if detection itself fails (libmagic missing)
        """
        try:
            mime_type = self._detect_mime_type(file_content)
        except Exception as e:
            logger.error("MIME type detection failed for %s: %s", filename, str(e))
            raise FileStorageError(
                message="Could not verify file type. Please try again.",
                context={"error": str(e)},
            )

        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message=(
                    f"File content type '{mime_type}' is not supported. "
                    f"The file must be a valid image (PNG, JPEG or WebP)."
                ),
                field="file",
                context={"detected_mime": mime_type, "allowed": list(ALLOWED_MIME_TYPES.keys())},
            )

        return mime_type

    def _generate_storage_path(self, extension: str) -> Tuple[Path, str]:
        """
        Creates a YYYY/MM/DD/<uuid><ext> path.
        Returns: Tuple of (absolute_path, relative_path_from_storage_root).
        """
        now = datetime.now(timezone.utc)
        date_dir = now.strftime("%Y/%m/%d")
        unique_name = f"{uuid.uuid4()}{extension}"

        relative_path = f"{date_dir}/{unique_name}"
        absolute_path = self.storage_root / relative_path

        return absolute_path, relative_path

    async def store_file(self, content: bytes, extension: str) -> Tuple[str, str]:
        """
        Write validated file content to disk with async I/O.

        Returns: Tuple of (absolute_path, relative_path).
        Raises:  FileStorageError if directory creation or file write fails.
        """
        absolute_path, relative_path = self._generate_storage_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)

            logger.info("File stored: %s (%d bytes)", relative_path, len(content))
            return str(absolute_path), relative_path

        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": relative_path, "os_error": str(e)},
            )

    def resolve_path(self, relative_path: str) -> Path:
        """
        Map a stored relative path to an absolute one inside the storage root.

        Raises:
            ValidationError if the path escapes the storage root
            NotFoundError if no such file exists
        """
        candidate = (self.storage_root / relative_path).resolve()
        try:
            candidate.relative_to(self.storage_root)
        except ValueError:
            logger.warning("Rejected file path outside storage root: %s", relative_path)
            raise ValidationError(message="Invalid file path", field="path")

        if not candidate.is_file():
            raise NotFoundError(resource="file", resource_id=relative_path)
        return candidate

    def _remove(self, relative_path: Optional[str]) -> None:
        if not relative_path:
            return
        try:
            path = (self.storage_root / relative_path).resolve()
            path.relative_to(self.storage_root)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", relative_path)
            else:
                logger.debug("Cleanup: file already gone: %s", relative_path)
        except (OSError, ValueError) as e:
            logger.warning("Failed to clean up file %s: %s", relative_path, str(e))

    async def cleanup_file(self, relative_path: Optional[str]) -> None:
        """
        Remove a stored file now; best-effort, never raises.

        When:  A later file in an upload batch fails and earlier ones must be
               rolled back, or a new file's row could not be flushed.
        """
        self._remove(relative_path)

    def cleanup_after_commit(self, db: AsyncSession, relative_path: Optional[str]) -> None:
        """
        Remove a replaced or deleted image once the session commits.

        The path is queued on the session; a rollback drops the queue, so a
        row restored by the rollback still points at an existing file.
        """
        if relative_path:
            db.info.setdefault(PENDING_CLEANUP_KEY, []).append(relative_path)

    async def validate_and_store(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Complete validation and storage pipeline.

        Validation order (cheapest first):
            1. Extension check
            2. Size check
            3. MIME type check
            4. Store file

        Returns: Relative path to persist on the owning row.
        """
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        self.validate_mime_type(content, filename)

        _, relative_path = await self.store_file(content, ext)
        return relative_path


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()


# ── Deferred Cleanup ──────────────────────────────────────────────────────
@event.listens_for(Session, "after_commit")
def _remove_files_after_commit(session: Session) -> None:
    for relative_path in session.info.pop(PENDING_CLEANUP_KEY, []):
        file_service._remove(relative_path)


@event.listens_for(Session, "after_rollback")
def _keep_files_after_rollback(session: Session) -> None:
    kept = session.info.pop(PENDING_CLEANUP_KEY, [])
    if kept:
        logger.info("Rollback: keeping %d file(s) queued for cleanup", len(kept))
