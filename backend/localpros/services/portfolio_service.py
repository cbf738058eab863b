"""
LocalPros Backend — Portfolio Service
=======================================

What:  Lets a professional manage the ordered photo portfolio on their
       public profile.
How:   Images are stored by FileService; `portfolio_images` rows keep the
       relative path and a dense 0-based `position`.
Who:   /api/users/me/portfolio routes; ProfessionalService reads the same
       rows for public profiles.

Invariants:
    - a portfolio never holds more than PORTFOLIO_MAX_IMAGES images
    - positions are always 0..n-1 with no gaps
    - an upload batch is all-or-nothing: on failure, files already written
      for that batch are removed
"""

import logging
import uuid
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from localpros.config import settings
from localpros.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from localpros.models.portfolio import PortfolioImage
from localpros.models.user import USER_TYPE_PROFESSIONAL, User
from localpros.schemas.professional import PortfolioResponse
from localpros.services.file_service import file_service
from localpros.services.professional_service import portfolio_image_response

logger = logging.getLogger(__name__)

# (filename, content, declared size)
UploadedImage = Tuple[str, bytes, Optional[int]]


class PortfolioService:
    def _require_professional(self, user: User) -> None:
        if user.user_type != USER_TYPE_PROFESSIONAL:
            raise PermissionDeniedError("Only professionals have a portfolio")

    async def _images(self, db: AsyncSession, professional_id: uuid.UUID) -> List[PortfolioImage]:
        result = await db.execute(
            select(PortfolioImage)
            .where(PortfolioImage.professional_id == professional_id)
            .order_by(PortfolioImage.position.asc(), PortfolioImage.created_at.asc())
        )
        return list(result.scalars().all())

    def _response(self, images: Sequence[PortfolioImage]) -> PortfolioResponse:
        return PortfolioResponse(
            images=[portfolio_image_response(image) for image in images],
            max_images=settings.portfolio_max_images,
        )

    async def list_portfolio(self, db: AsyncSession, professional_id: uuid.UUID) -> PortfolioResponse:
        return self._response(await self._images(db, professional_id))

    async def add_images(
        self,
        db: AsyncSession,
        user: User,
        uploads: Sequence[UploadedImage],
    ) -> PortfolioResponse:
        """
        Append a batch of images to the caller's portfolio, in upload order.

        Raises:
            PermissionDeniedError: caller is a client
            ValidationError: empty batch, capacity exceeded, invalid image
        """
        self._require_professional(user)
        if not uploads:
            raise ValidationError("Select at least one image", field="files")

        images = await self._images(db, user.id)
        limit = settings.portfolio_max_images
        if len(images) + len(uploads) > limit:
            raise ValidationError(
                f"A portfolio can hold at most {limit} images "
                f"({len(images)} already added, {len(uploads)} sent)",
                field="files",
                context={"current": len(images), "incoming": len(uploads), "max_images": limit},
            )

        stored: List[str] = []
        try:
            for filename, content, content_length in uploads:
                stored.append(
                    await file_service.validate_and_store(
                        filename=filename,
                        content=content,
                        content_length=content_length,
                    )
                )

            start = len(images)
            for offset, relative_path in enumerate(stored):
                image = PortfolioImage(
                    professional_id=user.id,
                    image_path=relative_path,
                    position=start + offset,
                )
                db.add(image)
                images.append(image)
            await db.flush()
        except Exception:
            for relative_path in stored:
                await file_service.cleanup_file(relative_path)
            raise

        logger.info("Added %d portfolio image(s) for %s", len(stored), user.id)
        return self._response(images)

    async def remove_image(
        self, db: AsyncSession, user: User, image_id: uuid.UUID
    ) -> PortfolioResponse:
        """Delete one of the caller's images and close the gap in positions; the file goes on commit."""
        self._require_professional(user)
        images = await self._images(db, user.id)
        target = next((image for image in images if image.id == image_id), None)
        if target is None:
            raise NotFoundError(resource="portfolio image", resource_id=str(image_id))

        await db.delete(target)
        remaining = [image for image in images if image.id != image_id]
        for position, image in enumerate(remaining):
            image.position = position
        await db.flush()

        file_service.cleanup_after_commit(db, target.image_path)
        logger.info("Removed portfolio image %s for %s", image_id, user.id)
        return self._response(remaining)

    async def reorder(
        self, db: AsyncSession, user: User, image_ids: Sequence[uuid.UUID]
    ) -> PortfolioResponse:
        """Reorder the portfolio; `image_ids` must be a permutation of the current ids."""
        self._require_professional(user)
        images = await self._images(db, user.id)
        by_id = {image.id: image for image in images}

        if len(image_ids) != len(images) or set(image_ids) != set(by_id):
            raise ValidationError(
                "The new order must list every portfolio image exactly once",
                field="image_ids",
            )

        ordered = [by_id[image_id] for image_id in image_ids]
        for position, image in enumerate(ordered):
            image.position = position
        await db.flush()
        return self._response(ordered)


# ── Singleton Instance ────────────────────────────────────────────────────
portfolio_service = PortfolioService()
