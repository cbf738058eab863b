"""
LocalPros Backend — Professional Directory Service
====================================================

What:  Read side of the marketplace: browsing and filtering professionals,
       a professional's detail page, and their ratings.
How:   One aggregate query joins users with per-professional rating stats
       (average, count); filters, sorting and paging are applied in SQL.
Who:   /api/professionals route handlers.

Query Shape (list):
    SELECT users.*, coalesce(avg(rating), 0), count(rating)
    FROM users LEFT JOIN (ratings grouped by professional_id)
    WHERE user_type = 'professional' [AND filters]
    ORDER BY <sort> LIMIT :limit OFFSET :offset
"""

import logging
import uuid
from typing import List, Tuple

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from localpros.exceptions import DatabaseError, NotFoundError
from localpros.models.portfolio import PortfolioImage
from localpros.models.rating import Rating
from localpros.models.user import USER_TYPE_PROFESSIONAL, User
from localpros.schemas.professional import (
    PortfolioImageResponse,
    ProfessionalDetail,
    ProfessionalListItem,
    ProfessionalListResponse,
    ProfessionalQueryParams,
    RatingResponse,
)
from localpros.schemas.user import AddressResponse
from localpros.services.file_service import file_url

logger = logging.getLogger(__name__)


def _rating_stats():
    """Subquery: (professional_id, average, total) over all ratings."""
    return (
        select(
            Rating.professional_id.label("professional_id"),
            func.avg(Rating.rating).label("average"),
            func.count(Rating.id).label("total"),
        )
        .group_by(Rating.professional_id)
        .subquery()
    )


def portfolio_image_response(image: PortfolioImage) -> PortfolioImageResponse:
    return PortfolioImageResponse(
        id=image.id,
        image_url=file_url(image.image_path),
        position=image.position,
        created_at=image.created_at,
    )


class ProfessionalService:
    """
    Directory queries over professionals.

    Average ratings are computed on read from the ratings table; there is
    no stored aggregate to keep in sync.
    """

    def _filtered(self, query: Select, stats, params: ProfessionalQueryParams) -> Select:
        average = func.coalesce(stats.c.average, 0)
        conditions = [User.user_type == USER_TYPE_PROFESSIONAL]

        if params.search and params.search.strip():
            # Literal substring: % and _ in the search text are escaped
            needle = params.search.strip().lower()
            conditions.append(
                or_(
                    func.lower(User.name).contains(needle, autoescape=True),
                    func.lower(func.coalesce(User.category, "")).contains(needle, autoescape=True),
                )
            )
        if params.category:
            conditions.append(User.category == params.category)
        if params.min_rating is not None:
            conditions.append(average >= params.min_rating)
        if params.state:
            conditions.append(User.state == params.state.upper())
        if params.city:
            conditions.append(User.city == params.city)

        return query.where(and_(*conditions))

    async def list_professionals(
        self,
        db: AsyncSession,
        params: ProfessionalQueryParams,
    ) -> ProfessionalListResponse:
        """
        List professionals matching the filters, with rating stats.

        Sorting:
            rating_desc: highest average first, ties by name
            name_asc:    alphabetical by name

        Returns:
            ProfessionalListResponse with the page, total_count and has_more
        """
        stats = _rating_stats()
        average = func.coalesce(stats.c.average, 0)
        total = func.coalesce(stats.c.total, 0)

        try:
            base = (
                select(User, average.label("average"), total.label("total"))
                .select_from(User)
                .outerjoin(stats, stats.c.professional_id == User.id)
            )
            query = self._filtered(base, stats, params)

            if params.sort == "name_asc":
                query = query.order_by(User.name.asc(), User.id.asc())
            else:
                query = query.order_by(average.desc(), User.name.asc(), User.id.asc())

            result = await db.execute(query.limit(params.limit).offset(params.offset))
            rows = result.all()

            count_query = self._filtered(
                select(func.count(User.id))
                .select_from(User)
                .outerjoin(stats, stats.c.professional_id == User.id),
                stats,
                params,
            )
            total_count = (await db.execute(count_query)).scalar() or 0

        except SQLAlchemyError as e:
            logger.error("Database error listing professionals: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve professionals. Please try again.",
                context={"error_type": type(e).__name__},
            )

        items = [
            ProfessionalListItem(
                id=user.id,
                name=user.name,
                category=user.category,
                description=user.description,
                city=user.city,
                state=user.state,
                profile_image_url=file_url(user.profile_image_path),
                average_rating=round(float(avg), 2),
                total_reviews=int(count),
            )
            for user, avg, count in rows
        ]

        return ProfessionalListResponse(
            professionals=items,
            total_count=total_count,
            has_more=params.offset + len(items) < total_count,
        )

    async def get_professional_user(self, db: AsyncSession, professional_id: uuid.UUID) -> User:
        """Loads a professional; NotFoundError for unknown ids and for clients."""
        user = await db.get(User, professional_id)
        if user is None or user.user_type != USER_TYPE_PROFESSIONAL:
            raise NotFoundError(resource="professional", resource_id=str(professional_id))
        return user

    async def rating_summary(self, db: AsyncSession, professional_id: uuid.UUID) -> Tuple[float, int]:
        result = await db.execute(
            select(func.avg(Rating.rating), func.count(Rating.id)).where(
                Rating.professional_id == professional_id
            )
        )
        avg, count = result.one()
        return round(float(avg or 0), 2), int(count or 0)

    async def list_portfolio_images(
        self, db: AsyncSession, professional_id: uuid.UUID
    ) -> List[PortfolioImage]:
        result = await db.execute(
            select(PortfolioImage)
            .where(PortfolioImage.professional_id == professional_id)
            .order_by(PortfolioImage.position.asc())
        )
        return list(result.scalars().all())

    async def get_professional(
        self, db: AsyncSession, professional_id: uuid.UUID
    ) -> ProfessionalDetail:
        """Detail page: profile, address, rating stats and ordered portfolio."""
        user = await self.get_professional_user(db, professional_id)
        average, total = await self.rating_summary(db, professional_id)
        images = await self.list_portfolio_images(db, professional_id)

        return ProfessionalDetail(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            category=user.category,
            description=user.description,
            experience=user.experience,
            address=AddressResponse(
                street=user.street,
                number=user.number,
                complement=user.complement,
                neighborhood=user.neighborhood,
                city=user.city,
                state=user.state,
                zip_code=user.zip_code,
            ),
            profile_image_url=file_url(user.profile_image_path),
            average_rating=average,
            total_reviews=total,
            portfolio=[portfolio_image_response(image) for image in images],
            created_at=user.created_at,
        )

    async def list_ratings(
        self, db: AsyncSession, professional_id: uuid.UUID
    ) -> List[RatingResponse]:
        """All ratings of a professional, newest first."""
        await self.get_professional_user(db, professional_id)
        result = await db.execute(
            select(Rating)
            .where(Rating.professional_id == professional_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
        )
        return [RatingResponse.model_validate(r) for r in result.scalars().all()]


# ── Singleton Instance ────────────────────────────────────────────────────
professional_service = ProfessionalService()
