"""
LocalPros Backend — Professional Directory Routes
===================================================

What:  Public browsing of professionals: list with filters, detail page,
       ratings and portfolio.
How:   Query parameters are validated into ProfessionalQueryParams and
       handed to ProfessionalService.
Who:   Called by the app's Home (search + category chips), filter modal and
       professional detail screens. No authentication required.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from localpros.database import get_db_session
from localpros.schemas.common import ErrorResponse
from localpros.schemas.professional import (
    PortfolioResponse,
    ProfessionalDetail,
    ProfessionalListResponse,
    ProfessionalQueryParams,
    RatingResponse,
)
from localpros.services.portfolio_service import portfolio_service
from localpros.services.professional_service import professional_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/professionals", tags=["Professionals"])


@router.get(
    "",
    response_model=ProfessionalListResponse,
    summary="Browse professionals",
    description=(
        "Lists professionals with their average rating and review count. "
        "Filter by free-text search (name or category), exact category, minimum "
        "rating, state and city; sort by rating or name."
    ),
)
async def list_professionals(
    response: Response,
    search: Optional[str] = Query(default=None, max_length=120, description="Name or category contains"),
    category: Optional[str] = Query(default=None, max_length=80),
    min_rating: Optional[float] = Query(default=None, ge=0, le=5),
    state: Optional[str] = Query(default=None, max_length=2, description="UF code"),
    city: Optional[str] = Query(default=None, max_length=120),
    sort: str = Query(default="rating_desc", pattern="^(rating_desc|name_asc)$"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> ProfessionalListResponse:
    params = ProfessionalQueryParams(
        search=search,
        category=category,
        min_rating=min_rating,
        state=state,
        city=city,
        sort=sort,
        limit=limit,
        offset=offset,
    )
    result = await professional_service.list_professionals(db, params)
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/{professional_id}",
    response_model=ProfessionalDetail,
    responses={404: {"description": "Professional not found", "model": ErrorResponse}},
    summary="Get a professional's profile",
)
async def get_professional(
    professional_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> ProfessionalDetail:
    return await professional_service.get_professional(db, professional_id)


@router.get(
    "/{professional_id}/ratings",
    response_model=List[RatingResponse],
    responses={404: {"description": "Professional not found", "model": ErrorResponse}},
    summary="List a professional's ratings, newest first",
)
async def list_ratings(
    professional_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[RatingResponse]:
    return await professional_service.list_ratings(db, professional_id)


@router.get(
    "/{professional_id}/portfolio",
    response_model=PortfolioResponse,
    responses={404: {"description": "Professional not found", "model": ErrorResponse}},
    summary="List a professional's portfolio images",
)
async def get_portfolio(
    professional_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> PortfolioResponse:
    await professional_service.get_professional_user(db, professional_id)
    return await portfolio_service.list_portfolio(db, professional_id)
