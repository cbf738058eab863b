"""
LocalPros Backend — Current User Routes
=========================================

What:  The logged-in user's own profile, profile picture and portfolio.
How:   Every handler depends on get_current_user (401 without a valid
       token); portfolio writes additionally need a professional (403).
Who:   Called by the app's Profile and Edit Profile screens.

Route Inventory:
    GET    /api/users/me                       current profile
    PATCH  /api/users/me                       partial profile update
    POST   /api/users/me/become-professional   client → professional
    GET    /api/users/me/profile-image         current picture URL
    PUT    /api/users/me/profile-image         upload/replace picture
    DELETE /api/users/me/profile-image         remove picture
    GET    /api/users/me/portfolio             own portfolio
    POST   /api/users/me/portfolio             add images (multipart, many)
    PUT    /api/users/me/portfolio/order       reorder images
    DELETE /api/users/me/portfolio/{image_id}  remove one image
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from localpros.database import get_db_session
from localpros.models.user import User
from localpros.schemas.common import ErrorResponse
from localpros.schemas.professional import PortfolioReorderRequest, PortfolioResponse
from localpros.schemas.user import (
    BecomeProfessionalRequest,
    ProfileImageResponse,
    ProfileUpdateRequest,
    UserResponse,
)
from localpros.security import get_current_user, require_professional
from localpros.services.account_service import account_service
from localpros.services.portfolio_service import portfolio_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users/me", tags=["Profile"])


# ── Profile ───────────────────────────────────────────────────────────────
@router.get("", response_model=UserResponse, summary="Get my profile")
async def get_me(user: User = Depends(get_current_user)) -> UserResponse:
    return account_service.get_profile(user)


@router.patch(
    "",
    response_model=UserResponse,
    responses={400: {"description": "Invalid profile data", "model": ErrorResponse}},
    summary="Update my profile",
)
async def update_me(
    payload: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await account_service.update_profile(db, user, payload)


@router.post(
    "/become-professional",
    response_model=UserResponse,
    responses={
        400: {"description": "Invalid professional data", "model": ErrorResponse},
        409: {"description": "Already a professional", "model": ErrorResponse},
    },
    summary="Turn my client account into a professional account",
)
async def become_professional(
    payload: BecomeProfessionalRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await account_service.become_professional(db, user, payload)


# ── Profile Image ─────────────────────────────────────────────────────────
@router.get("/profile-image", response_model=ProfileImageResponse, summary="Get my profile picture")
async def get_profile_image(user: User = Depends(get_current_user)) -> ProfileImageResponse:
    return account_service.get_profile_image(user)


@router.put(
    "/profile-image",
    response_model=ProfileImageResponse,
    responses={400: {"description": "Invalid image", "model": ErrorResponse}},
    summary="Upload or replace my profile picture",
)
async def set_profile_image(
    file: UploadFile = File(..., description="PNG, JPEG or WebP image"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileImageResponse:
    content = await file.read()
    try:
        return await account_service.set_profile_image(
            db,
            user,
            filename=file.filename or "profile.jpg",
            content=content,
            content_length=file.size,
        )
    finally:
        await file.close()


@router.delete("/profile-image", response_model=ProfileImageResponse, summary="Remove my profile picture")
async def remove_profile_image(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileImageResponse:
    return await account_service.remove_profile_image(db, user)


# ── Portfolio ─────────────────────────────────────────────────────────────
@router.get(
    "/portfolio",
    response_model=PortfolioResponse,
    responses={403: {"description": "Clients have no portfolio", "model": ErrorResponse}},
    summary="List my portfolio",
)
async def get_my_portfolio(
    user: User = Depends(require_professional),
    db: AsyncSession = Depends(get_db_session),
) -> PortfolioResponse:
    return await portfolio_service.list_portfolio(db, user.id)


@router.post(
    "/portfolio",
    status_code=201,
    response_model=PortfolioResponse,
    responses={
        400: {"description": "Invalid image or portfolio full", "model": ErrorResponse},
        403: {"description": "Clients have no portfolio", "model": ErrorResponse},
    },
    summary="Add images to my portfolio",
)
async def add_portfolio_images(
    files: List[UploadFile] = File(..., description="One or more PNG, JPEG or WebP images"),
    user: User = Depends(require_professional),
    db: AsyncSession = Depends(get_db_session),
) -> PortfolioResponse:
    uploads = []
    try:
        for upload in files:
            content = await upload.read()
            uploads.append((upload.filename or "portfolio.jpg", content, upload.size))
    finally:
        for upload in files:
            await upload.close()

    logger.info("Received %d portfolio upload(s) from %s", len(uploads), user.id)
    return await portfolio_service.add_images(db, user, uploads)


@router.put(
    "/portfolio/order",
    response_model=PortfolioResponse,
    responses={400: {"description": "Not a permutation of current images", "model": ErrorResponse}},
    summary="Reorder my portfolio",
)
async def reorder_portfolio(
    payload: PortfolioReorderRequest,
    user: User = Depends(require_professional),
    db: AsyncSession = Depends(get_db_session),
) -> PortfolioResponse:
    return await portfolio_service.reorder(db, user, payload.image_ids)


@router.delete(
    "/portfolio/{image_id}",
    response_model=PortfolioResponse,
    responses={404: {"description": "Image not in my portfolio", "model": ErrorResponse}},
    summary="Remove an image from my portfolio",
)
async def remove_portfolio_image(
    image_id: UUID,
    user: User = Depends(require_professional),
    db: AsyncSession = Depends(get_db_session),
) -> PortfolioResponse:
    return await portfolio_service.remove_image(db, user, image_id)
