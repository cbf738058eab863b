"""
LocalPros Backend — Authentication Routes
===========================================

What:  Registration (client / professional), login and logout.
How:   Thin handlers delegating to AccountService; register and login both
       answer with the user and a bearer token.
Who:   Called by the mobile app's login and sign-up screens.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from localpros.database import get_db_session
from localpros.models.user import User
from localpros.schemas.common import ErrorResponse, MessageResponse
from localpros.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterClientRequest,
    RegisterProfessionalRequest,
)
from localpros.security import get_current_user
from localpros.services.account_service import account_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register/client",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Invalid registration data", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Register a client account",
)
async def register_client(
    payload: RegisterClientRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await account_service.register_client(db, payload)


@router.post(
    "/register/professional",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Invalid registration data", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Register a professional account",
    description=(
        "Creates a professional with category, description, optional experience "
        "and a full address. City must belong to the chosen state."
    ),
)
async def register_professional(
    payload: RegisterProfessionalRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await account_service.register_professional(db, payload)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Log in with email and password",
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await account_service.login(db, payload)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
    description="Tokens are stateless; the client discards its token. Kept for API symmetry.",
)
async def logout(user: User = Depends(get_current_user)) -> MessageResponse:
    logger.info("User logged out: %s", user.id)
    return MessageResponse(message="Logged out")
