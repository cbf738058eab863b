"""
LocalPros Backend — Service Request Routes
============================================

What:  Create service requests and move them through their lifecycle.
Who:   Called by the app's request form, "My Services" screen and the
       professional's incoming-requests screen.

Route Inventory:
    POST /api/service-requests                 create (pending)
    GET  /api/service-requests/mine            requests I made
    GET  /api/service-requests/incoming        requests addressed to me
    GET  /api/service-requests/{id}            one request (parties only)
    POST /api/service-requests/{id}/accept     professional: pending → accepted
    POST /api/service-requests/{id}/cancel     either party: → cancelled
    POST /api/service-requests/{id}/complete   client: accepted → completed + rating
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from localpros.database import get_db_session
from localpros.models.user import User
from localpros.schemas.common import ErrorResponse
from localpros.schemas.service_request import (
    ServiceRequestComplete,
    ServiceRequestCreate,
    ServiceRequestListResponse,
    ServiceRequestResponse,
)
from localpros.security import get_current_user, require_professional
from localpros.services.service_request_service import service_request_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/service-requests", tags=["Service Requests"])

_TRANSITION_ERRORS = {
    403: {"description": "Not allowed for this user", "model": ErrorResponse},
    404: {"description": "Service request not found", "model": ErrorResponse},
    409: {"description": "Invalid status transition", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=ServiceRequestResponse,
    responses={
        400: {"description": "Invalid request data", "model": ErrorResponse},
        404: {"description": "Professional not found", "model": ErrorResponse},
    },
    summary="Request a service from a professional",
)
async def create_service_request(
    payload: ServiceRequestCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ServiceRequestResponse:
    return await service_request_service.create_request(db, user, payload)


@router.get("/mine", response_model=ServiceRequestListResponse, summary="Requests I made")
async def list_my_requests(
    status: Optional[str] = Query(default=None, description="pending, accepted, completed, cancelled"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ServiceRequestListResponse:
    return await service_request_service.list_client_requests(db, user, status)


@router.get(
    "/incoming",
    response_model=ServiceRequestListResponse,
    responses={403: {"description": "Only professionals", "model": ErrorResponse}},
    summary="Requests addressed to me",
)
async def list_incoming_requests(
    status: Optional[str] = Query(default=None, description="pending, accepted, completed, cancelled"),
    user: User = Depends(require_professional),
    db: AsyncSession = Depends(get_db_session),
) -> ServiceRequestListResponse:
    return await service_request_service.list_professional_requests(db, user, status)


@router.get(
    "/{request_id}",
    response_model=ServiceRequestResponse,
    responses={k: v for k, v in _TRANSITION_ERRORS.items() if k != 409},
    summary="Get a service request",
)
async def get_service_request(
    request_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ServiceRequestResponse:
    return await service_request_service.get_request(db, user, request_id)


@router.post(
    "/{request_id}/accept",
    response_model=ServiceRequestResponse,
    responses=_TRANSITION_ERRORS,
    summary="Accept a pending request",
)
async def accept_service_request(
    request_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ServiceRequestResponse:
    return await service_request_service.accept_request(db, user, request_id)


@router.post(
    "/{request_id}/cancel",
    response_model=ServiceRequestResponse,
    responses=_TRANSITION_ERRORS,
    summary="Cancel a pending or accepted request",
)
async def cancel_service_request(
    request_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ServiceRequestResponse:
    return await service_request_service.cancel_request(db, user, request_id)


@router.post(
    "/{request_id}/complete",
    response_model=ServiceRequestResponse,
    responses=_TRANSITION_ERRORS,
    summary="Complete an accepted request and rate the professional",
)
async def complete_service_request(
    request_id: UUID,
    payload: ServiceRequestComplete,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> ServiceRequestResponse:
    return await service_request_service.complete_request(db, user, request_id, payload)
