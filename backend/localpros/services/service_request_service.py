"""
LocalPros Backend — Service Request Service (Lifecycle Orchestrator)
======================================================================

What:  Creates service requests and moves them through their lifecycle,
       recording the client's rating when a request is completed.
How:   Each transition checks who is acting and the current status, stamps
       the matching date column, and flushes within the request's session.
Who:   /api/service-requests route handlers.

Lifecycle:
    ┌─────────┐  accept (professional)  ┌──────────┐  complete (client)  ┌───────────┐
    │ pending │────────────────────────▶│ accepted │────────────────────▶│ completed │
    └────┬────┘                         └────┬─────┘   + Rating row      └───────────┘
         │ cancel (either party)             │ cancel (either party)
         └──────────────┬────────────────────┘
                        ▼
                  ┌───────────┐
                  │ cancelled │
                  └───────────┘

completed and cancelled are terminal.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from localpros import catalog
from localpros.catalog import (
    STATUS_ACCEPTED,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_PENDING,
)
from localpros.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from localpros.models.rating import Rating
from localpros.models.service_request import ServiceRequest
from localpros.models.user import User
from localpros.schemas.service_request import (
    ServiceRequestComplete,
    ServiceRequestCreate,
    ServiceRequestListResponse,
    ServiceRequestResponse,
)
from localpros.services.professional_service import professional_service

logger = logging.getLogger(__name__)

MAX_SERVICE_VALUE = Decimal("99999999.99")
_CENTS = Decimal("0.01")


def parse_service_value(raw: Union[Decimal, int, float, str, None]) -> Decimal:
    """
    Parse a proposed value: 150, 150.5, "150,50" and "150.50" are accepted.

    Returns the value rounded to cents; ValidationError when it is not a
    number or not positive.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ValidationError("Service value is required", field="service_value")
    try:
        value = Decimal(str(raw).strip().replace(",", "."))
    except InvalidOperation:
        raise ValidationError("Service value must be a number", field="service_value")
    if not value.is_finite() or value <= 0:
        raise ValidationError("Service value must be greater than zero", field="service_value")
    value = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    if value > MAX_SERVICE_VALUE:
        raise ValidationError("Service value is too large", field="service_value")
    return value


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ServiceRequestService:
    """
    Business logic for service requests.

    Permission Rules:
        - anyone logged in may request a professional, but not themselves
        - only the two parties may read a request
        - accept: the professional; complete: the client; cancel: either
    """

    def _require_status(self, request: ServiceRequest, allowed: Iterable[str], action: str) -> None:
        allowed = tuple(allowed)
        if request.status not in allowed:
            raise ConflictError(
                f"Cannot {action} a request that is {request.status}",
                context={"status": request.status, "allowed": list(allowed)},
            )

    async def _load(self, db: AsyncSession, request_id: uuid.UUID) -> ServiceRequest:
        request = await db.get(ServiceRequest, request_id)
        if request is None:
            raise NotFoundError(resource="service request", resource_id=str(request_id))
        return request

    async def _load_visible(
        self, db: AsyncSession, user: User, request_id: uuid.UUID
    ) -> ServiceRequest:
        request = await self._load(db, request_id)
        if user.id not in (request.client_id, request.professional_id):
            raise PermissionDeniedError("You are not a party to this service request")
        return request

    # ── Creation ──────────────────────────────────────────────────────────
    async def create_request(
        self, db: AsyncSession, client: User, data: ServiceRequestCreate
    ) -> ServiceRequestResponse:
        """
        Create a pending request from the current user to a professional.

        Raises:
            ValidationError: blank description, bad value, unknown urgency,
                             requesting your own services
            NotFoundError: target is not a professional
        """
        description = (data.service_description or "").strip()
        if not description:
            raise ValidationError("Service description is required", field="service_description")
        value = parse_service_value(data.service_value)
        urgency = (data.urgency or catalog.DEFAULT_URGENCY).strip().lower()
        if not catalog.is_valid_urgency(urgency):
            raise ValidationError(f"Unknown urgency '{data.urgency}'", field="urgency")

        professional = await professional_service.get_professional_user(db, data.professional_id)
        if professional.id == client.id:
            raise ValidationError("You cannot request your own services", field="professional_id")

        request = ServiceRequest(
            client_id=client.id,
            client_name=client.name,
            professional_id=professional.id,
            professional_name=professional.name,
            service_description=description,
            service_value=value,
            additional_notes=(data.additional_notes or "").strip() or None,
            urgency=urgency,
            status=STATUS_PENDING,
            request_date=_now(),
        )
        db.add(request)
        await db.flush()

        logger.info(
            "Service request %s created: client=%s professional=%s value=%s",
            request.id,
            client.id,
            professional.id,
            value,
        )
        return ServiceRequestResponse.model_validate(request)

    # ── Listing ───────────────────────────────────────────────────────────
    async def _list(self, db: AsyncSession, column, user_id: uuid.UUID, status: Optional[str]):
        if status is not None and not catalog.is_valid_status(status):
            raise ValidationError(f"Unknown status '{status}'", field="status")

        conditions = [column == user_id]
        if status is not None:
            conditions.append(ServiceRequest.status == status)

        result = await db.execute(
            select(ServiceRequest)
            .where(*conditions)
            .order_by(ServiceRequest.request_date.desc(), ServiceRequest.id.desc())
        )
        requests = [ServiceRequestResponse.model_validate(r) for r in result.scalars().all()]

        count = await db.execute(select(func.count(ServiceRequest.id)).where(*conditions))
        return ServiceRequestListResponse(requests=requests, total_count=count.scalar() or 0)

    async def list_client_requests(
        self, db: AsyncSession, user: User, status: Optional[str] = None
    ) -> ServiceRequestListResponse:
        """Requests the user made ("my services"), newest first."""
        return await self._list(db, ServiceRequest.client_id, user.id, status)

    async def list_professional_requests(
        self, db: AsyncSession, user: User, status: Optional[str] = None
    ) -> ServiceRequestListResponse:
        """Requests addressed to the professional, newest first."""
        return await self._list(db, ServiceRequest.professional_id, user.id, status)

    async def get_request(
        self, db: AsyncSession, user: User, request_id: uuid.UUID
    ) -> ServiceRequestResponse:
        request = await self._load_visible(db, user, request_id)
        return ServiceRequestResponse.model_validate(request)

    # ── Transitions ───────────────────────────────────────────────────────
    async def accept_request(
        self, db: AsyncSession, user: User, request_id: uuid.UUID
    ) -> ServiceRequestResponse:
        request = await self._load_visible(db, user, request_id)
        if user.id != request.professional_id:
            raise PermissionDeniedError("Only the requested professional can accept")
        self._require_status(request, (STATUS_PENDING,), "accept")

        request.status = STATUS_ACCEPTED
        request.accepted_date = _now()
        await db.flush()
        logger.info("Service request %s accepted", request.id)
        return ServiceRequestResponse.model_validate(request)

    async def cancel_request(
        self, db: AsyncSession, user: User, request_id: uuid.UUID
    ) -> ServiceRequestResponse:
        request = await self._load_visible(db, user, request_id)
        self._require_status(request, (STATUS_PENDING, STATUS_ACCEPTED), "cancel")

        request.status = STATUS_CANCELLED
        request.cancelled_date = _now()
        await db.flush()
        logger.info("Service request %s cancelled by %s", request.id, user.id)
        return ServiceRequestResponse.model_validate(request)

    async def complete_request(
        self,
        db: AsyncSession,
        user: User,
        request_id: uuid.UUID,
        data: ServiceRequestComplete,
    ) -> ServiceRequestResponse:
        """
        Mark an accepted request as completed and rate the professional.

        The request update and the new Rating row are flushed together, so
        they commit (or roll back) as one transaction.
        """
        request = await self._load_visible(db, user, request_id)
        if user.id != request.client_id:
            raise PermissionDeniedError("Only the client can complete a service request")
        self._require_status(request, (STATUS_ACCEPTED,), "complete")

        comment = (data.comment or "").strip() or None
        completed_at = _now()
        request.status = STATUS_COMPLETED
        request.completed_date = completed_at
        request.rating = data.rating
        request.comment = comment
        db.add(
            Rating(
                professional_id=request.professional_id,
                client_id=request.client_id,
                client_name=request.client_name,
                service_request_id=request.id,
                rating=data.rating,
                comment=comment,
                created_at=completed_at,
            )
        )
        await db.flush()
        logger.info("Service request %s completed with rating %d", request.id, data.rating)
        return ServiceRequestResponse.model_validate(request)


# ── Singleton Instance ────────────────────────────────────────────────────
service_request_service = ServiceRequestService()
