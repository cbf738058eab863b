"""
LocalPros Backend — Service Request Model
===========================================

What:  A client's request for work from a professional, with its lifecycle.
How:   `status` moves pending → accepted → completed, or pending | accepted →
       cancelled; each transition stamps its own date column.
Who:   ServiceRequestService.

Client and professional names are copied at creation time, so the request
history reads the same after either party renames their profile.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from localpros.catalog import DEFAULT_URGENCY, STATUS_PENDING
from localpros.database import Base


class ServiceRequest(Base):
    __tablename__ = "service_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # ── Parties ───────────────────────────────────────────────────────────
    client_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    client_name: Mapped[str] = mapped_column(String(120), nullable=False)
    professional_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    professional_name: Mapped[str] = mapped_column(String(120), nullable=False)

    # ── Request Details ───────────────────────────────────────────────────
    service_description: Mapped[str] = mapped_column(Text, nullable=False)
    service_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    additional_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    urgency: Mapped[str] = mapped_column(String(20), nullable=False, default=DEFAULT_URGENCY)

    # ── Lifecycle ─────────────────────────────────────────────────────────
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=STATUS_PENDING,
        comment="pending, accepted, completed, cancelled",
    )
    request_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    accepted_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Filled when the client completes the request
    rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_requests_client_date", "client_id", "request_date"),
        Index("idx_requests_professional_date", "professional_id", "request_date"),
    )

    def __repr__(self) -> str:
        return f"<ServiceRequest(id={self.id}, status='{self.status}')>"
