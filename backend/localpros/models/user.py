"""
LocalPros Backend — User SQLAlchemy Model
===========================================

What:  ORM model for the `users` table: clients and professionals alike.
How:   A single table discriminated by `user_type`; professional-only
       columns (category, description, experience, address) stay NULL for
       clients until they become professionals.
Who:   AccountService, ProfessionalService, the auth dependency.

Table Design:
    - email is unique and stored lower-case, so lookups are exact matches
    - password_hash holds `<salt>$<pbkdf2 digest>`, never the password
    - profile_image_path is relative to STORAGE_ROOT (YYYY/MM/DD/<uuid>.<ext>)
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from localpros.database import Base

USER_TYPE_CLIENT = "client"
USER_TYPE_PROFESSIONAL = "professional"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A registered account; `user_type` decides which screens and rules apply."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # ── Identity ──────────────────────────────────────────────────────────
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    user_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=USER_TYPE_CLIENT,
        comment="client | professional",
    )

    # ── Professional Profile ──────────────────────────────────────────────
    category: Mapped[Optional[str]] = mapped_column(String(80), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    experience: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Address ───────────────────────────────────────────────────────────
    street: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    complement: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    neighborhood: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(9), nullable=True)

    profile_image_path: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        Index("idx_users_type_category", "user_type", "category"),
        Index("idx_users_state_city", "state", "city"),
    )

    @property
    def is_professional(self) -> bool:
        return self.user_type == USER_TYPE_PROFESSIONAL

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', type='{self.user_type}')>"
