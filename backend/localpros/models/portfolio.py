"""
LocalPros Backend — Portfolio Image Model
===========================================

What:  One row per image in a professional's portfolio.
How:   `position` is the 0-based display order; PortfolioService keeps it
       dense (0..n-1) after deletes and reorders.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from localpros.database import Base


class PortfolioImage(Base):
    __tablename__ = "portfolio_images"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    professional_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    image_path: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Relative path from storage root to the uploaded image",
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_portfolio_professional_position", "professional_id", "position"),
    )

    def __repr__(self) -> str:
        return f"<PortfolioImage(id={self.id}, position={self.position})>"
