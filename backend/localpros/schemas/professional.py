"""
LocalPros Backend — Directory & Portfolio Schemas
===================================================

What:  Contracts for browsing professionals, their ratings and portfolios.
Who:   /api/professionals and /api/users/me/portfolio routes.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from localpros.schemas.user import AddressResponse

SORT_OPTIONS = {"rating_desc", "name_asc"}


class ProfessionalQueryParams(BaseModel):
    """
    What:  Validated query parameters for GET /api/professionals.

    Parameters:
        search: Case-insensitive substring of name or category
        category: Exact category name from the catalog
        min_rating: Minimum average rating (0-5)
        state / city: Exact address match
        sort: rating_desc (best rated first) or name_asc
        limit / offset: Page window (limit 1-100, default 20)
    """
    search: Optional[str] = Field(default=None, max_length=120)
    category: Optional[str] = Field(default=None, max_length=80)
    min_rating: Optional[float] = Field(default=None, ge=0, le=5)
    state: Optional[str] = Field(default=None, max_length=2)
    city: Optional[str] = Field(default=None, max_length=120)
    sort: str = Field(default="rating_desc")
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)

    @field_validator("sort")
    @classmethod
    def validate_sort(cls, v: str) -> str:
        """Ensures sort parameter is a valid option."""
        if v not in SORT_OPTIONS:
            raise ValueError(f"Invalid sort '{v}'. Must be one of: {sorted(SORT_OPTIONS)}")
        return v


class PortfolioImageResponse(BaseModel):
    id: uuid.UUID
    image_url: str = Field(description="URL path to access the stored image")
    position: int = Field(description="0-based display order")
    created_at: datetime


class PortfolioResponse(BaseModel):
    images: List[PortfolioImageResponse]
    max_images: int = Field(description="Portfolio capacity")


class PortfolioReorderRequest(BaseModel):
    image_ids: List[uuid.UUID] = Field(description="Every current image id, in the new order")


class ProfessionalListItem(BaseModel):
    """Card shown in the directory grid."""
    id: uuid.UUID
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    profile_image_url: Optional[str] = None
    average_rating: float = Field(description="Mean of all ratings, 0 when unrated")
    total_reviews: int


class ProfessionalListResponse(BaseModel):
    professionals: List[ProfessionalListItem]
    total_count: int = Field(description="Total professionals matching the filters")
    has_more: bool = Field(description="Whether more pages are available")


class ProfessionalDetail(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str
    category: Optional[str] = None
    description: Optional[str] = None
    experience: Optional[str] = None
    address: AddressResponse
    profile_image_url: Optional[str] = None
    average_rating: float
    total_reviews: int
    portfolio: List[PortfolioImageResponse]
    created_at: datetime


class RatingResponse(BaseModel):
    id: uuid.UUID
    client_id: uuid.UUID
    client_name: str
    service_request_id: uuid.UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
