"""
LocalPros Backend — Service Request Schemas
=============================================

What:  Contracts for creating service requests and moving them through
       pending → accepted → completed | cancelled.
Who:   /api/service-requests routes.

service_value accepts a JSON number or a string using either "," or "." as
the decimal separator ("150,50"); ServiceRequestService parses it.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from localpros.catalog import DEFAULT_URGENCY


class ServiceRequestCreate(BaseModel):
    professional_id: uuid.UUID
    service_description: str = Field(max_length=2000)
    service_value: Union[Decimal, str] = Field(description="Proposed value, e.g. 150.00 or \"150,00\"")
    additional_notes: Optional[str] = Field(default=None, max_length=2000)
    urgency: str = Field(default=DEFAULT_URGENCY, description="low, normal, high or urgent")


class ServiceRequestComplete(BaseModel):
    rating: int = Field(ge=1, le=5, description="1-5 stars for the professional")
    comment: Optional[str] = Field(default=None, max_length=2000)


class ServiceRequestResponse(BaseModel):
    id: uuid.UUID
    client_id: uuid.UUID
    client_name: str
    professional_id: uuid.UUID
    professional_name: str
    service_description: str
    service_value: Decimal
    additional_notes: Optional[str] = None
    urgency: str
    status: str
    request_date: datetime
    accepted_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    cancelled_date: Optional[datetime] = None
    rating: Optional[int] = None
    comment: Optional[str] = None

    model_config = {"from_attributes": True}


class ServiceRequestListResponse(BaseModel):
    requests: List[ServiceRequestResponse]
    total_count: int
