"""
LocalPros Backend — Account & Profile Schemas
===============================================

What:  Request/response contracts for registration, login and profile editing.
How:   Pydantic checks shape and types (422 on failure); business rules such
       as matching passwords, email format, catalog membership and address
       validity live in AccountService and answer 400.
Who:   /api/auth and /api/users/me routes.

Design Decision:
    UserResponse never carries password_hash; the ORM model is converted
    field by field in AccountService.to_user_response().
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class AddressSchema(BaseModel):
    """
    Postal address of a professional.

    zip_code accepts "01310100" or "01310-100"; it is stored as NNNNN-NNN.
    city must be one of the catalog cities of `state`.
    """
    street: str = Field(max_length=200)
    number: str = Field(max_length=20)
    complement: Optional[str] = Field(default=None, max_length=120)
    neighborhood: str = Field(max_length=120)
    city: str = Field(max_length=120)
    state: str = Field(max_length=2, description="UF code, e.g. SP")
    zip_code: str = Field(max_length=12)


class RegisterClientRequest(BaseModel):
    name: str = Field(max_length=120)
    email: str = Field(max_length=255)
    password: str = Field(max_length=128)
    confirm_password: str = Field(max_length=128)
    phone: str = Field(max_length=20)


class RegisterProfessionalRequest(RegisterClientRequest):
    category: str = Field(max_length=80)
    description: str = Field(max_length=2000)
    experience: Optional[str] = Field(default=None, max_length=2000)
    address: AddressSchema


class LoginRequest(BaseModel):
    email: str = Field(max_length=255)
    password: str = Field(max_length=128)


class ProfileUpdateRequest(BaseModel):
    """
    Partial profile update; omitted (or null) fields are left untouched.

    Professional fields are rejected for clients, who must go through
    POST /api/users/me/become-professional instead.
    """
    name: Optional[str] = Field(default=None, max_length=120)
    phone: Optional[str] = Field(default=None, max_length=20)
    category: Optional[str] = Field(default=None, max_length=80)
    description: Optional[str] = Field(default=None, max_length=2000)
    experience: Optional[str] = Field(default=None, max_length=2000)
    address: Optional[AddressSchema] = None


class BecomeProfessionalRequest(BaseModel):
    category: str = Field(max_length=80)
    description: str = Field(max_length=2000)
    experience: Optional[str] = Field(default=None, max_length=2000)
    address: AddressSchema


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AddressResponse(BaseModel):
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class UserResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str
    user_type: str = Field(description="client or professional")
    category: Optional[str] = None
    description: Optional[str] = None
    experience: Optional[str] = None
    address: Optional[AddressResponse] = Field(
        default=None, description="Only present for professionals"
    )
    profile_image_url: Optional[str] = None
    created_at: datetime


class AuthResponse(BaseModel):
    """Returned by register and login: the account plus a bearer token."""
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class ProfileImageResponse(BaseModel):
    profile_image_url: Optional[str] = None
