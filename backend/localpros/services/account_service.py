"""
LocalPros Backend — Account Service (Registration, Login, Profile)
====================================================================

What:  Business rules for accounts: client and professional registration,
       login, profile edits, upgrading a client to professional, and the
       profile picture.
How:   Validates input against the catalog and the password policy, then
       reads/writes `users` through the request's AsyncSession.
Who:   Called by the /api/auth and /api/users/me route handlers.

Registration Flow:
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │ Validate │───▶│ Email unique │───▶│ Hash + Store │───▶│  Token   │
    │  fields  │    │  (lower)     │    │  (users)     │    │ (login)  │
    └──────────┘    └──────────────┘    └──────────────┘    └──────────┘

Registering logs the user in: the response already carries an access token.
"""

import logging
import re
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from localpros import catalog
from localpros.config import settings
from localpros.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    ValidationError,
)
from localpros.models.user import USER_TYPE_CLIENT, USER_TYPE_PROFESSIONAL, User
from localpros.schemas.user import (
    AddressResponse,
    AddressSchema,
    AuthResponse,
    BecomeProfessionalRequest,
    LoginRequest,
    ProfileImageResponse,
    ProfileUpdateRequest,
    RegisterClientRequest,
    RegisterProfessionalRequest,
    UserResponse,
)
from localpros.security import create_access_token, hash_password, verify_password
from localpros.services.file_service import file_service, file_url

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _optional(value: Optional[str]) -> Optional[str]:
    cleaned = _clean(value)
    return cleaned or None


class AccountService:
    """
    Business logic for accounts and profiles.

    Responsibilities:
        - register_client() / register_professional(): create + auto-login
        - login(): credential check, uniform error for bad email or password
        - get_profile() / update_profile(): the current user's own profile
        - become_professional(): client → professional upgrade
        - set/get/remove_profile_image(): profile picture lifecycle
    """

    # ── Conversion ────────────────────────────────────────────────────────
    @staticmethod
    def to_user_response(user: User) -> UserResponse:
        address = None
        if user.user_type == USER_TYPE_PROFESSIONAL:
            address = AddressResponse(
                street=user.street,
                number=user.number,
                complement=user.complement,
                neighborhood=user.neighborhood,
                city=user.city,
                state=user.state,
                zip_code=user.zip_code,
            )
        return UserResponse(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            user_type=user.user_type,
            category=user.category,
            description=user.description,
            experience=user.experience,
            address=address,
            profile_image_url=file_url(user.profile_image_path),
            created_at=user.created_at,
        )

    def _auth_response(self, user: User) -> AuthResponse:
        token, expires_at = create_access_token(user.id)
        return AuthResponse(
            user=self.to_user_response(user),
            access_token=token,
            expires_at=expires_at,
        )

    # ── Field Rules ───────────────────────────────────────────────────────
    def _validate_name(self, name: Optional[str]) -> str:
        cleaned = _clean(name)
        if not cleaned:
            raise ValidationError("Name is required", field="name")
        return cleaned

    def _validate_email(self, email: Optional[str]) -> str:
        cleaned = _clean(email).lower()
        if not cleaned:
            raise ValidationError("Email is required", field="email")
        if not EMAIL_PATTERN.match(cleaned):
            raise ValidationError("Invalid email address", field="email")
        return cleaned

    def _validate_phone(self, phone: Optional[str]) -> str:
        if not _clean(phone):
            raise ValidationError("Phone is required", field="phone")
        try:
            return catalog.normalize_phone(phone)
        except ValueError as e:
            raise ValidationError(str(e), field="phone")

    def _validate_password(self, password: str, confirm_password: str) -> None:
        if not password:
            raise ValidationError("Password is required", field="password")
        if password != confirm_password:
            raise ValidationError("Passwords do not match", field="confirm_password")
        if len(password) < settings.password_min_length:
            raise ValidationError(
                f"Password must be at least {settings.password_min_length} characters",
                field="password",
            )

    def _validate_category(self, category: Optional[str]) -> str:
        cleaned = _clean(category)
        if not cleaned:
            raise ValidationError("Category is required", field="category")
        if not catalog.is_valid_category(cleaned):
            raise ValidationError(f"Unknown category '{cleaned}'", field="category")
        return cleaned

    def _validate_description(self, description: Optional[str]) -> str:
        cleaned = _clean(description)
        if not cleaned:
            raise ValidationError("Description is required", field="description")
        return cleaned

    def _apply_address(self, user: User, address: AddressSchema) -> None:
        """Validates a full address and replaces the user's address with it."""
        required = {
            "street": address.street,
            "number": address.number,
            "neighborhood": address.neighborhood,
            "city": address.city,
            "state": address.state,
            "zip_code": address.zip_code,
        }
        for field, value in required.items():
            if not _clean(value):
                raise ValidationError(f"Address {field} is required", field=f"address.{field}")

        state = _clean(address.state).upper()
        if not catalog.is_valid_state(state):
            raise ValidationError(f"Unknown state '{state}'", field="address.state")
        city = _clean(address.city)
        if not catalog.is_valid_city(state, city):
            raise ValidationError(
                f"City '{city}' is not available for state {state}", field="address.city"
            )
        try:
            zip_code = catalog.normalize_zip_code(address.zip_code)
        except ValueError as e:
            raise ValidationError(str(e), field="address.zip_code")

        user.street = _clean(address.street)
        user.number = _clean(address.number)
        user.complement = _optional(address.complement)
        user.neighborhood = _clean(address.neighborhood)
        user.city = city
        user.state = state
        user.zip_code = zip_code

    async def _ensure_email_available(self, db: AsyncSession, email: str) -> None:
        result = await db.execute(select(func.count(User.id)).where(User.email == email))
        if result.scalar():
            raise ConflictError("Email already registered", context={"field": "email"})

    async def _persist_new_user(self, db: AsyncSession, user: User) -> None:
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await db.rollback()
            raise ConflictError("Email already registered", context={"field": "email"})
        except SQLAlchemyError as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the account. Please try again.",
                context={"error_type": type(e).__name__},
            )

    # ── Registration & Login ──────────────────────────────────────────────
    def _build_client(self, data: RegisterClientRequest, email: str) -> User:
        return User(
            name=self._validate_name(data.name),
            email=email,
            password_hash=hash_password(data.password),
            phone=self._validate_phone(data.phone),
            user_type=USER_TYPE_CLIENT,
        )

    async def register_client(self, db: AsyncSession, data: RegisterClientRequest) -> AuthResponse:
        """
        Create a client account and log it in.

        Raises:
            ValidationError: Missing field, bad email, password rules
            ConflictError: Email already registered
        """
        email = self._validate_email(data.email)
        self._validate_password(data.password, data.confirm_password)
        user = self._build_client(data, email)
        await self._ensure_email_available(db, email)

        await self._persist_new_user(db, user)
        logger.info("Client registered: %s", user.id)
        return self._auth_response(user)

    async def register_professional(
        self, db: AsyncSession, data: RegisterProfessionalRequest
    ) -> AuthResponse:
        """
        Create a professional account (client fields plus category,
        description, optional experience and a full address) and log it in.
        """
        email = self._validate_email(data.email)
        self._validate_password(data.password, data.confirm_password)
        user = self._build_client(data, email)
        user.user_type = USER_TYPE_PROFESSIONAL
        user.category = self._validate_category(data.category)
        user.description = self._validate_description(data.description)
        user.experience = _optional(data.experience)
        self._apply_address(user, data.address)
        await self._ensure_email_available(db, email)

        await self._persist_new_user(db, user)
        logger.info("Professional registered: %s (%s)", user.id, user.category)
        return self._auth_response(user)

    async def login(self, db: AsyncSession, data: LoginRequest) -> AuthResponse:
        """
        Check credentials and issue a token.

        Unknown email and wrong password produce the same error so the
        endpoint does not reveal which emails are registered.
        """
        email = _clean(data.email).lower()
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(data.password or "", user.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise AuthenticationError("Invalid email or password")

        logger.info("User logged in: %s", user.id)
        return self._auth_response(user)

    # ── Profile ───────────────────────────────────────────────────────────
    def get_profile(self, user: User) -> UserResponse:
        return self.to_user_response(user)

    async def update_profile(
        self, db: AsyncSession, user: User, data: ProfileUpdateRequest
    ) -> UserResponse:
        """
        Apply a partial update to the current user's profile.

        Rules:
            - name may change but never become blank
            - professionals keep a valid category and a non-blank description
            - an address, when given, replaces the old one entirely
            - clients cannot set professional fields (ValidationError)
        """
        professional_fields = {
            "category": data.category,
            "description": data.description,
            "experience": data.experience,
            "address": data.address,
        }
        if user.user_type != USER_TYPE_PROFESSIONAL:
            provided = sorted(k for k, v in professional_fields.items() if v is not None)
            if provided:
                raise ValidationError(
                    "Clients cannot set professional fields; become a professional first",
                    field=provided[0],
                    context={"fields": provided},
                )

        if data.name is not None:
            user.name = self._validate_name(data.name)
        if data.phone is not None:
            user.phone = self._validate_phone(data.phone)

        if user.user_type == USER_TYPE_PROFESSIONAL:
            if data.category is not None:
                user.category = self._validate_category(data.category)
            if data.description is not None:
                user.description = self._validate_description(data.description)
            if data.experience is not None:
                user.experience = _optional(data.experience)
            if data.address is not None:
                self._apply_address(user, data.address)

        await db.flush()
        logger.info("Profile updated: %s", user.id)
        return self.to_user_response(user)

    async def become_professional(
        self, db: AsyncSession, user: User, data: BecomeProfessionalRequest
    ) -> UserResponse:
        """Upgrade a client to a professional; ConflictError for professionals."""
        if user.user_type == USER_TYPE_PROFESSIONAL:
            raise ConflictError("You are already registered as a professional")

        category = self._validate_category(data.category)
        description = self._validate_description(data.description)
        self._apply_address(user, data.address)
        user.category = category
        user.description = description
        user.experience = _optional(data.experience)
        user.user_type = USER_TYPE_PROFESSIONAL

        await db.flush()
        logger.info("User %s became a professional (%s)", user.id, category)
        return self.to_user_response(user)

    # ── Profile Image ─────────────────────────────────────────────────────
    def get_profile_image(self, user: User) -> ProfileImageResponse:
        return ProfileImageResponse(profile_image_url=file_url(user.profile_image_path))

    async def set_profile_image(
        self,
        db: AsyncSession,
        user: User,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> ProfileImageResponse:
        """Store a new profile picture; the old file is deleted once the session commits."""
        relative_path = await file_service.validate_and_store(
            filename=filename,
            content=content,
            content_length=content_length,
        )
        previous = user.profile_image_path
        user.profile_image_path = relative_path
        try:
            await db.flush()
        except SQLAlchemyError as e:
            await file_service.cleanup_file(relative_path)
            logger.error("Database error saving profile image: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the profile image. Please try again.",
                context={"user_id": str(user.id)},
            )

        file_service.cleanup_after_commit(db, previous)
        logger.info("Profile image set for %s: %s", user.id, relative_path)
        return self.get_profile_image(user)

    async def remove_profile_image(self, db: AsyncSession, user: User) -> ProfileImageResponse:
        previous = user.profile_image_path
        user.profile_image_path = None
        await db.flush()
        file_service.cleanup_after_commit(db, previous)
        return self.get_profile_image(user)


# ── Singleton Instance ────────────────────────────────────────────────────
account_service = AccountService()
