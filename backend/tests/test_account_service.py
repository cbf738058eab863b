"""
LocalPros Backend — Account Service Tests
===========================================

What we test:
    ✅ Client and professional registration (normalisation, auto-login token)
    ✅ Registration rules: duplicate email, password policy, catalog checks
    ✅ Login with uniform errors
    ✅ Profile updates for clients and professionals
    ✅ Becoming a professional
    ✅ Profile picture replace/remove with file cleanup
"""

import pytest

from localpros.exceptions import (
    AuthenticationError,
    ConflictError,
    ValidationError,
)
from localpros.schemas.user import (
    AddressSchema,
    BecomeProfessionalRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterClientRequest,
    RegisterProfessionalRequest,
)
from localpros.security import decode_access_token
from localpros.services.account_service import account_service

ADDRESS = {
    "street": "Rua das Flores",
    "number": "42",
    "neighborhood": "Centro",
    "city": "Campinas",
    "state": "sp",
    "zip_code": "13010-000",
}


class TestRegistration:
    @pytest.mark.asyncio
    async def test_register_client(self, db_session, client_payload):
        auth = await account_service.register_client(
            db_session,
            RegisterClientRequest(**client_payload(email="  Ana@Example.COM ")),
        )

        assert auth.user.email == "ana@example.com"
        assert auth.user.user_type == "client"
        assert auth.user.phone == "11987654321"
        assert auth.user.address is None
        assert auth.token_type == "bearer"
        assert decode_access_token(auth.access_token) == auth.user.id

    @pytest.mark.asyncio
    async def test_register_professional(self, db_session, professional_payload):
        auth = await account_service.register_professional(
            db_session, RegisterProfessionalRequest(**professional_payload())
        )

        user = auth.user
        assert user.user_type == "professional"
        assert user.category == "Eletricista"
        assert user.address.city == "São Paulo"
        assert user.address.state == "SP"
        assert user.address.zip_code == "01310-100"

    @pytest.mark.asyncio
    async def test_duplicate_email_is_case_insensitive(self, db_session, create_client, client_payload):
        await create_client()
        with pytest.raises(ConflictError, match="Email already registered"):
            await account_service.register_client(
                db_session, RegisterClientRequest(**client_payload(email="ANA@example.com"))
            )

    @pytest.mark.asyncio
    async def test_passwords_must_match(self, db_session, client_payload):
        with pytest.raises(ValidationError, match="Passwords do not match"):
            await account_service.register_client(
                db_session, RegisterClientRequest(**client_payload(confirm_password="other123"))
            )

    @pytest.mark.asyncio
    async def test_password_minimum_length(self, db_session, client_payload):
        with pytest.raises(ValidationError, match="at least"):
            await account_service.register_client(
                db_session,
                RegisterClientRequest(**client_payload(password="abc", confirm_password="abc")),
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email", ["", "not-an-email", "a@b", "with space@x.com"])
    async def test_invalid_email(self, db_session, client_payload, email):
        with pytest.raises(ValidationError):
            await account_service.register_client(
                db_session, RegisterClientRequest(**client_payload(email=email))
            )

    @pytest.mark.asyncio
    async def test_blank_name(self, db_session, client_payload):
        with pytest.raises(ValidationError, match="Name is required"):
            await account_service.register_client(
                db_session, RegisterClientRequest(**client_payload(name="   "))
            )

    @pytest.mark.asyncio
    async def test_invalid_phone(self, db_session, client_payload):
        with pytest.raises(ValidationError) as exc_info:
            await account_service.register_client(
                db_session, RegisterClientRequest(**client_payload(phone="123"))
            )
        assert exc_info.value.field == "phone"

    @pytest.mark.asyncio
    async def test_unknown_category(self, db_session, professional_payload):
        with pytest.raises(ValidationError, match="Unknown category"):
            await account_service.register_professional(
                db_session,
                RegisterProfessionalRequest(**professional_payload(category="Astronauta")),
            )

    @pytest.mark.asyncio
    async def test_city_must_belong_to_state(self, db_session, professional_payload):
        with pytest.raises(ValidationError, match="not available for state"):
            await account_service.register_professional(
                db_session,
                RegisterProfessionalRequest(
                    **professional_payload(address={"city": "Niterói", "state": "SP"})
                ),
            )

    @pytest.mark.asyncio
    async def test_zip_code_must_have_eight_digits(self, db_session, professional_payload):
        with pytest.raises(ValidationError, match="8 digits"):
            await account_service.register_professional(
                db_session,
                RegisterProfessionalRequest(**professional_payload(address={"zip_code": "0131"})),
            )


class TestLogin:
    @pytest.mark.asyncio
    async def test_login(self, db_session, create_client):
        user = await create_client()
        auth = await account_service.login(
            db_session, LoginRequest(email="ANA@example.com", password="secret123")
        )
        assert auth.user.id == user.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, db_session, create_client):
        await create_client()
        with pytest.raises(AuthenticationError) as wrong_password:
            await account_service.login(db_session, LoginRequest(email="ana@example.com", password="nope"))
        with pytest.raises(AuthenticationError) as unknown_email:
            await account_service.login(db_session, LoginRequest(email="who@example.com", password="nope"))
        assert wrong_password.value.message == unknown_email.value.message == "Invalid email or password"


class TestProfile:
    @pytest.mark.asyncio
    async def test_client_updates_name_and_phone(self, db_session, create_client):
        user = await create_client()
        profile = await account_service.update_profile(
            db_session, user, ProfileUpdateRequest(name="Ana S.", phone="(21) 3456-7890")
        )
        assert profile.name == "Ana S."
        assert profile.phone == "2134567890"

    @pytest.mark.asyncio
    async def test_client_cannot_set_professional_fields(self, db_session, create_client):
        user = await create_client()
        with pytest.raises(ValidationError, match="become a professional first"):
            await account_service.update_profile(
                db_session, user, ProfileUpdateRequest(category="Pintor")
            )

    @pytest.mark.asyncio
    async def test_name_cannot_be_blanked(self, db_session, create_client):
        user = await create_client()
        with pytest.raises(ValidationError):
            await account_service.update_profile(db_session, user, ProfileUpdateRequest(name=" "))

    @pytest.mark.asyncio
    async def test_professional_replaces_address(self, db_session, create_professional):
        user = await create_professional()
        profile = await account_service.update_profile(
            db_session,
            user,
            ProfileUpdateRequest(category="Pintor", address=AddressSchema(**ADDRESS)),
        )
        assert profile.category == "Pintor"
        assert profile.address.city == "Campinas"
        assert profile.address.state == "SP"
        assert profile.address.complement is None
        assert profile.address.zip_code == "13010-000"


class TestBecomeProfessional:
    @pytest.mark.asyncio
    async def test_client_becomes_professional(self, db_session, create_client):
        user = await create_client()
        profile = await account_service.become_professional(
            db_session,
            user,
            BecomeProfessionalRequest(
                category="Diarista",
                description="Limpeza residencial",
                address=AddressSchema(**ADDRESS),
            ),
        )
        assert profile.user_type == "professional"
        assert profile.category == "Diarista"
        assert user.is_professional

    @pytest.mark.asyncio
    async def test_professional_cannot_upgrade_again(self, db_session, create_professional):
        user = await create_professional()
        with pytest.raises(ConflictError):
            await account_service.become_professional(
                db_session,
                user,
                BecomeProfessionalRequest(
                    category="Pintor", description="x", address=AddressSchema(**ADDRESS)
                ),
            )

    @pytest.mark.asyncio
    async def test_invalid_upgrade_leaves_client_unchanged(self, db_session, create_client):
        user = await create_client()
        with pytest.raises(ValidationError):
            await account_service.become_professional(
                db_session,
                user,
                BecomeProfessionalRequest(
                    category="Pintor",
                    description="Pinturas",
                    address=AddressSchema(**{**ADDRESS, "city": "Atlantis"}),
                ),
            )
        assert user.user_type == "client"
        assert user.category is None


class TestProfileImage:
    @pytest.mark.asyncio
    async def test_set_replace_and_remove(self, db_session, create_client, storage_root, png_bytes, jpeg_bytes):
        user = await create_client()

        first = await account_service.set_profile_image(db_session, user, "me.png", png_bytes)
        first_path = storage_root / user.profile_image_path
        assert first.profile_image_url == f"/api/files/{user.profile_image_path}"
        assert first_path.exists()

        second = await account_service.set_profile_image(db_session, user, "me.jpg", jpeg_bytes)
        assert second.profile_image_url != first.profile_image_url
        assert first_path.exists()
        await db_session.commit()
        assert not first_path.exists()

        second_path = storage_root / user.profile_image_path
        removed = await account_service.remove_profile_image(db_session, user)
        assert removed.profile_image_url is None
        assert user.profile_image_path is None
        await db_session.commit()
        assert not second_path.exists()

    @pytest.mark.asyncio
    async def test_rollback_keeps_replaced_image(self, db_session, create_client, storage_root, png_bytes, jpeg_bytes):
        user = await create_client()
        await account_service.set_profile_image(db_session, user, "me.png", png_bytes)
        await db_session.commit()
        original = user.profile_image_path

        await account_service.set_profile_image(db_session, user, "me.jpg", jpeg_bytes)
        await db_session.rollback()

        await db_session.refresh(user)
        assert user.profile_image_path == original
        assert (storage_root / original).exists()

        await db_session.commit()
        assert (storage_root / original).exists()

    @pytest.mark.asyncio
    async def test_rejected_upload_keeps_current_image(self, db_session, create_client, png_bytes):
        user = await create_client()
        await account_service.set_profile_image(db_session, user, "me.png", png_bytes)
        current = user.profile_image_path

        with pytest.raises(ValidationError):
            await account_service.set_profile_image(db_session, user, "me.png", b"plain text")
        assert user.profile_image_path == current
