"""
LocalPros Backend — Service Request Lifecycle Tests
=====================================================

What we test:
    ✅ Value parsing ("150,50", "150.50", rounding, rejects)
    ✅ Creating requests (defaults, self-request, unknown professional)
    ✅ Transitions: accept / cancel / complete and who may perform them
    ✅ Terminal states reject further transitions with ConflictError
    ✅ Completing records a Rating visible on the professional
    ✅ Listing per side with status filter
"""

import uuid
from decimal import Decimal

import pytest

from localpros.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from localpros.schemas.service_request import ServiceRequestComplete, ServiceRequestCreate
from localpros.services.professional_service import professional_service
from localpros.services.service_request_service import (
    parse_service_value,
    service_request_service,
)


@pytest.fixture
def parties(create_client, create_professional):
    async def build():
        client = await create_client()
        professional = await create_professional()
        return client, professional

    return build


async def _open_request(db_session, client, professional, **overrides):
    payload = {
        "professional_id": professional.id,
        "service_description": "Trocar o quadro de disjuntores",
        "service_value": "350,00",
    }
    payload.update(overrides)
    return await service_request_service.create_request(
        db_session, client, ServiceRequestCreate(**payload)
    )


class TestParseServiceValue:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("150,50", Decimal("150.50")),
            ("150.50", Decimal("150.50")),
            (150, Decimal("150.00")),
            (" 99,999 ", Decimal("100.00")),
            (Decimal("0.01"), Decimal("0.01")),
        ],
    )
    def test_accepted(self, raw, expected):
        assert parse_service_value(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "0", "-10", "NaN", "1e12"])
    def test_rejected(self, raw):
        with pytest.raises(ValidationError):
            parse_service_value(raw)


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_defaults(self, db_session, parties):
        client, professional = await parties()
        request = await _open_request(db_session, client, professional)

        assert request.status == "pending"
        assert request.urgency == "normal"
        assert request.service_value == Decimal("350.00")
        assert request.client_name == "Ana Souza"
        assert request.professional_name == "Carlos Lima"
        assert request.accepted_date is None

    @pytest.mark.asyncio
    async def test_urgency_is_validated(self, db_session, parties):
        client, professional = await parties()
        request = await _open_request(db_session, client, professional, urgency="URGENT")
        assert request.urgency == "urgent"

        with pytest.raises(ValidationError, match="Unknown urgency"):
            await _open_request(db_session, client, professional, urgency="yesterday")

    @pytest.mark.asyncio
    async def test_blank_description(self, db_session, parties):
        client, professional = await parties()
        with pytest.raises(ValidationError):
            await _open_request(db_session, client, professional, service_description="   ")

    @pytest.mark.asyncio
    async def test_cannot_request_yourself(self, db_session, create_professional):
        professional = await create_professional()
        with pytest.raises(ValidationError, match="your own services"):
            await _open_request(db_session, professional, professional)

    @pytest.mark.asyncio
    async def test_target_must_be_professional(self, db_session, create_client):
        client = await create_client()
        other = await create_client(email="bia@example.com")
        with pytest.raises(NotFoundError):
            await _open_request(db_session, client, other)

    @pytest.mark.asyncio
    async def test_unknown_professional(self, db_session, create_client):
        client = await create_client()
        with pytest.raises(NotFoundError):
            await service_request_service.create_request(
                db_session,
                client,
                ServiceRequestCreate(
                    professional_id=uuid.uuid4(),
                    service_description="Pintura",
                    service_value="100",
                ),
            )


class TestTransitions:
    @pytest.mark.asyncio
    async def test_full_lifecycle_records_rating(self, db_session, parties):
        client, professional = await parties()
        request = await _open_request(db_session, client, professional)

        accepted = await service_request_service.accept_request(db_session, professional, request.id)
        assert accepted.status == "accepted"
        assert accepted.accepted_date is not None

        completed = await service_request_service.complete_request(
            db_session, client, request.id, ServiceRequestComplete(rating=4, comment="  Ótimo  ")
        )
        assert completed.status == "completed"
        assert completed.rating == 4
        assert completed.comment == "Ótimo"
        assert completed.completed_date is not None

        ratings = await professional_service.list_ratings(db_session, professional.id)
        assert len(ratings) == 1
        assert ratings[0].rating == 4
        assert ratings[0].client_name == "Ana Souza"
        assert ratings[0].service_request_id == request.id

        detail = await professional_service.get_professional(db_session, professional.id)
        assert detail.average_rating == 4.0
        assert detail.total_reviews == 1

    @pytest.mark.asyncio
    async def test_only_professional_accepts(self, db_session, parties):
        client, professional = await parties()
        request = await _open_request(db_session, client, professional)
        with pytest.raises(PermissionDeniedError):
            await service_request_service.accept_request(db_session, client, request.id)

    @pytest.mark.asyncio
    async def test_only_client_completes(self, db_session, parties):
        client, professional = await parties()
        request = await _open_request(db_session, client, professional)
        await service_request_service.accept_request(db_session, professional, request.id)
        with pytest.raises(PermissionDeniedError):
            await service_request_service.complete_request(
                db_session, professional, request.id, ServiceRequestComplete(rating=5)
            )

    @pytest.mark.asyncio
    async def test_cannot_complete_pending(self, db_session, parties):
        client, professional = await parties()
        request = await _open_request(db_session, client, professional)
        with pytest.raises(ConflictError, match="Cannot complete a request that is pending"):
            await service_request_service.complete_request(
                db_session, client, request.id, ServiceRequestComplete(rating=5)
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("canceller", ["client", "professional"])
    async def test_either_party_cancels(self, db_session, parties, canceller):
        client, professional = await parties()
        request = await _open_request(db_session, client, professional)
        await service_request_service.accept_request(db_session, professional, request.id)

        actor = client if canceller == "client" else professional
        cancelled = await service_request_service.cancel_request(db_session, actor, request.id)
        assert cancelled.status == "cancelled"
        assert cancelled.cancelled_date is not None

    @pytest.mark.asyncio
    async def test_terminal_states_are_final(self, db_session, parties):
        client, professional = await parties()
        request = await _open_request(db_session, client, professional)
        await service_request_service.cancel_request(db_session, client, request.id)

        with pytest.raises(ConflictError):
            await service_request_service.accept_request(db_session, professional, request.id)
        with pytest.raises(ConflictError):
            await service_request_service.cancel_request(db_session, client, request.id)

    @pytest.mark.asyncio
    async def test_strangers_cannot_see_or_touch(self, db_session, parties, create_client):
        client, professional = await parties()
        stranger = await create_client(email="eve@example.com")
        request = await _open_request(db_session, client, professional)

        with pytest.raises(PermissionDeniedError):
            await service_request_service.get_request(db_session, stranger, request.id)
        with pytest.raises(PermissionDeniedError):
            await service_request_service.cancel_request(db_session, stranger, request.id)

    @pytest.mark.asyncio
    async def test_unknown_request(self, db_session, parties):
        client, _ = await parties()
        with pytest.raises(NotFoundError):
            await service_request_service.get_request(db_session, client, uuid.uuid4())


class TestListing:
    @pytest.mark.asyncio
    async def test_each_side_sees_its_requests(self, db_session, parties):
        client, professional = await parties()
        first = await _open_request(db_session, client, professional)
        second = await _open_request(db_session, client, professional, service_description="Tomadas")
        await service_request_service.accept_request(db_session, professional, first.id)

        mine = await service_request_service.list_client_requests(db_session, client)
        assert mine.total_count == 2
        assert [r.id for r in mine.requests] == [second.id, first.id]

        incoming = await service_request_service.list_professional_requests(
            db_session, professional, status="accepted"
        )
        assert [r.id for r in incoming.requests] == [first.id]
        assert incoming.total_count == 1

        assert (await service_request_service.list_professional_requests(db_session, client)).total_count == 0

    @pytest.mark.asyncio
    async def test_unknown_status_filter(self, db_session, parties):
        client, _ = await parties()
        with pytest.raises(ValidationError):
            await service_request_service.list_client_requests(db_session, client, status="done")
