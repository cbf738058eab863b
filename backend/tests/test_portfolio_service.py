"""
LocalPros Backend — Portfolio Service Tests
=============================================

What we test:
    ✅ Adding images appends in upload order with dense positions
    ✅ Capacity: a batch that would overflow is rejected entirely
    ✅ Invalid files abort the batch and leave no files behind
    ✅ Removing closes the gap; reordering needs a full permutation
    ✅ Clients have no portfolio
"""

import uuid

import pytest

from localpros.config import settings
from localpros.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from localpros.services.portfolio_service import portfolio_service


def _stored_files(root):
    return [p for p in root.rglob("*") if p.is_file()]


class TestAddImages:
    @pytest.mark.asyncio
    async def test_add_in_order(self, db_session, create_professional, png_bytes, jpeg_bytes, storage_root):
        professional = await create_professional()
        portfolio = await portfolio_service.add_images(
            db_session,
            professional,
            [("a.png", png_bytes, None), ("b.jpg", jpeg_bytes, len(jpeg_bytes))],
        )

        assert [image.position for image in portfolio.images] == [0, 1]
        assert portfolio.images[0].image_url.endswith(".png")
        assert portfolio.images[1].image_url.endswith(".jpg")
        assert portfolio.max_images == settings.portfolio_max_images
        assert len(_stored_files(storage_root)) == 2

        again = await portfolio_service.add_images(db_session, professional, [("c.png", png_bytes, None)])
        assert [image.position for image in again.images] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_batch_positions_follow_existing_images(self, db_session, create_professional, png_bytes):
        professional = await create_professional()
        await portfolio_service.add_images(
            db_session, professional, [(f"{n}.png", png_bytes, None) for n in "ab"]
        )
        portfolio = await portfolio_service.add_images(
            db_session, professional, [(f"{n}.png", png_bytes, None) for n in "cde"]
        )
        assert [image.position for image in portfolio.images] == [0, 1, 2, 3, 4]

        listed = await portfolio_service.list_portfolio(db_session, professional.id)
        assert [image.position for image in listed.images] == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_empty_batch(self, db_session, create_professional):
        professional = await create_professional()
        with pytest.raises(ValidationError, match="at least one image"):
            await portfolio_service.add_images(db_session, professional, [])

    @pytest.mark.asyncio
    async def test_overflowing_batch_rejected_whole(self, db_session, create_professional, png_bytes, storage_root):
        professional = await create_professional()
        limit = settings.portfolio_max_images
        await portfolio_service.add_images(
            db_session, professional, [("x.png", png_bytes, None)] * (limit - 1)
        )

        with pytest.raises(ValidationError, match="at most"):
            await portfolio_service.add_images(
                db_session, professional, [("y.png", png_bytes, None)] * 2
            )

        portfolio = await portfolio_service.list_portfolio(db_session, professional.id)
        assert len(portfolio.images) == limit - 1
        assert len(_stored_files(storage_root)) == limit - 1

    @pytest.mark.asyncio
    async def test_invalid_file_aborts_batch(self, db_session, create_professional, png_bytes, storage_root):
        professional = await create_professional()
        with pytest.raises(ValidationError):
            await portfolio_service.add_images(
                db_session,
                professional,
                [("ok.png", png_bytes, None), ("bad.png", b"not an image", None)],
            )

        assert _stored_files(storage_root) == []
        portfolio = await portfolio_service.list_portfolio(db_session, professional.id)
        assert portfolio.images == []

    @pytest.mark.asyncio
    async def test_clients_have_no_portfolio(self, db_session, create_client, png_bytes):
        client = await create_client()
        with pytest.raises(PermissionDeniedError):
            await portfolio_service.add_images(db_session, client, [("a.png", png_bytes, None)])


class TestRemoveAndReorder:
    @pytest.fixture
    def three_images(self, db_session, create_professional, png_bytes):
        async def build():
            professional = await create_professional()
            portfolio = await portfolio_service.add_images(
                db_session, professional, [(f"{n}.png", png_bytes, None) for n in "abc"]
            )
            return professional, [image.id for image in portfolio.images]

        return build

    @pytest.mark.asyncio
    async def test_remove_closes_gap(self, db_session, three_images, storage_root):
        professional, (first, second, third) = await three_images()

        portfolio = await portfolio_service.remove_image(db_session, professional, second)
        assert [image.id for image in portfolio.images] == [first, third]
        assert [image.position for image in portfolio.images] == [0, 1]
        assert len(_stored_files(storage_root)) == 3
        await db_session.commit()
        assert len(_stored_files(storage_root)) == 2

    @pytest.mark.asyncio
    async def test_rollback_keeps_removed_image(self, db_session, three_images, storage_root):
        professional, (first, second, third) = await three_images()
        await db_session.commit()

        await portfolio_service.remove_image(db_session, professional, second)
        await db_session.rollback()

        listed = await portfolio_service.list_portfolio(db_session, professional.id)
        assert [image.id for image in listed.images] == [first, second, third]
        assert [image.position for image in listed.images] == [0, 1, 2]
        assert len(_stored_files(storage_root)) == 3

    @pytest.mark.asyncio
    async def test_remove_someone_elses_image(self, db_session, three_images, create_professional):
        _, (first, _, _) = await three_images()
        other = await create_professional(email="outro@example.com")
        with pytest.raises(NotFoundError):
            await portfolio_service.remove_image(db_session, other, first)

    @pytest.mark.asyncio
    async def test_reorder(self, db_session, three_images):
        professional, (first, second, third) = await three_images()

        portfolio = await portfolio_service.reorder(db_session, professional, [third, first, second])
        assert [image.id for image in portfolio.images] == [third, first, second]
        assert [image.position for image in portfolio.images] == [0, 1, 2]

        listed = await portfolio_service.list_portfolio(db_session, professional.id)
        assert [image.id for image in listed.images] == [third, first, second]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("shape", ["missing", "duplicate", "foreign"])
    async def test_reorder_requires_permutation(self, db_session, three_images, shape):
        professional, (first, second, third) = await three_images()
        image_ids = {
            "missing": [first, second],
            "duplicate": [first, first, second],
            "foreign": [first, second, uuid.uuid4()],
        }[shape]
        with pytest.raises(ValidationError, match="exactly once"):
            await portfolio_service.reorder(db_session, professional, image_ids)
