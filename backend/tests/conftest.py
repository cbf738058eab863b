"""
LocalPros Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh SQLite database (aiosqlite) and a private
       storage directory; API tests run the real app through httpx's
       ASGITransport with get_db_session overridden to that database.

Fixture Hierarchy:
    Function-scoped:
    ├── db_engine / session_factory / db_session: fresh schema per test
    ├── storage_root: temp dir wired into the file_service singleton
    ├── app / client: FastAPI app + HTTPX AsyncClient
    ├── png_bytes / jpeg_bytes: tiny images with real magic numbers
    ├── client_payload / professional_payload: registration body factories
    └── create_client / create_professional: service-level user factories
"""

import base64
import os
import tempfile
from typing import AsyncGenerator

# Override settings for testing BEFORE any localpros imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="localpros_test_db_"), "import.db"
)
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="localpros_test_storage_")
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from localpros.database import get_db_session, init_models  # noqa: E402
from localpros.schemas.user import (  # noqa: E402
    RegisterClientRequest,
    RegisterProfessionalRequest,
)
from localpros.services.account_service import account_service  # noqa: E402
from localpros.services.file_service import file_service  # noqa: E402

# 1x1 PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
# Minimal JPEG: SOI + JFIF APP0 + EOI
JPEG_BYTES = (
    b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
    b"\xff\xd9"
)


def sniff_mime_type(content: bytes) -> str:
    """Signature-based stand-in for libmagic in tests that don't exercise it."""
    if content.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if content.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    return "text/plain"


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for service-level tests; flushes are visible within the test."""
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Storage
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def storage_root(tmp_path, monkeypatch):
    """
    Points the file_service singleton at a per-test directory and replaces
    its libmagic call with signature sniffing. test_file_service.py builds
    its own FileService instances to exercise libmagic itself.
    """
    root = (tmp_path / "storage").resolve()
    root.mkdir()
    monkeypatch.setattr(file_service, "storage_root", root)
    monkeypatch.setattr(file_service, "_detect_mime_type", sniff_mime_type)
    return root


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes():
    return JPEG_BYTES


# ══════════════════════════════════════════════════════════════════════════
# Application
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    from localpros.main import create_app

    application = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient routed straight into the app.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


# ══════════════════════════════════════════════════════════════════════════
# Users
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client_payload():
    def build(**overrides) -> dict:
        payload = {
            "name": "Ana Souza",
            "email": "ana@example.com",
            "password": "secret123",
            "confirm_password": "secret123",
            "phone": "(11) 98765-4321",
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def professional_payload(client_payload):
    def build(address=None, **overrides) -> dict:
        payload = client_payload(
            name="Carlos Lima",
            email="carlos@example.com",
            phone="11912345678",
        )
        payload.update(
            {
                "category": "Eletricista",
                "description": "Instalações e reparos elétricos residenciais",
                "experience": "10 anos",
                "address": {
                    "street": "Av. Paulista",
                    "number": "1000",
                    "complement": "Sala 5",
                    "neighborhood": "Bela Vista",
                    "city": "São Paulo",
                    "state": "SP",
                    "zip_code": "01310100",
                },
            }
        )
        if address:
            payload["address"].update(address)
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def create_client(db_session, client_payload):
    """Registers a client through AccountService; returns the User row."""
    from localpros.models.user import User

    async def create(**overrides) -> User:
        auth = await account_service.register_client(
            db_session, RegisterClientRequest(**client_payload(**overrides))
        )
        return await db_session.get(User, auth.user.id)

    return create


@pytest.fixture
def create_professional(db_session, professional_payload):
    """Registers a professional through AccountService; returns the User row."""
    from localpros.models.user import User

    async def create(address=None, **overrides) -> User:
        auth = await account_service.register_professional(
            db_session,
            RegisterProfessionalRequest(**professional_payload(address=address, **overrides)),
        )
        return await db_session.get(User, auth.user.id)

    return create
