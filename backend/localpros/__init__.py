"""
LocalPros Backend — Application Package Initializer
===================================================

What: Marks the `localpros` directory as a Python package.
Who:  Imported by uvicorn (`localpros.main:app`), Alembic and pytest.

Architecture Note:
    The backend is layered the same way in every feature:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← accounts, directory, requests
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the ORM directly; services never build HTTP responses.
"""

__version__ = "1.0.0"
