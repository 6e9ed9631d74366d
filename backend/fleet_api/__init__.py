"""
Fleet Management API — Application Package
==========================================

What: Backend for taxi trajectory history, authentication and email reports.
Who:  Imported by uvicorn (`fleet_api.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, mapping, orchestration
    ├─────────────────────────────────────┤
    │      Repositories (Data Access)     │  ← Parameterized async queries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
