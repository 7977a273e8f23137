"""
Foodies Backend — Application Package Initializer
===================================================

What: The `foodies` package: a REST API for sharing recipes, saving other
      people's recipes as favorites and following their authors.
Who:  Imported by uvicorn (foodies.main:app), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Validation + Auth dependencies    │  ← 400 / 401 before any service
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← ownership, conflicts, paging
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
