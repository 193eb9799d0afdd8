"""
Atomsmiths Backend — Application Package Initializer
=====================================================

What: Marks the `app` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is layered the same way for every resource:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, dispatch shim
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, queries, aggregates
    ├─────────────────────────────────────┤
    │   Collections & Schemas (Data)      │  ← Collection names + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Cached Motor client
    └─────────────────────────────────────┘

    Routes never touch collections directly; services never build HTTP responses.
"""

__version__ = "1.0.0"
