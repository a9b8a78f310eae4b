"""API Layer: FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Gateway errors are structured JSON; relayed function responses are raw

Design Decisions:
    - Thin routes delegate to services (ADR: ExMA impureim sandwich)
"""
