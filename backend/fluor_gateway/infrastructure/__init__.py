"""Infrastructure Layer: external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never holds domain decisions: it fetches, forwards and maps errors
    - All external calls wrapped with timeout/error mapping (upstream.py)

Design Decisions:
    - Thin wrappers over raw httpx clients (ADR: ExMA single responsibility)
"""
