"""Pydantic Schemas: wire models for the registry and view models for the API.

Invariants:
    - Schemas validate at system boundary (registry responses, admin writes)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Registry read models are frozen: the gateway treats them as snapshots
"""
