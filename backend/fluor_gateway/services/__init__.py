"""Services Layer: orchestration of core decisions around infrastructure IO.

Invariants:
    - Services hold no state between calls (registry is the source of truth)
    - Pure decisions (routing, status) live in core/, services only sequence IO around them

Design Decisions:
    - One service per concern: invocation, aggregation, guarded writes (ADR: ExMA no god objects)
"""
