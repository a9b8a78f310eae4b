"""Fluor Gateway: trigger-based invocation gateway and status aggregator.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
