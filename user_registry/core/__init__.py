"""Core Layer: pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from api/, infrastructure/, models/ or schemas/
    - All functions are pure and deterministic

Design Decisions:
    - Functional core separated from the imperative shell (routes + gateway)
"""
