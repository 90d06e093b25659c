"""User Registry: a CRUD web service for user records.

Invariants:
    - Package root performs no IO on import
"""

__version__ = "1.0.0"
