"""API Layer: FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.create_app (no auto-discovery)
    - Every response body is JSON except /health and static files

Design Decisions:
    - Thin routes: parse input, call one gateway operation, shape the response
"""
