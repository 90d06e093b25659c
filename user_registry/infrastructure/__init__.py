"""Infrastructure Layer: database access and cross-cutting concerns.

Invariants:
    - Infrastructure depends on core/ for types and errors, never on api/
    - Driver exceptions are mapped to core errors before leaving this layer
"""
