"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All error responses use the problem-details shape

Design Decisions:
    - Thin routes delegate to handlers; no business rules in routes
"""
