"""Handlers — one method per use case: validate -> map -> service -> map.

Invariants:
    - Validation runs before any IO; violations raise ValidationFailedError
    - Handlers return response DTOs or PagedResult, never ORM objects
"""
