"""Services Layer — application services holding the business rules.

Invariants:
    - Services raise typed LibraryError subclasses (core/errors.py), never HTTPException
    - Every mutating operation commits exactly once

Design Decisions:
    - One service per aggregate; cross-aggregate effects (notifications, audit)
      go through the owning service
"""
