"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, handlers/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (clock values are passed in)

Design Decisions:
    - Validation rules, paging math and circulation policy live here; the shell
      (services/handlers) orchestrates IO around them
"""
