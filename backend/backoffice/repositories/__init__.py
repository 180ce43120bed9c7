"""Repositories — async SQLAlchemy data access, one class per aggregate.

Invariants:
    - Repositories flush but never commit; services own the transaction boundary
    - Paged queries return (items, total_count)
"""
