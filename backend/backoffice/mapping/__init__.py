"""Mapping Layer — declarative DTO <-> entity field copying.

Invariants:
    - Mapping never computes business values; resolvers only read related objects
    - Unmapped destination fields keep their defaults
"""
