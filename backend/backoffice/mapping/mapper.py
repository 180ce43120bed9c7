"""Mapper — declarative object-to-object field copying between DTOs and ORM entities.

Invariants:
    - A map must be registered (create_map) before use; unknown pairs raise LookupError
    - Destination fields are copied by name from the source; missing source fields are skipped
      so the destination keeps its default
    - Resolvers (dest_field -> callable(source)) override convention for that field
    - Enum values are stored as their plain value when the destination is an ORM entity

Design Decisions:
    - Destination field discovery: pydantic models via model_fields, ORM classes via
      SQLAlchemy column attributes (relationships are never written by the mapper)
    - map_onto copies into an existing instance: the update path for tracked entities
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, TypeVar

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect

T = TypeVar("T")

Resolver = Callable[[Any], Any]


@dataclass
class TypeMap:
    source: type
    dest: type
    fields: tuple[str, ...]
    resolvers: dict[str, Resolver] = field(default_factory=dict)


def _dest_fields(dest: type) -> tuple[str, ...]:
    if isinstance(dest, type) and issubclass(dest, BaseModel):
        return tuple(dest.model_fields)
    mapper = sa_inspect(dest, raiseerr=False)
    if mapper is None:
        raise TypeError(f"{dest.__name__} is neither a pydantic model nor a mapped class")
    return tuple(attr.key for attr in mapper.column_attrs)


def _is_pydantic(tp: type) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseModel)


_MISSING = object()


class MappingProfile:
    """Registry of source -> destination type maps."""

    def __init__(self) -> None:
        self._maps: dict[tuple[type, type], TypeMap] = {}

    def create_map(
        self,
        source: type,
        dest: type,
        *,
        exclude: tuple[str, ...] = (),
        **resolvers: Resolver,
    ) -> TypeMap:
        fields = tuple(f for f in _dest_fields(dest) if f not in exclude)
        unknown = set(resolvers) - set(fields)
        if unknown:
            raise ValueError(
                f"Resolvers for unknown fields on {dest.__name__}: {sorted(unknown)}",
            )
        type_map = TypeMap(source, dest, fields, dict(resolvers))
        self._maps[(source, dest)] = type_map
        return type_map

    def _find(self, source_type: type, dest: type) -> TypeMap:
        for klass in source_type.__mro__:
            type_map = self._maps.get((klass, dest))
            if type_map is not None:
                return type_map
        raise LookupError(
            f"No mapping registered from {source_type.__name__} to {dest.__name__}",
        )

    def _values(self, type_map: TypeMap, source: Any) -> dict[str, Any]:
        to_orm = not _is_pydantic(type_map.dest)
        values: dict[str, Any] = {}
        for name in type_map.fields:
            resolver = type_map.resolvers.get(name)
            value = resolver(source) if resolver else getattr(source, name, _MISSING)
            if value is _MISSING:
                continue
            if to_orm and isinstance(value, Enum):
                value = value.value
            values[name] = value
        return values

    def map(self, source: Any, dest: type[T]) -> T:
        type_map = self._find(type(source), dest)
        return dest(**self._values(type_map, source))

    def map_many(self, sources: list, dest: type[T]) -> list[T]:
        return [self.map(s, dest) for s in sources]

    def map_onto(self, source: Any, target: T) -> T:
        type_map = self._find(type(source), type(target))
        for name, value in self._values(type_map, source).items():
            setattr(target, name, value)
        return target
