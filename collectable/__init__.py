from .Support import (
    Collection,
    CollectionException,
    NotACollection,
    TypeConstraint,
    TypeMismatch,
    UnknownType,
    config,
    registry,
)
from .Enums import FilterMode, PrimitiveType, SortFlag
from .Helpers import collect, collect_into, collect_typed, collect_typed_keys, collect_typed_values

__version__ = "1.0.0"

__all__ = [
    "Collection",
    "CollectionException",
    "NotACollection",
    "TypeConstraint",
    "TypeMismatch",
    "UnknownType",
    "config",
    "registry",
    "FilterMode",
    "PrimitiveType",
    "SortFlag",
    "collect",
    "collect_into",
    "collect_typed",
    "collect_typed_keys",
    "collect_typed_values",
]
