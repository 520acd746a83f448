from .Config import config, ConfigRepository
from .Exceptions import CollectionException, TypeMismatch, UnknownType, NotACollection
from .Types import TypeConstraint, TypeSpec, Arrayable, JsonSerializable
from .Registry import CollectionRegistry
from .Collection import Collection, registry

__all__ = [
    "config",
    "ConfigRepository",
    "CollectionException",
    "TypeMismatch",
    "UnknownType",
    "NotACollection",
    "TypeConstraint",
    "TypeSpec",
    "Arrayable",
    "JsonSerializable",
    "CollectionRegistry",
    "Collection",
    "registry",
]
