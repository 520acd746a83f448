"""
Collection Type System

This module provides the runtime type constraints enforced by collections:
- Primitive type names and their aliases
- Class and protocol based constraints
- Key/value constraint pairs carried by every collection instance
- Protocols for values exposing a canonical array representation
"""

from __future__ import annotations

import builtins
import importlib
from dataclasses import dataclass
from typing import (
    Any,
    Dict,
    Hashable,
    Optional,
    Protocol,
    TypeAlias,
    TypeVar,
    Union,
    runtime_checkable,
)

from collectable.Enums.CollectionEnums import PrimitiveType
from collectable.Support.Exceptions import TypeMismatch, UnknownType
from collectable.Utils.Logger import get_logger

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

TypeTag: TypeAlias = Union[str, type, "TypeSpec", None]

logger = get_logger(__name__)

_PRIMITIVE_CLASSES: Dict[type, PrimitiveType] = {
    bool: PrimitiveType.BOOLEAN,
    int: PrimitiveType.INTEGER,
    float: PrimitiveType.FLOAT,
    str: PrimitiveType.STRING,
    list: PrimitiveType.ARRAY,
    tuple: PrimitiveType.ARRAY,
    dict: PrimitiveType.ARRAY,
    type(None): PrimitiveType.NULL,
}


@runtime_checkable
class Arrayable(Protocol):
    """Protocol for objects that can be converted to arrays."""

    def to_array(self) -> Any:
        """Convert to array representation."""
        ...


@runtime_checkable
class JsonSerializable(Protocol):
    """Protocol for objects exposing their JSON representation."""

    def json_serialize(self) -> Any:
        """Get the structure to encode."""
        ...


def primitive_type_of(value: Any) -> Optional[PrimitiveType]:
    """Get the primitive type of a value, None for objects."""
    if value is None:
        return PrimitiveType.NULL
    # bool first: it is an int subclass
    if isinstance(value, bool):
        return PrimitiveType.BOOLEAN
    if isinstance(value, int):
        return PrimitiveType.INTEGER
    if isinstance(value, float):
        return PrimitiveType.FLOAT
    if isinstance(value, str):
        return PrimitiveType.STRING
    if isinstance(value, (list, tuple, dict)):
        return PrimitiveType.ARRAY
    return None


def qualified_name(cls: type) -> str:
    """Get the dotted name of a class."""
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def type_name(value: Any) -> str:
    """Get the primitive name or class name of a value."""
    primitive = primitive_type_of(value)
    if primitive is not None:
        return primitive.value
    return qualified_name(type(value))


def is_blank(value: Any) -> bool:
    """Check loose emptiness: None, False, zero, '', '0' and empty containers."""
    if isinstance(value, str):
        return value in ("", "0")
    return not value


def resolve_class(path: str) -> type:
    """
    Resolve a dotted import path (or builtin name) to a class.

    Relative paths and empty segments are rejected before importing. Errors
    raised by the imported module's own code propagate unchanged.
    """
    if not all(segment.isidentifier() for segment in path.split(".")):
        raise UnknownType(path)

    module_name, _, attribute = path.rpartition(".")
    if not module_name:
        target = getattr(builtins, attribute, None)
    else:
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise UnknownType(path) from e
        target = getattr(module, attribute, None)

    if not isinstance(target, type):
        raise UnknownType(path)
    return target


@dataclass(frozen=True)
class TypeSpec:
    """A single type tag: either a primitive name or a class."""

    name: str
    primitive: Optional[PrimitiveType] = None
    klass: Optional[type] = None

    @classmethod
    def parse(cls, tag: TypeTag) -> Optional[TypeSpec]:
        """Parse a type tag, None meaning unconstrained."""
        if tag is None or isinstance(tag, TypeSpec):
            return tag

        if isinstance(tag, type):
            primitive = _PRIMITIVE_CLASSES.get(tag)
            if primitive is not None:
                return cls(primitive.value, primitive=primitive)
            return cls(qualified_name(tag), klass=tag)

        if isinstance(tag, str):
            primitive = PrimitiveType.try_from(tag)
            if primitive is not None:
                return cls(primitive.value, primitive=primitive)
            klass = resolve_class(tag)
            return cls(qualified_name(klass), klass=klass)

        raise UnknownType(tag)

    def accepts(self, value: Any) -> bool:
        """Check whether a value satisfies this type."""
        if self.primitive is not None:
            return primitive_type_of(value) is self.primitive
        return isinstance(value, self.klass)  # type: ignore[arg-type]

    def check(self, value: Any, role: str, key: Optional[Hashable] = None) -> None:
        """Raise TypeMismatch unless the value satisfies this type."""
        if self.accepts(value):
            return

        actual = type_name(value)
        logger.debug("Rejected collection entry", {"role": role, "expected": self.name, "actual": actual})
        raise TypeMismatch(role, self.name, actual, key)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TypeConstraint:
    """Key and value types shared by a collection and everything derived from it."""

    key: Optional[TypeSpec] = None
    value: Optional[TypeSpec] = None

    @classmethod
    def of(cls, key_type: TypeTag = None, value_type: TypeTag = None) -> TypeConstraint:
        """Build a constraint from raw type tags."""
        return cls(TypeSpec.parse(key_type), TypeSpec.parse(value_type))

    @property
    def is_key_constrained(self) -> bool:
        return self.key is not None

    @property
    def is_value_constrained(self) -> bool:
        return self.value is not None

    def check_key(self, key: Hashable) -> None:
        if self.key is not None:
            self.key.check(key, "key")

    def check_value(self, value: Any, key: Optional[Hashable] = None) -> None:
        if self.value is not None:
            self.value.check(value, "value", key)

    def __repr__(self) -> str:
        return f"TypeConstraint(key={self.key}, value={self.value})"


UNCONSTRAINED = TypeConstraint()


__all__ = [
    "T",
    "K",
    "V",
    "TypeTag",
    "Arrayable",
    "JsonSerializable",
    "primitive_type_of",
    "qualified_name",
    "type_name",
    "is_blank",
    "resolve_class",
    "TypeSpec",
    "TypeConstraint",
    "UNCONSTRAINED",
]
