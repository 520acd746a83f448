from __future__ import annotations

from typing import Any

from collectable.Support.Collection import Collection, CollectionTarget
from collectable.Support.Types import TypeTag


# Collection Helpers
def collect(items: Any = None) -> Collection[Any]:
    """Create collection instance."""
    return Collection(items)


def collect_into(collection_type: CollectionTarget, items: Any = None) -> Collection[Any]:
    """Create an instance of the given collection type."""
    return Collection.new_collection_of_type(collection_type, items)


def collect_typed(key_type: TypeTag, value_type: TypeTag, items: Any = None) -> Collection[Any]:
    """Create collection constrained to key and value types."""
    return Collection.new_typed_collection(key_type, value_type, items)


def collect_typed_values(value_type: TypeTag, items: Any = None) -> Collection[Any]:
    """Create collection whose values must match a type."""
    return Collection.new_typed_value_collection(value_type, items)


def collect_typed_keys(key_type: TypeTag, items: Any = None) -> Collection[Any]:
    """Create collection whose keys must match a type."""
    return Collection.new_typed_key_collection(key_type, items)
