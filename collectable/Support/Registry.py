from __future__ import annotations

from typing import Any, Dict, Generic, List, Set, Type, TypeVar

from collectable.Support.Exceptions import NotACollection, UnknownType
from collectable.Support.Types import qualified_name, resolve_class
from collectable.Utils.Logger import get_logger

C = TypeVar("C")


class CollectionRegistry(Generic[C]):
    """
    Name to class lookup table for collection types.

    Classes are registered under their dotted path and their bare class
    name. A bare name shared by classes from different modules stops
    resolving; those classes are reached through their dotted paths.
    """

    def __init__(self, contract: Type[C]) -> None:
        self._contract = contract
        self._bindings: Dict[str, Type[C]] = {}
        self._ambiguous: Set[str] = set()
        self.logger = get_logger(__name__)

    @property
    def contract(self) -> Type[C]:
        """The base class every registered type must extend."""
        return self._contract

    def register(self, name: str, concrete: Any) -> None:
        """Register a collection class under a name, replacing any previous binding."""
        self._bindings[name] = self.ensure_collection(concrete)
        self._ambiguous.discard(name)
        self.logger.debug("Registered collection type", {"name": name})

    def register_class(self, concrete: Type[C]) -> None:
        """Register a class under its dotted path and, unless taken by another class, its name."""
        path = qualified_name(concrete)
        self.register(path, concrete)

        name = concrete.__qualname__
        if name == path or name in self._ambiguous:
            return

        bound = self._bindings.get(name)
        if bound is not None and qualified_name(bound) != path:
            del self._bindings[name]
            self._ambiguous.add(name)
            self.logger.debug("Ambiguous collection type name", {"name": name})
            return

        self.register(name, concrete)

    def forget(self, name: str) -> None:
        """Remove a registered name."""
        self._bindings.pop(name, None)
        self._ambiguous.discard(name)

    def has(self, name: str) -> bool:
        """Check if a name is registered."""
        return name in self._bindings

    def names(self) -> List[str]:
        """Get all registered names."""
        return sorted(self._bindings)

    def ensure_collection(self, concrete: Any) -> Type[C]:
        """Check that a class conforms to the collection contract."""
        if not isinstance(concrete, type) or not issubclass(concrete, self._contract):
            raise NotACollection(concrete)
        return concrete

    def resolve(self, target: Any) -> Type[C]:
        """Resolve a class, a registered name or a dotted path to a collection class."""
        if isinstance(target, type):
            return self.ensure_collection(target)

        if not isinstance(target, str):
            raise UnknownType(target)

        if target in self._bindings:
            return self._bindings[target]

        if target in self._ambiguous:
            raise UnknownType(target, "Several collection classes share this name; use the dotted path.")

        return self.ensure_collection(resolve_class(target))
