from __future__ import annotations

from typing import Any, Callable, ClassVar, Dict, Generic, Hashable, Iterable, Iterator, List, Mapping, Optional, Self, Tuple, Union
from functools import cmp_to_key
import inspect
import re
import json
import random

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from collectable.Enums.CollectionEnums import FilterMode, SortFlag
from collectable.Support.Config import config
from collectable.Support.Registry import CollectionRegistry
from collectable.Support.Types import (
    UNCONSTRAINED,
    Arrayable,
    JsonSerializable,
    T,
    TypeConstraint,
    TypeTag,
    is_blank,
)
from collectable.Utils.Logger import get_logger

Entry = Tuple[Hashable, Any]
Comparator = Callable[[Any, Any], int]
SortSpec = Union[SortFlag, str, Comparator, None]
CollectionTarget = Union[str, type, 'Collection[Any]']

logger = get_logger(__name__)

_MISSING = object()

_NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


class Collection(Generic[T]):
    """
    Ordered key/value collection with optional key and value types.

    Subclasses fix their constraints through the ``key_type`` and
    ``value_type`` class attributes and may derive keys from values by
    overriding ``key_strategy``. Every entry, including those passed to the
    constructor, goes through ``offset_set`` where the constraints are
    checked. Mutating methods change the collection in place and return
    nothing; every other method returns a new collection of the same class
    carrying the same constraint.
    """

    key_type: ClassVar[TypeTag] = None
    value_type: ClassVar[TypeTag] = None
    _class_constraint: ClassVar[TypeConstraint] = UNCONSTRAINED

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._class_constraint = TypeConstraint.of(cls.key_type, cls.value_type)
        registry.register_class(cls)

    def __init__(self, items: Any = None, *, constraint: Optional[TypeConstraint] = None) -> None:
        self._items: Dict[Hashable, T] = {}
        self._next_index = 0
        self._constraint = constraint if constraint is not None else self._class_constraint

        for key, value in self._normalize(items):
            self.offset_set(key, value)

    @classmethod
    def _normalize(cls, items: Any) -> List[Entry]:
        """Turn any collectable input into ordered key/value pairs."""
        if items is None:
            return []
        if isinstance(items, Collection):
            return list(items._items.items())
        if isinstance(items, Mapping):
            return list(items.items())
        if isinstance(items, JsonSerializable):
            return cls._normalize(items.json_serialize())
        if isinstance(items, Arrayable):
            return cls._normalize(items.to_array())
        if isinstance(items, BaseModel):
            return cls._normalize(items.model_dump())
        if isinstance(items, (str, bytes, bytearray)):
            return [(0, items)]
        if isinstance(items, Iterable):
            return list(enumerate(items))
        return [(0, items)]

    @property
    def constraint(self) -> TypeConstraint:
        """The key and value types of this collection."""
        return self._constraint

    def key_strategy(self, value: T) -> Optional[Hashable]:
        """Derive a key from a value; None leaves the key as given."""
        return None

    # Typed factories
    @classmethod
    def new_typed_collection(cls, key_type: TypeTag, value_type: TypeTag, data: Any = None) -> Self:
        """Create a collection constrained to the given key and value types."""
        return cls(data, constraint=TypeConstraint.of(key_type, value_type))

    @classmethod
    def new_typed_key_collection(cls, key_type: TypeTag, data: Any = None) -> Self:
        """Create a collection whose keys must match a type."""
        return cls.new_typed_collection(key_type, None, data)

    @classmethod
    def new_typed_value_collection(cls, value_type: TypeTag, data: Any = None) -> Self:
        """Create a collection whose values must match a type."""
        return cls.new_typed_collection(None, value_type, data)

    @staticmethod
    def new_collection_of_type(target: CollectionTarget, items: Any = None) -> Collection[Any]:
        """
        Get a new collection of a given type.

        The target may be a collection class, a registered name, a dotted
        import path, or a collection instance whose class and constraint are
        reused.
        """
        if isinstance(target, Collection):
            concrete, constraint = type(target), target.constraint
        else:
            concrete, constraint = registry.resolve(target), None

        logger.debug("Collecting into type", {"type": concrete.__qualname__})
        return concrete(items, constraint=constraint)

    # Conversion
    def into(self, target: CollectionTarget) -> Collection[Any]:
        """Copy entries into a new collection of the given type."""
        return self.new_collection_of_type(target, self._items)

    def map_into(self, callback: Callable[..., Any], target: CollectionTarget) -> Collection[Any]:
        """Map values into a new collection of the given type."""
        call = _with_key(callback)
        return self.new_collection_of_type(target, {key: call(value, key) for key, value in self._items.items()})

    # Array access
    def offset_set(self, key: Optional[Hashable], value: T) -> None:
        """Set a value; a key derived by the key strategy wins over the given one."""
        derived = self.key_strategy(value)
        if derived is not None:
            key = derived
        if key is None:
            key = self._next_index

        self._constraint.check_key(key)
        self._constraint.check_value(value, key)

        self._items[key] = value
        if _is_index(key) and key >= self._next_index:  # type: ignore[operator]
            self._next_index = key + 1  # type: ignore[operator]

    def offset_get(self, key: Hashable) -> T:
        """Get a value by key."""
        return self._items[key]

    def offset_exists(self, key: Hashable) -> bool:
        """Check if a key exists."""
        return key in self._items

    def offset_unset(self, key: Hashable) -> None:
        """Remove a key."""
        del self._items[key]

    def has(self, key: Hashable) -> bool:
        """Check if a key exists."""
        return self.offset_exists(key)

    # Adding/Removing items
    def append(self, value: T) -> None:
        """Add a value under its derived key, or the next integer index."""
        self.offset_set(None, value)

    def push(self, *values: T) -> None:
        """Append values in order."""
        for value in values:
            self.append(value)

    def pop(self) -> Optional[T]:
        """Remove and return the last value, None when empty."""
        if not self._items:
            return None

        value = self._items.pop(next(reversed(self._items)))
        self._next_index = max((key for key in self._items if _is_index(key)), default=-1) + 1  # type: ignore[type-var]
        return value

    # Core methods
    def all(self) -> Dict[Hashable, T]:
        """Get a copy of the key/value entries."""
        return self._items.copy()

    def keys(self) -> List[Hashable]:
        return list(self._items.keys())

    def values(self) -> List[T]:
        return list(self._items.values())

    def items(self) -> List[Tuple[Hashable, T]]:
        return list(self._items.items())

    def count(self) -> int:
        """Get the number of items."""
        return len(self._items)

    def is_empty(self) -> bool:
        """Check if the collection is empty."""
        return len(self._items) == 0

    def is_not_empty(self) -> bool:
        """Check if the collection is not empty."""
        return not self.is_empty()

    # Transforming
    def map(self, callback: Callable[..., Any]) -> Self:
        """Transform values, keeping their keys, into a collection of the same type."""
        call = _with_key(callback)
        return self._new_instance((key, call(value, key)) for key, value in self._items.items())

    def slice(self, offset: int, length: Optional[int] = None) -> Self:
        """
        Get a run of entries by position.

        A negative offset counts from the end. Without a length the run goes
        to the end; a negative length stops that many entries before the end.
        Integer keys are renumbered from zero unless the keys are typed.
        """
        entries = list(self._items.items())
        total = len(entries)

        start = offset if offset >= 0 else max(total + offset, 0)
        if length is None:
            stop = total
        elif length >= 0:
            stop = start + length
        else:
            stop = total + length

        selected = entries[start:stop] if stop > start else []
        if not self._constraint.is_key_constrained:
            selected = _renumber_indexes(selected)
        return self._new_instance(selected)

    def filter(self, callback: Optional[Callable[..., Any]] = None, mode: Union[FilterMode, str] = FilterMode.VALUE) -> Self:
        """
        Filter entries, keeping their keys.

        Without a callback, blank values are removed. The mode decides whether
        the callback receives the value, the key, or the value and the key.
        """
        if callback is None:
            return self._new_instance((key, value) for key, value in self._items.items() if not is_blank(value))

        mode = FilterMode.from_value(mode)
        if mode is FilterMode.KEY:
            keep = lambda key, value: callback(key)
        elif mode is FilterMode.BOTH:
            keep = lambda key, value: callback(value, key)
        else:
            keep = lambda key, value: callback(value)

        return self._new_instance((key, value) for key, value in self._items.items() if keep(key, value))

    def merge(self, other: Any) -> Self:
        """Get a copy with the values of another collection appended."""
        merged = self._new_instance(self._items.items())
        values = other.values() if isinstance(other, Collection) else [value for _, value in self._normalize(other)]
        for value in values:
            merged.append(value)
        return merged

    # Sorting
    def sort(self, flags: SortSpec = None) -> Self:
        """Sort by value; renumbers keys unless the keys are typed."""
        if callable(flags):
            return self.usort(flags)
        return self._sorted(_comparator_for(flags), self._constraint.is_key_constrained)

    def asort(self, flags: SortSpec = None) -> Self:
        """Sort by value, keeping key associations."""
        if callable(flags):
            return self.uasort(flags)
        return self._sorted(_comparator_for(flags), True)

    def usort(self, callback: Comparator) -> Self:
        """Sort with a three-way comparator; renumbers keys unless the keys are typed."""
        return self._sorted(callback, self._constraint.is_key_constrained)

    def uasort(self, callback: Comparator) -> Self:
        """Sort with a three-way comparator, keeping key associations."""
        return self._sorted(callback, True)

    def shuffle(self, seed: Optional[int] = None) -> Self:
        """Shuffle values into a renumbered collection; a seed makes the order repeatable."""
        values = list(self._items.values())
        random.Random(seed).shuffle(values)
        return self._new_instance(enumerate(values))

    def _sorted(self, comparator: Comparator, preserve_keys: bool) -> Self:
        entries = sorted(self._items.items(), key=cmp_to_key(lambda a, b: comparator(a[1], b[1])))
        if not preserve_keys:
            return self._new_instance(enumerate(value for _, value in entries))
        return self._new_instance(entries)

    # Searching
    def first(self, callback: Optional[Callable[..., Any]] = None, default: Any = None) -> Any:
        """Get the first non-blank value, or the first value the callback accepts."""
        return self._find(self._items.items(), callback, default)

    def last(self, callback: Optional[Callable[..., Any]] = None, default: Any = None) -> Any:
        """Get the last non-blank value, or the last value the callback accepts."""
        return self._find(reversed(self._items.items()), callback, default)

    def contains(self, check: Any) -> bool:
        """Check for a value with strict equality, or for any value a callback accepts."""
        if callable(check):
            return self.first(check, _MISSING) is not _MISSING
        return any(_strictly_equal(value, check) for value in self._items.values())

    def _find(self, entries: Iterable[Entry], callback: Optional[Callable[..., Any]], default: Any) -> Any:
        if callback is None:
            for _, value in entries:
                if not is_blank(value):
                    return value
            return default

        call = _with_key(callback)
        for key, value in entries:
            if call(value, key):
                return value
        return default

    # Aggregating
    def each(self, callback: Callable[..., Any]) -> None:
        """Call the callback with every value and key."""
        call = _with_key(callback)
        for key, value in self._items.items():
            call(value, key)

    def reduce(self, callback: Callable[[Any, T], Any], initial: Any = None) -> Any:
        """Fold values from left to right."""
        carry = initial
        for value in self._items.values():
            carry = callback(carry, value)
        return carry

    def implode(self, glue: Optional[str] = None, callback: Optional[Callable[..., Any]] = None) -> str:
        """Join values into a string, optionally mapping them first."""
        if glue is None:
            glue = config.get('collection.implode_glue', '')

        if callback is None:
            parts: Iterable[Any] = self._items.values()
        else:
            call = _with_key(callback)
            parts = (call(value, key) for key, value in self._items.items())

        return glue.join(str(part) for part in parts)

    # Serialization
    def to_dict(self) -> Dict[Hashable, T]:
        """Convert collection to a key/value dictionary."""
        return self.all()

    def to_list(self) -> List[T]:
        """Convert to list."""
        return self.values()

    def json_serialize(self) -> Union[List[T], Dict[Hashable, T]]:
        """Get the entries as a list when keys are 0..n-1 in order, otherwise as a dict."""
        if all(key == index and _is_index(key) for index, key in enumerate(self._items)):
            return list(self._items.values())
        return dict(self._items)

    def to_json(self, **kwargs: Any) -> str:
        """Convert collection to JSON."""
        return json.dumps(self.json_serialize(), default=_json_default, **kwargs)

    def _new_instance(self, entries: Iterable[Entry]) -> Self:
        """Build a collection of the same class and constraint."""
        return type(self)(dict(entries), constraint=self._constraint)

    # Magic methods
    def __iter__(self) -> Iterator[T]:
        """Iterate over values."""
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, key: Hashable) -> T:
        return self.offset_get(key)

    def __setitem__(self, key: Optional[Hashable], value: T) -> None:
        self.offset_set(key, value)

    def __delitem__(self, key: Hashable) -> None:
        self.offset_unset(key)

    def __contains__(self, value: Any) -> bool:
        """Check if a value is in the collection."""
        return value in self._items.values()

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Collection):
            return NotImplemented
        return (
            type(self) is type(other)
            and self._constraint == other._constraint
            and list(self._items.items()) == list(other._items.items())
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._items!r})"


registry: CollectionRegistry[Collection[Any]] = CollectionRegistry(Collection)
registry.register_class(Collection)


# Helper functions
def _is_index(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def _renumber_indexes(entries: Iterable[Entry]) -> List[Entry]:
    """Renumber integer keys from zero, keeping other keys."""
    renumbered: List[Entry] = []
    index = 0
    for key, value in entries:
        if _is_index(key):
            renumbered.append((index, value))
            index += 1
        else:
            renumbered.append((key, value))
    return renumbered


def _with_key(callback: Callable[..., Any]) -> Callable[[Any, Hashable], Any]:
    """Adapt a callback so it can always be called with (value, key)."""
    try:
        sig = inspect.signature(callback)
    except (TypeError, ValueError):
        return lambda value, key: callback(value)

    # Optional parameters of classes and builtins are modifiers, not keys
    count_defaulted = not (isinstance(callback, type) or inspect.isbuiltin(callback))

    positional = 0
    for param in sig.parameters.values():
        if param.kind is param.VAR_POSITIONAL:
            return callback
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            if count_defaulted or param.default is param.empty:
                positional += 1

    if positional >= 2:
        return callback
    return lambda value, key: callback(value)


def _strictly_equal(left: Any, right: Any) -> bool:
    return left is right or (type(left) is type(right) and left == right)


def _json_default(value: Any) -> Any:
    if isinstance(value, JsonSerializable):
        return value.json_serialize()
    return to_jsonable_python(value)


# Comparison
def _three_way(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _as_number(value: Any) -> Optional[Union[int, float]]:
    """Get the number a value represents, None when it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and _NUMERIC_STRING.match(value):
        return float(value)
    return None


def compare_regular(left: Any, right: Any) -> int:
    """Compare numerically when both sides are numeric, otherwise as strings."""
    left_number, right_number = _as_number(left), _as_number(right)
    if left_number is not None and right_number is not None:
        return _three_way(left_number, right_number)
    if isinstance(left, str) or isinstance(right, str):
        return _three_way(str(left), str(right))
    try:
        return _three_way(left, right)
    except TypeError:
        return _three_way(str(left), str(right))


def compare_numeric(left: Any, right: Any) -> int:
    """Compare as numbers, non-numeric values counting as zero."""
    def number(value: Any) -> Union[int, float]:
        if isinstance(value, bool):
            return int(value)
        result = _as_number(value)
        return 0 if result is None else result

    return _three_way(number(left), number(right))


def compare_string(left: Any, right: Any) -> int:
    """Compare string representations."""
    return _three_way(str(left), str(right))


_COMPARATORS: Dict[SortFlag, Comparator] = {
    SortFlag.REGULAR: compare_regular,
    SortFlag.NUMERIC: compare_numeric,
    SortFlag.STRING: compare_string,
}


def _comparator_for(flags: Union[SortFlag, str, None]) -> Comparator:
    if flags is None:
        flags = config.get('collection.default_sort_flag', SortFlag.REGULAR)
    return _COMPARATORS[SortFlag.from_value(flags)]  # type: ignore[index]
