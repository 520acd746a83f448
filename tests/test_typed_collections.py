"""Test Typed Collections

This test suite validates key and value constraints, their preservation
across derived collections, and conversion between collection types.
"""

from __future__ import annotations

import pytest
from datetime import datetime
from types import SimpleNamespace
from typing import Any, Callable, Protocol, runtime_checkable
from pydantic import BaseModel

from collectable import Collection, NotACollection, TypeConstraint, TypeMismatch, UnknownType, registry
from collectable.Support.Types import qualified_name


@runtime_checkable
class Named(Protocol):
    name: str


class User(BaseModel):
    id: int


class StringCollection(Collection[str]):
    value_type = 'string'


class IntCollection(Collection[int]):
    value_type = 'integer'


class DateCollection(Collection[datetime]):
    key_type = 'string'
    value_type = datetime


TYPED_INPUTS = [
    ([[], [], [], []], None, 'array'),
    ([8, 9, 3, 4, 1, 6, 2, 10, 9, 5, 7], None, 'integer'),
    (['f', 'b', 'e', 'c', 'd', 'a'], 'integer', 'string'),
    (Collection([4, 3, 5, 1, 2, 6]), 'integer', None),
    ({'a': 1.5, 'b': 2.5}, 'string', 'float'),
    ([datetime(2024, 1, 1), datetime(2024, 6, 1)], int, datetime),
    ([User(id=1)], 'int', User),
    ([SimpleNamespace(name='x')], None, Named),
    ([True, False], None, 'bool'),
    ([None], None, 'null'),
]

MISMATCHED_INPUTS = [
    ([1, 2, 3, 4, 5, 6, 7, 8, 9, 0], 'string', 'string'),
    ([1, 2, 3, 4, 5, 6, 7, 8, 9, 0], 'integer', 'string'),
    ([1, 2, 3, 4, 5, 6, 7, 8, 9, 0], 'string', 'integer'),
    ([1, 2, 3, 4, 5, 6, 7, 8, 9, 0], 'string', None),
    ([1, 2, 3, 4, 5, 6, 7, 8, 9, 0], None, 'string'),
    ([datetime(2024, 1, 1), object()], datetime, 'int'),
    ([datetime(2024, 1, 1), object()], None, datetime),
    ({'a': 'b', 'c': 'd'}, 'integer', None),
    ({'a': 'b', 'c': 'd'}, None, 'integer'),
    ([True], None, 'integer'),
    ([1], None, 'float'),
    ([{'id': 1}], None, User),
    ([object()], None, Named),
]

DERIVATIONS = [
    lambda collection: collection.map(lambda value: value * 2),
    lambda collection: collection.filter(),
    lambda collection: collection.slice(1),
    lambda collection: collection.sort(),
    lambda collection: collection.asort(),
    lambda collection: collection.usort(lambda a, b: a - b),
    lambda collection: collection.uasort(lambda a, b: a - b),
    lambda collection: collection.shuffle(3),
    lambda collection: collection.merge([9]),
]


class TestTypedFactories:
    """Test suite for typed collection factories."""

    @pytest.mark.parametrize("data,key_type,value_type", TYPED_INPUTS)
    def test_matching_input_is_accepted(self, data: Any, key_type: Any, value_type: Any) -> None:
        """Entries matching the declared types are stored."""
        collection = Collection.new_typed_collection(key_type, value_type, data)

        assert len(collection) == len(data)
        assert collection.constraint == TypeConstraint.of(key_type, value_type)

    @pytest.mark.parametrize("data,key_type,value_type", MISMATCHED_INPUTS)
    def test_mismatched_input_is_rejected(self, data: Any, key_type: Any, value_type: Any) -> None:
        """Construction fails on the first entry breaking a type."""
        with pytest.raises(TypeMismatch):
            Collection.new_typed_collection(key_type, value_type, data)

    def test_single_sided_factories(self) -> None:
        """Key and value factories constrain one side only."""
        keyed = Collection.new_typed_key_collection('integer', {1: 'a', 2: 'b'})
        valued = Collection.new_typed_value_collection('integer', [1, 2])

        assert keyed.constraint == TypeConstraint.of('integer', None)
        assert valued.constraint == TypeConstraint.of(None, 'integer')

        with pytest.raises(TypeMismatch):
            Collection.new_typed_key_collection('integer', {'x': 'a'})
        with pytest.raises(TypeMismatch):
            Collection.new_typed_value_collection('integer', ['x'])

    def test_mismatch_is_a_type_error(self) -> None:
        """Mismatches describe the expected and given types."""
        collection = Collection.new_typed_value_collection('integer')

        with pytest.raises(TypeError) as excinfo:
            collection['a'] = 'text'

        assert excinfo.value.role == 'value'
        assert excinfo.value.key == 'a'
        assert str(excinfo.value) == "Collection value must be of type `integer`, `string` given at key 'a'."

    def test_writes_are_checked(self) -> None:
        """Appends and keyed writes are checked like construction."""
        collection = Collection.new_typed_collection('string', 'integer', {'a': 1})

        collection['b'] = 2
        with pytest.raises(TypeMismatch):
            collection.append(3)
        with pytest.raises(TypeMismatch):
            collection['c'] = '3'

        assert collection.all() == {'a': 1, 'b': 2}

    def test_unknown_type_tags(self) -> None:
        """Unresolvable tags fail when declared."""
        with pytest.raises(UnknownType):
            Collection.new_typed_value_collection('no.such.Type')
        with pytest.raises(UnknownType):
            Collection.new_typed_value_collection('nosuchtype')
        with pytest.raises(UnknownType):
            Collection.new_typed_key_collection(42)

    def test_dotted_path_tag(self) -> None:
        """Classes can be named by import path."""
        collection = Collection.new_typed_value_collection('datetime.datetime', [datetime(2024, 1, 1)])

        assert collection.constraint == TypeConstraint.of(None, datetime)


class TestConstraintPreservation:
    """Test suite for constraints carried by derived collections."""

    @pytest.fixture
    def typed(self) -> Collection[int]:
        """Create a collection typed on both sides."""
        return Collection.new_typed_collection('integer', 'integer', [5, 3, 1, 4])

    @pytest.mark.parametrize("derive", DERIVATIONS)
    def test_derived_collection_keeps_constraint(self, typed: Collection[int], derive: Callable[[Collection[int]], Collection[int]]) -> None:
        """Every derived collection enforces the same types."""
        derived = derive(typed)

        assert type(derived) is Collection
        assert derived.constraint == typed.constraint
        with pytest.raises(TypeMismatch):
            derived.append('x')

    def test_map_rejects_values_breaking_constraint(self, typed: Collection[int]) -> None:
        """Mapping to values breaking the constraint fails."""
        with pytest.raises(TypeMismatch):
            typed.map(lambda value: str(value))

    def test_subclass_constraint(self) -> None:
        """Subclasses declare their types as class attributes."""
        dates = DateCollection({'start': datetime(2024, 1, 1)})

        assert dates.sort().constraint == DateCollection._class_constraint
        with pytest.raises(TypeMismatch):
            dates.append(datetime(2024, 2, 1))
        with pytest.raises(TypeMismatch):
            dates['end'] = '2024-02-01'

    def test_subclass_with_unknown_tag_fails_at_definition(self) -> None:
        with pytest.raises(UnknownType):
            class BrokenCollection(Collection[Any]):
                value_type = 'no.such.Type'


class TestConversion:
    """Test suite for into() and map_into()."""

    @pytest.fixture
    def numbers(self) -> IntCollection:
        return IntCollection([1, 2, 3, 4, 5])

    def test_into_copies_entries(self) -> None:
        """into() builds a new collection with the same entries."""
        original = Collection([1, 2, 3, 4, 5])

        copy = original.into(Collection)

        assert copy == original
        assert copy is not original

    def test_into_subclass(self) -> None:
        converted = Collection([1, 2]).into(IntCollection)

        assert isinstance(converted, IntCollection)
        assert converted.all() == {0: 1, 1: 2}
        with pytest.raises(TypeMismatch):
            Collection(['a']).into(IntCollection)

    def test_map_into(self, numbers: IntCollection) -> None:
        """Mapped values are collected into the target type."""
        final = numbers.map_into(lambda value: str(value * 10), StringCollection)

        assert isinstance(final, StringCollection)
        for key, value in final.items():
            assert value == str(numbers[key] * 10)

    def test_map_into_checks_target_constraint(self, numbers: IntCollection) -> None:
        with pytest.raises(TypeMismatch):
            numbers.map_into(lambda value: str(value), IntCollection)

    @pytest.mark.parametrize("target", [
        'StringCollection',
        qualified_name(StringCollection),
    ])
    def test_map_into_registered_name(self, numbers: IntCollection, target: str) -> None:
        """Targets can be named by class name or dotted path."""
        assert isinstance(numbers.map_into(lambda value, key: f"{key}:{value}", target), StringCollection)

    def test_into_prototype_keeps_ad_hoc_constraint(self) -> None:
        """An instance target lends its class and constraint."""
        prototype = Collection.new_typed_value_collection('string')

        converted = Collection([1, 2]).map_into(lambda value: str(value), prototype)

        assert converted.values() == ['1', '2']
        assert converted.constraint == prototype.constraint
        with pytest.raises(TypeMismatch):
            Collection([1]).into(prototype)

    @pytest.mark.parametrize("target", [
        'my arbitrary type',
        '..nope.Thing',
        'collections.Nope',
        'no_such_module_anywhere.Thing',
        42,
    ])
    def test_unknown_targets(self, target: Any) -> None:
        with pytest.raises(UnknownType):
            Collection([1]).into(target)

    @pytest.mark.parametrize("target", [datetime, 'datetime.datetime', 'dict'])
    def test_non_collection_targets(self, target: Any) -> None:
        with pytest.raises(NotACollection):
            Collection([1]).into(target)


class TestRegistry:
    """Test suite for the collection type registry."""

    def test_subclasses_are_registered(self) -> None:
        assert registry.has('IntCollection')
        assert registry.has(qualified_name(IntCollection))
        assert registry.resolve('Collection') is Collection

    def test_register_alias(self) -> None:
        """Aliases resolve to their class until forgotten."""
        registry.register('integers', IntCollection)

        assert isinstance(Collection([1]).into('integers'), IntCollection)
        assert 'integers' in registry.names()

        registry.forget('integers')
        assert not registry.has('integers')

    def test_register_rejects_non_collections(self) -> None:
        with pytest.raises(NotACollection):
            registry.register('dates', datetime)
        with pytest.raises(NotACollection):
            registry.register('instance', Collection())

    def test_shared_class_name_is_ambiguous(self) -> None:
        """A class name defined in two modules only resolves by dotted path."""
        first = type('LedgerCollection', (Collection,), {'__module__': 'billing.ledgers', 'value_type': 'integer'})
        second = type('LedgerCollection', (Collection,), {'__module__': 'reports.ledgers', 'value_type': 'string'})

        with pytest.raises(UnknownType, match='dotted path'):
            Collection([1]).into('LedgerCollection')

        assert not registry.has('LedgerCollection')
        assert isinstance(Collection([1]).into('billing.ledgers.LedgerCollection'), first)
        assert isinstance(Collection(['a']).into('reports.ledgers.LedgerCollection'), second)

    def test_explicit_registration_settles_ambiguity(self) -> None:
        type('JournalCollection', (Collection,), {'__module__': 'billing.journals'})
        second = type('JournalCollection', (Collection,), {'__module__': 'reports.journals'})

        registry.register('JournalCollection', second)

        assert registry.resolve('JournalCollection') is second
        registry.forget('JournalCollection')

    def test_redefined_class_replaces_its_binding(self) -> None:
        """Defining a class again in the same module is not a collision."""
        type('AuditCollection', (Collection,), {'__module__': 'billing.audit'})
        second = type('AuditCollection', (Collection,), {'__module__': 'billing.audit'})

        assert registry.resolve('AuditCollection') is second
        assert registry.resolve('billing.audit.AuditCollection') is second
