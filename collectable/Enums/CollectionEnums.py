from __future__ import annotations

from typing import Dict

from collectable.Enums.BaseEnum import StringEnum


class SortFlag(StringEnum):
    """How sort() and asort() compare values."""
    
    REGULAR = 'regular'
    NUMERIC = 'numeric'
    STRING = 'string'


class FilterMode(StringEnum):
    """Which arguments filter() hands to its callback."""
    
    VALUE = 'value'
    KEY = 'key'
    BOTH = 'both'


class PrimitiveType(StringEnum):
    """Primitive type names understood by type constraints."""
    
    BOOLEAN = 'boolean'
    INTEGER = 'integer'
    FLOAT = 'float'
    STRING = 'string'
    ARRAY = 'array'
    NULL = 'null'
    
    @classmethod
    def aliases(cls) -> Dict[str, str]:
        return {
            'bool': 'boolean',
            'int': 'integer',
            'double': 'float',
            'str': 'string',
            'list': 'array',
            'tuple': 'array',
            'dict': 'array',
            'none': 'null',
            'nonetype': 'null',
        }
