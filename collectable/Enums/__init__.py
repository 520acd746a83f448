from __future__ import annotations

from .BaseEnum import StringEnum
from .CollectionEnums import FilterMode, PrimitiveType, SortFlag

__all__: list[str] = [
    'StringEnum',
    'SortFlag',
    'FilterMode',
    'PrimitiveType',
]
