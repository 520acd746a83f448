from __future__ import annotations

from enum import StrEnum
from typing import Any, Dict, List, Optional


class StringEnum(StrEnum):
    """
    String-backed enum with lookup helpers.
    
    Members can be resolved from their value or, case-insensitively, from
    one of the aliases a subclass returns from ``aliases()``.
    """
    
    @classmethod
    def cases(cls) -> List['StringEnum']:
        """Get all enum cases."""
        return list(cls.__members__.values())
    
    @classmethod
    def aliases(cls) -> Dict[str, str]:
        """Get the alias table of the enum."""
        return {}
    
    @classmethod
    def from_value(cls, value: Any) -> 'StringEnum':
        """Create enum instance from value or alias."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls.__members__.values():
                if member.value == lowered:
                    return member
            alias = cls.aliases().get(lowered)
            if alias is not None:
                return cls(alias)
        raise ValueError(f"Invalid value '{value}' for enum {cls.__name__}")
    
    @classmethod
    def try_from(cls, value: Any) -> Optional['StringEnum']:
        """Try to create enum instance from value, return None if invalid."""
        try:
            return cls.from_value(value)
        except (ValueError, KeyError):
            return None
    
    @classmethod
    def values(cls) -> List[Any]:
        """Get all enum values."""
        return [member.value for member in cls.__members__.values()]
