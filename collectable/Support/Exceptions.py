from __future__ import annotations

from typing import Any, Hashable, Optional


class CollectionException(Exception):
    """Base exception for collections"""
    pass


class TypeMismatch(CollectionException, TypeError):
    """Exception raised when a key or value fails its declared type"""
    
    def __init__(self, role: str, expected: str, actual: str, key: Optional[Hashable] = None) -> None:
        self.role = role
        self.expected = expected
        self.actual = actual
        self.key = key
        
        location = f" at key {key!r}" if key is not None else ""
        
        super().__init__(
            f"Collection {role} must be of type `{expected}`, "
            f"`{actual}` given{location}."
        )


class UnknownType(CollectionException, TypeError):
    """Exception raised when a type name cannot be resolved"""
    
    def __init__(self, target: Any, hint: Optional[str] = None) -> None:
        self.target = target
        self.hint = hint

        message = f"Type `{target}` does not exist."
        if hint:
            message = f"{message} {hint}"

        super().__init__(message)


class NotACollection(CollectionException, TypeError):
    """Exception raised when a resolved type is not a collection"""
    
    def __init__(self, target: Any) -> None:
        self.target = target
        name = getattr(target, '__qualname__', repr(target))
        
        super().__init__(f"Type `{name}` is not a collection.")
