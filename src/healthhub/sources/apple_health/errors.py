"""Exceptions raised while importing Apple Health payloads."""

from typing import Any


class InvalidFormatError(ValueError):
    """A required field failed a strict shape check."""

    def __init__(self, field: str, value: Any, expected: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} format: {value!r}. Expected {expected}")


class TypeMismatchError(ValueError):
    """A payload section is present but has the wrong container type."""

    def __init__(self, category: str, expected: str = "an array") -> None:
        self.category = category
        super().__init__(f"Invalid {category} data: Expected {expected}")


class PersistenceError(RuntimeError):
    """Storing reduced daily metrics failed; nothing downstream was recorded."""
