"""
Exceptions raised by the attribute model.

Every error is returned to the caller as an exception; nothing in this package
retries or recovers locally. Errors raised by a visitor during
`deserialize_attributes` are never wrapped in one of these types.
"""
from typing import Any


class AttributesError(Exception):
    """Base class for all attribute model errors."""


class UnrecognizedAttributeName(AttributesError, KeyError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unrecognized attribute name: {name!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class AttributeValueConversionError(AttributesError, ValueError):
    """A value could not be converted to the concrete type of a field."""

    def __init__(self, target: str, value: Any, reason: str | None = None):
        self.target = target
        self.value = value
        message = f"Cannot convert {value!r} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidSpecVersion(AttributesError, ValueError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid specversion: {value!r}")


class AttributesBorrowedError(AttributesError, RuntimeError):
    """A writer was called while an iterator over the same set is still live."""
