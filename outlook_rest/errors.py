"""Exception taxonomy for the Outlook REST object model.

Every error here is a local validation failure raised before any network
interaction. None of them is retried. HTTP failures are not wrapped: they
surface as ``requests.HTTPError`` from the transport.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(eq=False)
class OutlookRestError(Exception):
    """Base error with a message and an optional hint for the caller."""
    message: str
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class SchemaNotFoundError(OutlookRestError):
    """No schema registered for an entity type."""
    def __init__(self, type_name: str):
        super().__init__(
            f"Cannot find schema definition '{type_name}'.",
            "Register the type in the schema catalog before constructing it.",
        )
        self.type_name = type_name


class UnknownPropertyError(OutlookRestError, KeyError):
    """Property is not part of the bag's schema."""
    def __init__(self, property_name: str, type_name: str):
        super().__init__(f"Property '{property_name}' is not defined on '{type_name}'.")
        self.property_name = property_name
        self.type_name = type_name


class InvalidLifecycleError(OutlookRestError):
    """Operation is not legal in the entity's current state."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, hint)


class NoChangesError(OutlookRestError):
    """Update attempted without any changed property."""
    def __init__(self, message: str = "No changed properties detected."):
        super().__init__(message)


class InvalidArgumentError(OutlookRestError, ValueError):
    """Malformed argument: bad filter shape, wrong value type, missing value."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, hint)


class ConfigError(OutlookRestError):
    """Configuration could not be resolved."""
    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, hint)


def require(value, name: str) -> None:
    """Raise InvalidArgumentError when ``value`` is None."""
    if value is None:
        raise InvalidArgumentError(f"'{name}' cannot be None.")


def require_non_empty(value, name: str) -> None:
    """Raise InvalidArgumentError when ``value`` is None or an empty string."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidArgumentError(f"'{name}' cannot be null or empty.")
