"""Mystique - Capability Registry Exceptions."""

from typing import Any


class MystiqueError(Exception):
    """Base exception for capability registry errors."""

    pass


class CapabilityError(MystiqueError):
    """Raised when a capability cannot be registered or built.

    This exception is raised when:
    - The entity kind is not "collection" or "record".
    - The collection name is empty or not a string.
    - The value is not a Capability, a class, or a resolvable import path.
    - A pre-targeted capability is registered without kind/collection.

    Attributes:
        details: Description of what went wrong.
        value: Optional offending value.
    """

    def __init__(self, details: str, value: Any = None):
        """Initialize CapabilityError.

        Args:
            details: Human-readable description of the failure.
            value: Optional offending value.
        """
        self.details = details
        self.value = value

        value_info = f" [value={value!r}]" if value is not None else ""
        super().__init__(f"Capability error: {details}{value_info}")


__all__ = ["MystiqueError", "CapabilityError"]
