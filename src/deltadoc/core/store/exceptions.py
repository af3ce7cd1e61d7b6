"""Store - Collection and Record Exceptions.

Errors raised by the data-access layer itself. Errors raised by the store
client (pymongo) propagate unchanged.
"""

from typing import Any


class StoreError(Exception):
    """Base exception for all data-access layer errors."""

    pass


class InitializationError(StoreError):
    """Raised when a collection handle is needed but no fetcher is configured.

    Attributes:
        collection: Name of the collection being resolved.
    """

    def __init__(self, collection: str):
        """Initialize InitializationError.

        Args:
            collection: Name of the collection being resolved.
        """
        self.collection = collection
        super().__init__(
            f"Cannot resolve collection '{collection}': no collection fetcher configured. "
            "Call fetch_collections_using() or set 'mongo_uri' and 'database'."
        )


class MissingIdentifierError(StoreError):
    """Raised when a record operation needs an `_id` the document lacks.

    Attributes:
        operation: The operation that was attempted ("update", "delete").
        collection: Optional name of the owning collection.
    """

    def __init__(self, operation: str, collection: str | None = None):
        """Initialize MissingIdentifierError.

        Args:
            operation: The attempted operation.
            collection: Optional name of the owning collection.
        """
        self.operation = operation
        self.collection = collection
        coll_info = f" in collection '{collection}'" if collection else ""
        super().__init__(f"Cannot {operation} a record without '_id'{coll_info}.")


class StaleRecordError(StoreError):
    """Raised when saving a record that already issued a partial update.

    Attributes:
        id: The identifier of the stale record.
        collection: Optional name of the owning collection.
    """

    def __init__(self, id: Any, collection: str | None = None):
        """Initialize StaleRecordError.

        Args:
            id: The identifier of the stale record.
            collection: Optional name of the owning collection.
        """
        self.id = id
        self.collection = collection
        coll_info = f" in collection '{collection}'" if collection else ""
        super().__init__(
            f"Record with id={id!r}{coll_info} is stale after update(); "
            "pass ignore_stale=True to overwrite anyway."
        )


class ArgumentCountError(StoreError, TypeError):
    """Raised when a field accessor is called with the wrong number of arguments.

    Attributes:
        name: Accessor name as given.
        expected: Expected argument count.
        given: Actual argument count.
    """

    def __init__(self, name: str, expected: int, given: int):
        """Initialize ArgumentCountError.

        Args:
            name: Accessor name as given.
            expected: Expected argument count.
            given: Actual argument count.
        """
        self.name = name
        self.expected = expected
        self.given = given
        super().__init__(
            f"Unexpected argument count for '{name}': expected {expected}, got {given}."
        )


class IdentifierImmutableError(StoreError, ValueError):
    """Raised when a field write targets an `_id` that is already assigned.

    Attributes:
        id: The identifier already held by the record.
    """

    def __init__(self, id: Any):
        """Initialize IdentifierImmutableError.

        Args:
            id: The identifier already held by the record.
        """
        self.id = id
        super().__init__(f"'_id' is already assigned ({id!r}) and cannot be rewritten.")


__all__ = [
    "StoreError",
    "InitializationError",
    "MissingIdentifierError",
    "StaleRecordError",
    "ArgumentCountError",
    "IdentifierImmutableError",
]
