"""Store - Record.

A Record wraps one document of a collection. Field writes change the
in-memory document and are also recorded as deltas, so that update() can
send one atomic partial update instead of overwriting the stored document.
"""

import logging
import warnings
from collections.abc import Mapping
from copy import deepcopy
from typing import TYPE_CHECKING, Any

from deltadoc.core.mystique.capability import EntityKind
from deltadoc.core.store.exceptions import (
    ArgumentCountError,
    IdentifierImmutableError,
    MissingIdentifierError,
    StaleRecordError,
)
from deltadoc.core.store.types import Deltas, Document

if TYPE_CHECKING:
    from deltadoc.core.store.collection import Collection


logger = logging.getLogger(__name__)


class Record:
    """Mutable wrapper around a stored document.

    Records are normally obtained from a Collection (find_one, find_by_id,
    find, insert) rather than built directly. Capabilities registered for
    ("record", <collection name>) are bound onto each new Record.

    Fields can be read and written by key or as attributes:

        >>> post = posts.find_by_id("507f191e810c19729de860ea")
        >>> post["title"] = "bye"
        >>> post.views
        3
        >>> post.delta("$inc", views=1).update()

    Attribute names defined by Record itself (update, deltas, stale, ...) or
    by an applied capability take precedence over document fields on read;
    use record["name"] for those fields.

    State:
        A Record starts fresh. Once update() has issued a partial update it
        is stale: the deprecated save() refuses to overwrite the document
        unless asked to. Deltas and further update() calls stay allowed.
    """

    def __init__(self, document: Document, collection: "Collection"):
        """Wrap a document.

        Args:
            document: The document as returned by the store.
            collection: Owning collection, used for writes and capabilities.
        """
        self._document = document
        self._collection = collection
        self._deltas: Deltas = {}
        self._stale = False
        self._capabilities = collection.deltadoc.mystique.apply(
            self, EntityKind.RECORD, collection.name
        )

    # =========================================================================
    # FIELD ACCESS
    # =========================================================================

    def __getitem__(self, key: str) -> Any:
        return self._document[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: str) -> bool:
        return key in self._document

    def get(self, key: str, default: Any = None) -> Any:
        """Return the in-memory value for key, or default when absent."""
        return self._document.get(key, default)

    def set(self, key: str, value: Any) -> "Record":
        """Write a field and record it as a "$set" delta.

        Raises:
            IdentifierImmutableError: If key is "_id" and the record has one.
        """
        if key == "_id" and "_id" in self._document:
            raise IdentifierImmutableError(self._document["_id"])
        self._document[key] = value
        return self.delta("$set", {key: value})

    def access(self, name: str, *args: Any) -> Any:
        """Read or write a field by accessor name.

        "title" reads the field and takes no argument, "title=" writes it
        and takes exactly one.

        Raises:
            ArgumentCountError: If the argument count does not match.
        """
        if name.endswith("="):
            if len(args) != 1:
                raise ArgumentCountError(name, 1, len(args))
            self.set(name[:-1], args[0])
            return args[0]
        if len(args) != 0:
            raise ArgumentCountError(name, 0, len(args))
        return self[name]

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: fields, then AttributeError.
        if name.startswith("_") and name != "_id":
            raise AttributeError(name)
        try:
            return self._document[name]
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute or field '{name}'"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") and name != "_id":
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    # =========================================================================
    # DELTAS
    # =========================================================================

    def delta(self, operator: str, fields: Mapping[str, Any] | None = None, /, **more: Any) -> "Record":
        """Record pending field values under an update operator.

        The operator name is stored verbatim ("$inc", "$push", ...). A later
        call for the same (operator, field) replaces the earlier value.

        Example:
            >>> record.delta("$inc", total=3, unique=1)
            >>> record.delta("$push", {"tags": "python"})

        Returns:
            The record, for chaining.
        """
        values = {**(fields or {}), **more}
        if values:
            bucket = self._deltas.setdefault(str(operator), {})
            for key, value in values.items():
                bucket[str(key)] = value
        return self

    def unset(self, key: str) -> "Record":
        """Remove a field from the document and record an "$unset" delta.

        Raises:
            IdentifierImmutableError: If key is "_id" and the record has one.
        """
        if key == "_id" and "_id" in self._document:
            raise IdentifierImmutableError(self._document["_id"])
        self._document.pop(key, None)
        return self.delta("$unset", {key: 1})

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def update(self, extra_deltas: Mapping[str, Mapping[str, Any]] | None = None) -> Any:
        """Flush pending deltas as one partial update keyed by `_id`.

        Extra deltas are merged field by field over the pending ones and win
        on conflict. Nothing is sent when there is nothing to send. After
        the update is issued the record is stale.

        Args:
            extra_deltas: Optional {operator: {field: value}} sent along.

        Returns:
            The store's update result, or None when nothing was sent.

        Raises:
            MissingIdentifierError: If the document has no `_id`; pending
                deltas are kept.
        """
        merged: Deltas = {op: dict(fields) for op, fields in self._deltas.items()}
        for op, fields in (extra_deltas or {}).items():
            merged.setdefault(str(op), {}).update({str(k): v for k, v in fields.items()})
        merged = {op: fields for op, fields in merged.items() if fields}
        if not merged:
            return None

        id = self._document.get("_id")
        if id is None:
            raise MissingIdentifierError("update", self._collection.name)

        self._deltas = {}
        self._stale = True

        logger.debug("Updating %s id=%r with %r", self._collection.name, id, merged)
        return self._collection.handle.update_one({"_id": id}, merged)

    def delete(self) -> Any:
        """Remove this record's document from the store.

        Raises:
            MissingIdentifierError: If the document has no `_id`.
        """
        id = self._document.get("_id")
        if id is None:
            raise MissingIdentifierError("delete", self._collection.name)
        logger.debug("Deleting %s id=%r", self._collection.name, id)
        return self._collection.handle.delete_one({"_id": id})

    def save(self, *, ignore_stale: bool = False) -> Any:
        """Overwrite the whole stored document with the in-memory one.

        .. deprecated::
            Use update(); full overwrites discard concurrent changes.

        Raises:
            StaleRecordError: If update() was already issued and
                ignore_stale is False.
        """
        warnings.warn(
            "Record.save() is deprecated, use Record.update() instead.",
            DeprecationWarning,
            stacklevel=2,
        )
        if self._stale and not ignore_stale:
            raise StaleRecordError(self._document.get("_id"), self._collection.name)

        handle = self._collection.handle
        if "_id" in self._document:
            return handle.replace_one({"_id": self._document["_id"]}, self._document, upsert=True)
        result = handle.insert_one(self._document)
        self._document["_id"] = result.inserted_id
        return result

    def to_dict(self) -> Document:
        """Return a deep copy of the in-memory document."""
        return deepcopy(self._document)

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    @property
    def deltas(self) -> Deltas:
        """Copy of the pending deltas."""
        return deepcopy(self._deltas)

    @property
    def stale(self) -> bool:
        """Whether a partial update has been issued for this record."""
        return self._stale

    @property
    def capabilities(self) -> tuple[str, ...]:
        """Names of the capabilities applied to this record."""
        return self._capabilities

    @property
    def collection(self) -> "Collection":
        """Owning collection."""
        return self._collection

    # =========================================================================
    # COMPARISON
    # =========================================================================

    def _sort_key(self) -> str:
        id = self._document.get("_id")
        return "" if id is None else str(id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return type(self) is type(other) and self._document.get("_id") == other._document.get("_id")

    def __hash__(self) -> int:
        id = self._document.get("_id")
        try:
            return hash((type(self), id))
        except TypeError:
            # Unhashable identifiers (dict, list) all share one bucket per type.
            return hash(type(self))

    def __lt__(self, other: "Record") -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: "Record") -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: "Record") -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: "Record") -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    def __repr__(self) -> str:
        ext_info = f"(+ {', '.join(self._capabilities)})" if self._capabilities else ""
        return (
            f"<{type(self).__name__}{ext_info} {self._collection.name} "
            f"document={self._document!r} deltas={self._deltas!r}>"
        )


__all__ = ["Record"]
