"""Store - ResultStream.

Wraps a store cursor so that the documents it yields come out as Records.
"""

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from deltadoc.core.store.record import Record
from deltadoc.core.store.types import CursorLike

if TYPE_CHECKING:
    from deltadoc.core.store.collection import Collection


logger = logging.getLogger(__name__)

#: Cursor operations reachable directly on a ResultStream. Their result is
#: returned as the cursor produces it (sort() and limit() return the raw
#: cursor). Anything else is available through ResultStream.native.
FORWARDED_OPERATIONS = frozenset(
    {
        "address",
        "alive",
        "batch_size",
        "clone",
        "close",
        "collation",
        "collection",
        "comment",
        "cursor_id",
        "distinct",
        "explain",
        "hint",
        "limit",
        "max_await_time_ms",
        "max_time_ms",
        "retrieved",
        "rewind",
        "session",
        "skip",
        "sort",
        "where",
    }
)


class ResultStream:
    """Forward-only stream of Records over a store cursor.

    A stream is consumed once: iterating it, calling each(), lazy() or
    to_list() all advance the same underlying cursor.

    Example:
        >>> stream = posts.find({"author": "ada"})
        >>> stream.batch_size(50)  # forwarded to the cursor
        >>> for post in stream:
        ...     post.delta("$inc", views=1).update()
    """

    def __init__(self, cursor: CursorLike, collection: "Collection"):
        """Wrap a cursor.

        Args:
            cursor: The store cursor, owned by the stream from now on.
            collection: Collection the yielded Records belong to.
        """
        self._cursor = cursor
        self._collection = collection

    @property
    def native(self) -> CursorLike:
        """The wrapped store cursor, for operations not forwarded."""
        return self._cursor

    def _wrap(self, value: Any) -> Any:
        if isinstance(value, dict):
            return Record(value, self._collection)
        return value

    def next(self) -> Any:
        """Advance the cursor, wrapping a document in a Record.

        Values that are not documents are returned unchanged.

        Raises:
            StopIteration: When the cursor is exhausted.
        """
        return self._wrap(next(self._cursor))

    def __next__(self) -> Any:
        return self.next()

    def __iter__(self) -> "ResultStream":
        return self

    def each(self, callback: Callable[[Record], Any]) -> None:
        """Call callback with every remaining element as a Record."""
        for value in self._cursor:
            callback(self._wrap(value))

    def lazy(self) -> Iterator[Record]:
        """Return a single-pass generator of Records backed by the cursor."""
        for value in self._cursor:
            yield self._wrap(value)

    def to_list(self) -> list[Record]:
        """Drain the cursor into a list of Records."""
        records = list(self.lazy())
        logger.debug("Drained %d record(s) from %s", len(records), self._collection.name)
        return records

    def __getattr__(self, name: str) -> Any:
        if name in FORWARDED_OPERATIONS:
            return getattr(self._cursor, name)
        raise AttributeError(
            f"'{type(self).__name__}' object has no attribute '{name}'; "
            "use .native for direct cursor access"
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._collection.name} cursor={self._cursor!r}>"


__all__ = ["ResultStream", "FORWARDED_OPERATIONS"]
