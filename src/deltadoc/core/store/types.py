"""Store - Types.

Type aliases and structural protocols shared by Collection, Record and
ResultStream.
"""

from collections.abc import Callable, Iterator
from typing import Any, Protocol, TypeAlias, runtime_checkable

#: Document type: dict with BSON-encodable values, `_id` reserved.
Document: TypeAlias = dict[str, Any]

#: Pending partial update: operator name -> {field name -> value}.
#: Example: {"$set": {"title": "bye"}, "$inc": {"views": 1}}
Deltas: TypeAlias = dict[str, dict[str, Any]]

#: Function resolving a collection name into a store collection handle.
CollectionFetcher: TypeAlias = Callable[[str], Any]


@runtime_checkable
class CursorLike(Protocol):
    """Lazy, forward-only result stream returned by a store query.

    pymongo.cursor.Cursor satisfies this protocol; plain lists do not.
    """

    def __iter__(self) -> Iterator[Any]: ...

    def __next__(self) -> Any: ...


__all__ = ["Document", "Deltas", "CollectionFetcher", "CursorLike"]
