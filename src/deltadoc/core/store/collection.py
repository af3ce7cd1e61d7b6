"""Store - Collection.

A Collection names one store collection and hands out Records and
ResultStreams for it. The store handle behind it is resolved on first use
through the collection fetcher configured on the owning DeltaDoc.
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from bson import ObjectId

from deltadoc.core.mystique.capability import EntityKind
from deltadoc.core.store.record import Record
from deltadoc.core.store.stream import ResultStream
from deltadoc.core.store.types import CursorLike

if TYPE_CHECKING:
    from deltadoc.core.deltadoc import DeltaDoc


logger = logging.getLogger(__name__)


class Collection:
    """Entry point for queries on one named collection.

    Capabilities registered for ("collection", name) are bound onto the
    instance when it is built.

    Example:
        >>> posts = deltadoc.collection("posts")
        >>> post = posts.insert({"title": "hi"})
        >>> post["title"] = "bye"
        >>> post.update()
        >>> posts.find_by_id(post["_id"])["title"]
        'bye'
    """

    def __init__(self, name: str, deltadoc: "DeltaDoc"):
        """Create a collection wrapper.

        Args:
            name: Store collection name.
            deltadoc: Owning DeltaDoc, providing the fetcher and capabilities.
        """
        self._name = name
        self._deltadoc = deltadoc
        self._handle: Any = None
        self._capabilities = deltadoc.mystique.apply(self, EntityKind.COLLECTION, name)
        logger.debug("Collection '%s' created (capabilities=%s)", name, self._capabilities)

    @property
    def name(self) -> str:
        """Store collection name."""
        return self._name

    @property
    def deltadoc(self) -> "DeltaDoc":
        """Owning DeltaDoc instance."""
        return self._deltadoc

    @property
    def capabilities(self) -> tuple[str, ...]:
        """Names of the capabilities applied to this collection."""
        return self._capabilities

    @property
    def handle(self) -> Any:
        """Store collection handle, resolved once on first access.

        Raises:
            InitializationError: If no collection fetcher is configured.
        """
        if self._handle is None:
            self._handle = self._deltadoc.fetch_collection(self._name)
        return self._handle

    # =========================================================================
    # QUERIES
    # =========================================================================

    def find_one(self, filter: Mapping[str, Any] | None = None, *args: Any, **kwargs: Any) -> Record | None:
        """Return the first matching document as a Record, or None."""
        document = self.handle.find_one(filter, *args, **kwargs)
        if document is None:
            return None
        return Record(document, self)

    def find_by_id(self, id: Any) -> Record | None:
        """Find a record by `_id`.

        A string in ObjectId form is promoted to ObjectId first; any other
        value is matched literally.
        """
        if isinstance(id, str) and ObjectId.is_valid(id):
            id = ObjectId(id)
        return self.find_one({"_id": id})

    def find(self, *args: Any, **kwargs: Any) -> ResultStream | Any:
        """Run a query, wrapping the resulting cursor in a ResultStream.

        Results that are not cursors are returned unchanged.
        """
        result = self.handle.find(*args, **kwargs)
        if isinstance(result, CursorLike):
            return ResultStream(result, self)
        return result

    find_many = find

    def count(self, filter: Mapping[str, Any] | None = None, **kwargs: Any) -> int:
        """Count matching documents."""
        return self.handle.count_documents(filter if filter is not None else {}, **kwargs)

    def has(self, id: Any) -> bool:
        """Check whether exactly one document has this `_id`."""
        return self.count({"_id": id}) == 1

    # =========================================================================
    # WRITES
    # =========================================================================

    def insert(self, document: Mapping[str, Any]) -> Record:
        """Insert a document and return it as a Record carrying its `_id`.

        The given mapping is copied, not modified.
        """
        document = dict(document)
        result = self.handle.insert_one(document)
        document["_id"] = result.inserted_id
        logger.debug("Inserted into %s id=%r", self._name, result.inserted_id)
        return Record(document, self)

    def __repr__(self) -> str:
        ext_info = f"(+ {', '.join(self._capabilities)})" if self._capabilities else ""
        return f"<{type(self).__name__}{ext_info} {self._name}>"


__all__ = ["Collection"]
