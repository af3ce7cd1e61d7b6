"""Store - Collections, Records and ResultStreams for deltadoc.

Main Components
---------------
- **Collection**: Named store collection, resolved lazily, returns Records.
- **Record**: Wrapped document tracking pending deltas for partial updates.
- **ResultStream**: Forward-only cursor wrapper yielding Records.
- **MongoFetcher**: Default collection fetcher over a pymongo database.

Quick Start
-----------
    >>> posts = deltadoc.collection("posts")
    >>> post = posts.insert({"title": "hi"})
    >>> post["title"] = "bye"
    >>> post.delta("$inc", views=1)
    >>> post.update()  # {"$set": {"title": "bye"}, "$inc": {"views": 1}}
"""

from deltadoc.core.store.collection import Collection
from deltadoc.core.store.exceptions import (
    ArgumentCountError,
    IdentifierImmutableError,
    InitializationError,
    MissingIdentifierError,
    StaleRecordError,
    StoreError,
)
from deltadoc.core.store.fetcher import MongoFetcher
from deltadoc.core.store.record import Record
from deltadoc.core.store.stream import FORWARDED_OPERATIONS, ResultStream
from deltadoc.core.store.types import CollectionFetcher, CursorLike, Deltas, Document

__all__ = [
    "Collection",
    "Record",
    "ResultStream",
    "MongoFetcher",
    "FORWARDED_OPERATIONS",
    "CollectionFetcher",
    "CursorLike",
    "Deltas",
    "Document",
    "StoreError",
    "InitializationError",
    "MissingIdentifierError",
    "StaleRecordError",
    "ArgumentCountError",
    "IdentifierImmutableError",
]
