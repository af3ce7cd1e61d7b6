"""Store - Default collection fetcher backed by pymongo."""

import logging

from pymongo import MongoClient
from pymongo.collection import Collection as MongoCollection

logger = logging.getLogger(__name__)


class MongoFetcher:
    """Resolve collection names against one MongoDB database.

    The client is created on the first call and shared afterwards; pymongo
    pools connections internally.

    Example:
        >>> deltadoc.fetch_collections_using(MongoFetcher("mongodb://localhost", "blog"))
    """

    def __init__(self, uri: str, database: str, **client_options):
        """Initialize the fetcher.

        Args:
            uri: MongoDB connection string.
            database: Database holding the collections.
            **client_options: Extra keyword arguments for MongoClient.
        """
        self.uri = uri
        self.database = database
        self._client_options = client_options
        self._client: MongoClient | None = None

    @property
    def client(self) -> MongoClient:
        """Lazily created MongoClient."""
        if self._client is None:
            self._client = MongoClient(self.uri, **self._client_options)
            logger.debug("MongoClient created for database '%s'", self.database)
        return self._client

    def __call__(self, name: str) -> MongoCollection:
        return self.client[self.database][name]

    def close(self) -> None:
        """Close the client if it was created."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __repr__(self) -> str:
        return f"MongoFetcher(database={self.database!r})"


__all__ = ["MongoFetcher"]
