"""Core deltadoc facade.

This module defines the main entry point used by applications and tests:
it holds the configuration, the capability registry and the collection
fetcher, and builds Collections bound to them.
"""

import logging
from typing import Any

from dotenv import load_dotenv

from deltadoc.core.dto.mystique_dto import DiscoverCapabilitiesResult
from deltadoc.core.mystique.mystique import Mystique
from deltadoc.core.spock.spock import Spock
from deltadoc.core.store.collection import Collection
from deltadoc.core.store.exceptions import InitializationError
from deltadoc.core.store.fetcher import MongoFetcher
from deltadoc.core.store.types import CollectionFetcher

logger = logging.getLogger(__name__)
load_dotenv()


class DeltaDoc:
    """Core facade for deltadoc.

    Build one during startup, register capabilities and the collection
    fetcher, then hand out Collections:

        >>> deltadoc = DeltaDoc.create(config={"deltadoc": {"database": "blog"}})
        >>> deltadoc.mystique.register("record", "posts", Taggable)
        >>> deltadoc.fetch_collections_using(lambda name: client["blog"][name])
        >>> posts = deltadoc.collection("posts")

    When no fetcher is given but both 'mongo_uri' and 'database' are
    configured, a MongoFetcher is built from them on first use.
    """

    def __init__(
        self,
        *,
        config_path: str | None = None,
        collection_fetcher: CollectionFetcher | None = None,
        mystique: Mystique | None = None,
    ):
        """Initialize deltadoc internal components.

        Args:
            config_path: Path to JSON configuration file.
            collection_fetcher: Optional function resolving collection names
                into store collection handles.
            mystique: Optional pre-populated capability registry.
        """
        self.spock = Spock(config_path=config_path)
        self.mystique = mystique if mystique is not None else Mystique()
        self._collection_fetcher = collection_fetcher
        self._fetcher_used = False

        # Alias
        self.config_manager = self.spock
        self.capability_registry = self.mystique
        logger.debug("DeltaDoc instance created.")

    @classmethod
    def create(
        cls,
        *,
        config_path: str | None = None,
        config: dict[str, Any] | None = None,
        collection_fetcher: CollectionFetcher | None = None,
        mystique: Mystique | None = None,
    ) -> "DeltaDoc":
        """Factory method to create and initialize deltadoc.

        Loads configuration first, then discovers capabilities from entry
        points when 'discover_capabilities' is enabled.

        Args:
            config_path: Path to JSON configuration file.
            config: Optional configuration dictionary.
            collection_fetcher: Optional collection fetcher.
            mystique: Optional pre-populated capability registry.
        """
        instance = cls(
            config_path=config_path,
            collection_fetcher=collection_fetcher,
            mystique=mystique,
        )
        instance.spock.load(config=config)
        if instance.spock.get_deltadoc_config("discover_capabilities", False):
            instance.discover_capabilities()
        return instance

    # =========================================================================
    # COLLECTION FETCHER
    # =========================================================================

    def fetch_collections_using(self, fetcher: CollectionFetcher) -> None:
        """Configure the function resolving collection names into handles.

        Must be called once during startup, before any Collection resolves
        its handle. Collections that already resolved keep their handle.
        """
        if self._fetcher_used:
            logger.warning(
                "Collection fetcher replaced after collections were resolved; "
                "existing collections keep their current handle."
            )
        self._collection_fetcher = fetcher
        logger.debug("Collection fetcher configured: %r", fetcher)

    @property
    def collection_fetcher(self) -> CollectionFetcher | None:
        """The configured fetcher, or one built from 'mongo_uri' and 'database'."""
        if self._collection_fetcher is None:
            uri = self.spock.get_deltadoc_config("mongo_uri")
            database = self.spock.get_deltadoc_config("database")
            if uri and database:
                self._collection_fetcher = MongoFetcher(uri, database)
                logger.info("Using MongoFetcher for database '%s'", database)
        return self._collection_fetcher

    def fetch_collection(self, name: str) -> Any:
        """Resolve a collection name into a store handle.

        Raises:
            InitializationError: If no collection fetcher is configured.
        """
        fetcher = self.collection_fetcher
        if fetcher is None:
            raise InitializationError(name)
        self._fetcher_used = True
        logger.debug("Resolving collection handle for '%s'", name)
        return fetcher(name)

    # =========================================================================
    # COLLECTIONS & CAPABILITIES
    # =========================================================================

    def collection(self, name: str) -> Collection:
        """Build a Collection bound to this instance."""
        return Collection(name, self)

    def discover_capabilities(self, group: str | None = None) -> DiscoverCapabilitiesResult:
        """Register capabilities published through entry points."""
        result = self.mystique.discover(group)
        if result.failed:
            logger.warning("Some capability entry points failed: %s", ", ".join(result.failed))
        return result
