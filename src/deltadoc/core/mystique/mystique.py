"""Mystique - Capability Registry.

Mystique keeps, for each (entity kind, collection name) pair, the ordered
list of capabilities that Collections and Records of that collection take on
when they are built. Registration order is application order, and entries
only ever grow.

Named after Mystique, who takes on whatever shape the situation calls for.
"""

import logging
from collections.abc import Iterator, Mapping
from importlib.metadata import entry_points
from types import MappingProxyType
from typing import Any

from deltadoc.core.dto.mystique_dto import DiscoverCapabilitiesResult, RegisterCapabilityResult
from deltadoc.core.dto.result_dto import StatusCode, StatusDetail
from deltadoc.core.mystique.capability import (
    Capability,
    EntityKind,
    EntityKindName,
    compose,
    to_capability,
)
from deltadoc.core.mystique.exceptions import CapabilityError

logger = logging.getLogger(__name__)


class Mystique:
    """Append-only capability registry.

    Each DeltaDoc instance owns one Mystique, populated during setup and
    treated as read-only once Collections are being built. Tests build their
    own instance instead of sharing one.

    Famous quote from Mystique in X-Men:
    "Mutant and proud."

    Example:
        >>> mystique = Mystique()
        >>> mystique.register("record", "posts", Taggable)
        >>> mystique.register("record", "posts", "myapp.capabilities:Publishable")
        >>> mystique.lookup("record", "posts")
        (Capability(name=Taggable, ...), Capability(name=Publishable, ...))
    """

    ENTRY_POINT_GROUP = "deltadoc.capabilities"

    def __init__(self):
        """Initialize an empty registry."""
        self._entries: dict[tuple[str, str], list[Capability]] = {}
        logger.debug("Mystique instance created.")

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def register(
        self,
        kind: EntityKindName,
        collection_name: str,
        capability: Any,
        *,
        name: str | None = None,
    ) -> Capability:
        """Append a capability to the entry for (kind, collection_name).

        Args:
            kind: "collection" or "record".
            collection_name: Collection the capability is scoped to.
            capability: A Capability, a class, a mapping of callables, or an
                import path string.
            name: Optional capability name, required in practice for mappings.

        Returns:
            The registered Capability.

        Raises:
            CapabilityError: If the kind, name or capability is invalid.
        """
        cap = self._prepare(kind, collection_name, capability, name)
        self._append(kind, collection_name, cap)
        return cap

    def execute_register(
        self,
        kind: EntityKindName,
        collection_name: str,
        capability: Any,
        *,
        name: str | None = None,
    ) -> RegisterCapabilityResult:
        """Append a capability, reporting invalid input as a result.

        [Result Pattern] Check result.is_ok() and result.position.

        Returns:
            RegisterCapabilityResult with:
            - success: Capability appended at result.position
            - error + detail(INVALID): Invalid kind, collection name or capability
        """
        try:
            cap = self._prepare(kind, collection_name, capability, name)
        except CapabilityError as e:
            return RegisterCapabilityResult.fail(
                StatusDetail(
                    code=StatusCode.INVALID,
                    message=e.details,
                    context={"kind": str(kind), "collection": str(collection_name)},
                ),
                kind=str(kind),
                collection=str(collection_name),
            )
        position = self._append(kind, collection_name, cap)
        return RegisterCapabilityResult.success(
            kind=kind,
            collection=collection_name,
            capability=cap.name,
            position=position,
        )

    def register_capability(self, capability: Capability) -> Capability:
        """Register a capability that carries its own kind and collection.

        Capabilities built with the @capability decorator are targeted.

        Raises:
            CapabilityError: If the capability has no kind or collection.
        """
        if capability.kind is None or capability.collection is None:
            raise CapabilityError(
                f"Capability '{capability.name}' has no target; use @capability(collection, kind=...)"
            )
        return self.register(capability.kind, capability.collection, capability)

    def _prepare(
        self, kind: str, collection_name: str, capability: Any, name: str | None = None
    ) -> Capability:
        if kind not in EntityKind.ALL:
            raise CapabilityError(
                f"Unknown entity kind '{kind}'; expected one of {', '.join(EntityKind.ALL)}",
                kind,
            )
        if not isinstance(collection_name, str) or not collection_name.strip():
            raise CapabilityError(f"Invalid collection name: {collection_name!r}")
        return to_capability(capability, name=name)

    def _append(self, kind: str, collection_name: str, cap: Capability) -> int:
        entry = self._entries.setdefault((kind, collection_name), [])
        entry.append(cap)
        logger.debug(
            "Capability '%s' registered for %s '%s' at position %d.",
            cap.name,
            kind,
            collection_name,
            len(entry) - 1,
        )
        return len(entry) - 1

    # =========================================================================
    # DISCOVERY
    # =========================================================================

    def discover(self, group: str | None = None) -> DiscoverCapabilitiesResult:
        """Register capabilities published by installed packages.

        Each entry point in the group must load a targeted Capability (see
        @capability) or an iterable of them. Entry points that fail to load
        or register are logged and skipped.

        Args:
            group: Entry point group (defaults to "deltadoc.capabilities").

        Returns:
            DiscoverCapabilitiesResult listing registered and failed names.
        """
        group = group or self.ENTRY_POINT_GROUP
        registered: list[str] = []
        failed: list[str] = []

        discovered = list(entry_points(group=group))
        for ep in discovered:
            try:
                loaded = ep.load()
                items = (
                    [loaded]
                    if isinstance(loaded, (Capability, str, type, Mapping))
                    else list(loaded)
                )
                for item in items:
                    cap = self.register_capability(to_capability(item))
                    registered.append(cap.name)
                logger.info("Loaded capabilities from entry point '%s'", ep.name)
            except Exception:
                logger.error(
                    "Failed to load capabilities from entry point '%s'", ep.name, exc_info=True
                )
                failed.append(ep.name)

        if not discovered:
            return DiscoverCapabilitiesResult.success(
                detail=StatusDetail(
                    code=StatusCode.NO_RESULTS,
                    message=f"No entry points published in group '{group}'",
                    context={"group": group},
                ),
            )
        if failed:
            return DiscoverCapabilitiesResult.success(
                registered=registered,
                failed=failed,
                detail=StatusDetail(
                    code=StatusCode.PARTIAL,
                    message=f"{len(failed)} entry point(s) failed to load",
                    context={"group": group, "failed": failed},
                ),
            )
        return DiscoverCapabilitiesResult.success(registered=registered)

    # =========================================================================
    # LOOKUP & COMPOSITION
    # =========================================================================

    def lookup(self, kind: EntityKindName, collection_name: str) -> tuple[Capability, ...]:
        """Return a snapshot of the entry for (kind, collection_name)."""
        return tuple(self._entries.get((kind, collection_name), ()))

    def apply(self, instance: object, kind: EntityKindName, collection_name: str) -> tuple[str, ...]:
        """Bind every capability registered for (kind, collection_name) onto instance.

        Returns:
            Names of the applied capabilities, in application order.
        """
        return compose(instance, self.lookup(kind, collection_name))

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def snapshot(self) -> MappingProxyType:
        """Read-only view of {(kind, collection): (capability names...)}."""
        return MappingProxyType(
            {key: tuple(cap.name for cap in caps) for key, caps in self._entries.items()}
        )

    def __len__(self) -> int:
        """Return the number of registered capabilities across all entries."""
        return sum(len(caps) for caps in self._entries.values())

    def __contains__(self, key: tuple[str, str]) -> bool:
        """Check if (kind, collection) has at least one capability."""
        return bool(self._entries.get(key))

    def __iter__(self) -> Iterator[tuple[tuple[str, str], tuple[Capability, ...]]]:
        """Iterate over ((kind, collection), capabilities) pairs."""
        for key, caps in self._entries.items():
            yield key, tuple(caps)


# Alias for consistency with other managers
CapabilityRegistry = Mystique


__all__ = ["Mystique", "CapabilityRegistry"]
