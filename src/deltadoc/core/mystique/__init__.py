"""Mystique - Capability registry for deltadoc.

Lets independently developed libraries attach operations to the Collections
and Records of one collection name, without touching a shared class.

Main Components
---------------
- **Mystique**: Append-only registry keyed by (entity kind, collection name).
- **Capability**: Named bundle of operations bound onto one instance.
- **capability**: Class decorator producing a targeted Capability.

Quick Start
-----------
    >>> from deltadoc.core.mystique import Mystique, capability
    >>>
    >>> @capability("posts")
    ... class Taggable:
    ...     def tag(self, label):
    ...         return self.delta("$addToSet", tags=label)
    >>>
    >>> mystique = Mystique()
    >>> mystique.register_capability(Taggable)
"""

from deltadoc.core.mystique.capability import (
    Capability,
    EntityKind,
    EntityKindName,
    capability,
    compose,
    to_capability,
)
from deltadoc.core.mystique.exceptions import CapabilityError, MystiqueError
from deltadoc.core.mystique.mystique import CapabilityRegistry, Mystique

__all__ = [
    "Mystique",
    "CapabilityRegistry",
    "Capability",
    "EntityKind",
    "EntityKindName",
    "capability",
    "compose",
    "to_capability",
    "MystiqueError",
    "CapabilityError",
]
