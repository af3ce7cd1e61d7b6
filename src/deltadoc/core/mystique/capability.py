"""Mystique - Capability bundles and per-instance composition.

A capability is a named bundle of operations that gets bound onto a single
Collection or Record instance. Bundles are usually written as plain classes
whose public functions become methods of the instance they are applied to:

    >>> @capability("posts")
    ... class Publishable:
    ...     def publish(self):
    ...         return self.delta("$set", published=True).update()

Binding happens on the instance only; the Collection and Record classes are
never modified.
"""

import inspect
import logging
import types
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from pkgutil import resolve_name
from typing import Any, Final, Literal, TypeAlias

from deltadoc.core.mystique.exceptions import CapabilityError

logger = logging.getLogger(__name__)


class EntityKind:
    """Entity kinds a capability can target."""

    COLLECTION: Final = "collection"
    """Capability bound onto Collection instances."""

    RECORD: Final = "record"
    """Capability bound onto Record instances."""

    ALL: Final = (COLLECTION, RECORD)


#: Entity kind literal type
EntityKindName: TypeAlias = Literal["collection", "record"]


@dataclass(frozen=True, slots=True)
class Capability:
    """A named bundle of operations.

    Attributes:
        name: Capability name, recorded on every instance it is applied to.
        operations: Operation name to function. Functions receive the
            instance as first argument, staticmethods are bound as-is.
        kind: Optional target entity kind, used by register_capability()
            and entry point discovery.
        collection: Optional target collection name, same use as kind.
    """

    name: str
    operations: Mapping[str, Any] = field(default_factory=dict)
    kind: EntityKindName | None = None
    collection: str | None = None

    def __post_init__(self) -> None:
        for op_name, func in self.operations.items():
            if not isinstance(op_name, str) or not op_name:
                raise CapabilityError(f"Invalid operation name in '{self.name}'", op_name)
            if op_name.startswith("_"):
                raise CapabilityError(
                    f"Operation names of '{self.name}' cannot start with an underscore", op_name
                )
            if not (callable(func) or isinstance(func, staticmethod)):
                raise CapabilityError(
                    f"Operation '{op_name}' of '{self.name}' is not callable", func
                )
        object.__setattr__(self, "operations", types.MappingProxyType(dict(self.operations)))

    @classmethod
    def from_class(
        cls,
        source: type,
        *,
        name: str | None = None,
        kind: EntityKindName | None = None,
        collection: str | None = None,
    ) -> "Capability":
        """Build a capability from the public functions of a class.

        Base classes are walked from the most generic to the most specific,
        so an override in a subclass replaces the inherited operation.

        Args:
            source: Class holding the operations.
            name: Capability name (defaults to the class name).
            kind: Optional target entity kind.
            collection: Optional target collection name.

        Returns:
            A Capability instance.
        """
        operations: dict[str, Any] = {}
        for klass in reversed(source.__mro__[:-1]):
            for attr_name, value in vars(klass).items():
                if attr_name.startswith("_"):
                    continue
                if inspect.isfunction(value) or isinstance(value, staticmethod):
                    operations[attr_name] = value
        return cls(
            name=name or source.__name__,
            operations=operations,
            kind=kind,
            collection=collection,
        )

    def bind(self, instance: object) -> dict[str, Callable[..., Any]]:
        """Return the operations bound to the given instance."""
        bound: dict[str, Callable[..., Any]] = {}
        for op_name, func in self.operations.items():
            if isinstance(func, staticmethod):
                bound[op_name] = func.__func__
            else:
                bound[op_name] = types.MethodType(func, instance)
        return bound

    def __repr__(self) -> str:
        """Return a compact debug representation."""
        target = f"{self.kind}:{self.collection}" if self.kind or self.collection else "untargeted"
        return f"Capability(name={self.name}, target={target}, operations={sorted(self.operations)})"


def to_capability(value: Any, *, name: str | None = None) -> Capability:
    """Turn a registration value into a Capability.

    Accepts a Capability, a class (see Capability.from_class), a mapping of
    operation names to callables, or an import path string in
    "package.module:Attribute" form that resolves to one of those.

    Args:
        value: The value to convert.
        name: Optional capability name. Mappings have no name of their own:
            they default to the import path attribute, or "anonymous".

    Raises:
        CapabilityError: If the value cannot be turned into a Capability.
    """
    if isinstance(value, str):
        try:
            resolved = resolve_name(value)
        except (ImportError, AttributeError, ValueError) as e:
            raise CapabilityError(f"Cannot resolve capability path: {e}", value) from e
        if isinstance(resolved, str):
            raise CapabilityError("Capability path resolved to another string", value)
        if name is None and isinstance(resolved, Mapping):
            name = value.rpartition(":")[2] or value.rpartition(".")[2]
        return to_capability(resolved, name=name)
    if isinstance(value, Capability):
        return value if name is None else replace(value, name=name)
    if isinstance(value, type):
        return Capability.from_class(value, name=name)
    if isinstance(value, Mapping):
        return Capability(name=name or "anonymous", operations=value)
    raise CapabilityError(
        f"Expected a Capability, a class, a mapping or an import path, got {type(value).__name__}"
    )


def capability(
    collection: str,
    *,
    kind: EntityKindName = EntityKind.RECORD,
    name: str | None = None,
) -> Callable[[type], Capability]:
    """Decorate a class as a capability targeting one collection.

    Args:
        collection: Collection name the capability is scoped to.
        kind: Entity kind ("record" by default, or "collection").
        name: Optional capability name (defaults to the class name).

    Returns:
        A decorator that turns the class into a targeted Capability, ready
        for Mystique.register_capability() or entry point publication.

    Example:
        >>> @capability("posts", kind="collection")
        ... class Recent:
        ...     def recent(self, limit=10):
        ...         return self.find().sort("created_at", -1).limit(limit)
    """
    if kind not in EntityKind.ALL:
        raise CapabilityError(f"Unknown entity kind '{kind}'", kind)

    def _make_capability(source: type) -> Capability:
        return Capability.from_class(source, name=name, kind=kind, collection=collection)

    return _make_capability


def compose(instance: object, capabilities: Iterable[Capability]) -> tuple[str, ...]:
    """Bind capabilities onto one instance, in order.

    Operations are written to the instance namespace, so a later capability
    overrides an earlier one with the same operation name, and any capability
    shadows the methods the instance's class defines.

    Returns:
        Names of the applied capabilities, in application order.
    """
    applied: list[str] = []
    for cap in capabilities:
        for op_name, bound in cap.bind(instance).items():
            object.__setattr__(instance, op_name, bound)
        applied.append(cap.name)
        logger.debug(
            "Applied capability '%s' to %s (operations=%s)",
            cap.name,
            type(instance).__name__,
            sorted(cap.operations),
        )
    return tuple(applied)


__all__ = [
    "Capability",
    "EntityKind",
    "EntityKindName",
    "capability",
    "compose",
    "to_capability",
]
