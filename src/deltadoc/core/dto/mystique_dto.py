"""Mystique result DTOs.

Typed results for capability registry operations.
"""

from pydantic import Field

from deltadoc.core.dto.result_dto import BaseResult


class RegisterCapabilityResult(BaseResult):
    """Result of registering a capability.

    [Result Pattern] Check result.is_ok() before assuming registration succeeded.

    Attributes:
        kind: Entity kind the capability targets ("collection" or "record").
        collection: Collection name the capability is scoped to.
        capability: Name of the registered capability.
        position: Zero-based application order within its entry (-1 on error).

    Status codes:
        - success: Capability appended to the entry
        - error + detail(INVALID): Invalid kind, collection name or capability
    """

    kind: str = Field(default="", description="Target entity kind")
    collection: str = Field(default="", description="Target collection name")
    capability: str = Field(default="", description="Registered capability name")
    position: int = Field(default=-1, description="Application order within the entry")


class DiscoverCapabilitiesResult(BaseResult):
    """Result of discovering capabilities from entry points.

    Attributes:
        registered: Names of the capabilities registered, in order.
        failed: Names of the entry points that could not be loaded.

    Status codes:
        - success: All entry points loaded
        - success + detail(NO_RESULTS): No entry points published in the group
        - success + detail(PARTIAL): Some entry points failed (see failed)
    """

    registered: list[str] = Field(default_factory=list, description="Registered capability names")
    failed: list[str] = Field(default_factory=list, description="Entry points that failed")
