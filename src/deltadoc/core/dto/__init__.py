"""DTO package for deltadoc core.

Provides the BaseResult pattern for consistent result handling across modules.
"""

from .mystique_dto import DiscoverCapabilitiesResult, RegisterCapabilityResult
from .result_dto import BaseResult, StatusCode, StatusDetail

__all__ = [
    "BaseResult",
    "StatusDetail",
    "StatusCode",
    "RegisterCapabilityResult",
    "DiscoverCapabilitiesResult",
]
