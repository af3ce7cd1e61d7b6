"""Base result types for deltadoc operations.

Expected outcomes (an invalid registration, an empty discovery) are returned
as a Result with status="error" or an informational detail, while system
errors (a misconfigured store, a record without identifier) raise exceptions.

This keeps frequent expected states cheap to report and easy to inspect,
and gives every registry operation the same shape.
"""

from typing import Any, Final, Literal, Self

from pydantic import BaseModel, Field


class StatusDetail(BaseModel):
    """Structured status information for operation results.

    Attributes:
        code: Machine-readable status code (see StatusCode).
        message: Human-readable status description.
        context: Additional diagnostic data (safe to log/serialize).
    """

    code: str = Field(description="Status code: 'invalid', 'no_results', etc.")
    message: str = Field(description="Human-readable status description")
    context: dict[str, Any] = Field(default_factory=dict, description="Diagnostic context")


class BaseResult(BaseModel):
    """Base class for all deltadoc operation results.

    Pattern:
    - status="success" → operation succeeded, specific fields populated
    - status="error" → expected failure, detail field explains why

    Example:
        >>> result = mystique.execute_register("record", "posts", Taggable)
        >>> if result.is_ok():
        ...     print(f"Applied at position {result.position}")
        >>> else:
        ...     print(f"Error [{result.detail.code}]: {result.detail.message}")
    """

    status: Literal["success", "error"] = Field(default="success", description="Operation status")
    detail: StatusDetail | None = Field(
        default=None, description="Status details (present for error or partial success)"
    )

    model_config = {"extra": "forbid"}

    def is_ok(self) -> bool:
        """Check if operation succeeded."""
        return self.status == "success"

    def is_error(self) -> bool:
        """Check if operation failed with expected error."""
        return self.status == "error"

    @classmethod
    def success(cls, *, detail: StatusDetail | None = None, **kwargs: Any) -> Self:
        """Factory method for successful result.

        Args:
            detail: Optional status details for informational status.
            **kwargs: Subclass-specific fields.

        Returns:
            Result instance with status="success".
        """
        return cls(status="success", detail=detail, **kwargs)

    @classmethod
    def fail(cls, detail: StatusDetail, **kwargs: Any) -> Self:
        """Factory method for expected failure result.

        Args:
            detail: Required status details describing the failure.
            **kwargs: Subclass-specific fields (use defaults).

        Returns:
            Result instance with status="error".
        """
        return cls(status="error", detail=detail, **kwargs)


class StatusCode:
    """Centralized registry of status codes used across deltadoc.

    Use these constants instead of magic strings.
    """

    INVALID: Final = "invalid"
    """[Common] Invalid kind, collection name or capability."""

    NO_RESULTS: Final = "no_results"
    """[Mystique] Discovery found nothing to register."""

    PARTIAL: Final = "partial"
    """[Mystique] Some entry points failed to load."""


__all__ = ["BaseResult", "StatusDetail", "StatusCode"]
