"""
Failure envelope: unified response classification.

Every outcome the storefront reports to its presentation layer is wrapped
in an ApiResponse. Domain errors are KnownError subclasses carrying their
own classification, so a rejected cart operation or an empty catalog is
always explained rather than surfacing as a raw 500.

Response types:
- Success: Operation completed successfully
- KnownFailure: System knows why it failed
- UnknownFailure: System does not know why it failed

AUTHORITY BOUNDARY:
All user-visible responses pass through `finalize_response()`.
"""

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"

    # Catalog failures
    SOURCE_UNAVAILABLE = "source_unavailable"
    LOOKUP_FAILED = "lookup_failed"
    EMPTY_CATALOG = "empty_catalog"

    # Cart rule violations
    UNKNOWN_ITEM = "unknown_item"
    OUT_OF_STOCK = "out_of_stock"
    STOCK_EXCEEDED = "stock_exceeded"
    EMPTY_CART = "empty_cart"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    SUCCESS = "success"
    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


T = TypeVar("T")


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel, Generic[T]):
    """
    Universal response envelope.

    Every response is classified into one of the outcome types,
    ensuring no failure reaches the user unexplained.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    data: T | None = Field(
        default=None,
        description="Response data (present on success)",
    )
    failure: FailureDetail | None = Field(
        default=None,
        description="Failure details (present on non-success)",
    )

    @classmethod
    def success(cls, data: T) -> "ApiResponse[T]":
        """Create a success response."""
        return cls(outcome=OutcomeType.SUCCESS, data=data)

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse[Any]":
        """
        Create a known failure response.

        Use when the system knows exactly why the operation failed.
        Example: item out of stock, inventory file missing.
        """
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse[Any]:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


# =============================================================================
# FAILURE AUTHORITY BOUNDARY
# =============================================================================

# Standard messages. Fixed wording, never derived from runtime state.

STANDARD_MESSAGES: dict[OutcomeType, str] = {
    OutcomeType.KNOWN_FAILURE: "The operation failed due to a known issue.",
    OutcomeType.UNKNOWN_FAILURE: (
        "Something went wrong and the cause is unknown. Please retry."
    ),
}

STANDARD_SUGGESTIONS: dict[OutcomeType, str] = {
    OutcomeType.KNOWN_FAILURE: "Check the error details and adjust your request.",
    OutcomeType.UNKNOWN_FAILURE: "If this persists, please report the issue.",
}


# Ids of responses that passed through finalize_response()
_finalized_responses: set[int] = set()


def finalize_response(response: ApiResponse[Any]) -> ApiResponse[Any]:
    """
    Finalize a response through the authority boundary.

    Args:
        response: The ApiResponse to finalize

    Returns:
        The same response, marked as having passed through the boundary

    Raises:
        ValueError: If response structure is invalid
    """
    if response.outcome == OutcomeType.SUCCESS:
        if response.failure is not None:
            raise ValueError("Success response must not have failure details")
    else:
        if response.failure is None:
            raise ValueError(f"{response.outcome.value} response must have failure details")

    _finalized_responses.add(id(response))

    return response


def is_finalized(response: ApiResponse[Any]) -> bool:
    """Check if a response has passed through the authority boundary."""
    return id(response) in _finalized_responses


def create_unknown_failure(
    exception: Exception,
    include_type: bool = True,
) -> ApiResponse[Any]:
    """
    Create an unknown failure response from an exception.

    The message is fixed and cannot be customized.
    """
    detail = None
    if include_type:
        detail = f"{type(exception).__name__}"

    response: ApiResponse[Any] = ApiResponse(
        outcome=OutcomeType.UNKNOWN_FAILURE,
        failure=FailureDetail(
            kind=FailureKind.UNKNOWN,
            message=STANDARD_MESSAGES[OutcomeType.UNKNOWN_FAILURE],
            detail=detail,
            suggestion=STANDARD_SUGGESTIONS[OutcomeType.UNKNOWN_FAILURE],
        ),
    )

    return finalize_response(response)


def create_known_failure(error: KnownError) -> ApiResponse[Any]:
    """Create a finalized known failure response from a domain error."""
    return finalize_response(error.to_response())


def create_success(data: T) -> ApiResponse[T]:
    """Create a finalized success response."""
    response = ApiResponse[T](outcome=OutcomeType.SUCCESS, data=data)
    return finalize_response(response)
