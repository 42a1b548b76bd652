"""Error types for the product upsert workflow and the catalog layer."""

from typing import Dict, List, Optional, Sequence

from .models.shopify_models import UserError

FALLBACK_ERROR_MESSAGE = "Unknown error"


def error_message(
    transport_errors: Sequence[str] = (),
    user_errors: Sequence[UserError] = (),
    fallback: str = FALLBACK_ERROR_MESSAGE,
) -> str:
    """
    Pick the single message shown to a merchant.

    Transport errors win over field-level user errors, which win over
    the fallback.
    """
    for message in transport_errors:
        if message:
            return message
    for user_error in user_errors:
        if user_error.message:
            return user_error.message
    return fallback


class CatalogCallError(Exception):
    """Raised when a Shopify Admin call fails on either failure channel."""

    def __init__(
        self,
        transport_errors: Optional[List[str]] = None,
        user_errors: Optional[List[UserError]] = None,
        timed_out: bool = False,
    ):
        self.transport_errors = list(transport_errors or [])
        self.user_errors = list(user_errors or [])
        self.timed_out = timed_out
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return error_message(self.transport_errors, self.user_errors)


class OrchestrationError(Exception):
    """Base class for errors reported by the upsert workflow."""

    kind = "orchestration_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(OrchestrationError):
    """A product draft is missing fields or holds malformed values."""

    kind = "validation_error"

    def __init__(self, fields: Dict[str, str]):
        self.fields = dict(fields)
        super().__init__("; ".join(f"{name}: {problem}" for name, problem in self.fields.items()))


class RemoteOperationError(OrchestrationError):
    """A named workflow step failed against the Admin API."""

    kind = "remote_operation_error"

    def __init__(self, step: str, message: str, timed_out: bool = False):
        self.step = step
        self.timed_out = timed_out
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.step}: {self.message}"


class EmptyResultError(RemoteOperationError):
    """The Admin API returned nothing where exactly one result was required."""

    kind = "empty_result_error"
