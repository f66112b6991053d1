# core/exceptions.py
"""Define standardized exception types for scriptcanon.

The deterministic cascade never raises for content problems; it records
warnings instead. These exceptions cover the boundaries where a caller has to
act: bad configuration, an unreachable or misconfigured AI collaborator, and a
collaborator response that is not JSON at all.
"""

from typing import Any


class ScriptCanonError(Exception):
    """Base exception for all scriptcanon errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(ScriptCanonError):
    """Errors related to data validation."""


class ContractValidationError(ValidationError):
    """A value could not be coerced into the canonical parse result at all.

    Shape problems inside a mapping are repaired with warnings; this is reserved
    for callers that opt into strict validation.
    """


class LLMServiceError(ScriptCanonError):
    """Errors related to the AI collaborator (transport, credentials, status)."""


class AIResponseFormatError(LLMServiceError):
    """The collaborator replied, but the body contained no decodable JSON."""


def create_error_context(**kwargs: Any) -> dict[str, Any]:
    """Build a context dictionary for structured errors.

    Args:
        **kwargs: Key-value pairs to include.

    Returns:
        A dictionary containing only keys whose values are not `None`.
    """
    return {k: v for k, v in kwargs.items() if v is not None}


def handle_llm_error(operation: str, original_error: Exception, **context: Any) -> LLMServiceError:
    """Convert a transport exception into a standardized LLM service error.

    Args:
        operation: Name/description of the request that failed.
        original_error: The caught exception.
        **context: Additional structured context to attach.

    Returns:
        An `LLMServiceError` carrying the original error text and type.
    """
    error_details = create_error_context(
        operation=operation,
        original_error=str(original_error),
        error_type=type(original_error).__name__,
        **context,
    )
    if "timeout" in type(original_error).__name__.lower():
        return LLMServiceError(f"AI request timed out during {operation}", details=error_details)
    return LLMServiceError(f"AI request failed during {operation}", details=error_details)
