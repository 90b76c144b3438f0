"""Error classifier for the keyword enrichment engine.

Classifies errors into categories for intelligent retry decisions.
"""

import asyncio

from seo_engine.core.errors import NOT_FOUND_REASON, PermanentRecordError, TransientCallError
from seo_engine.core.retry_config import ErrorCategory


class ErrorClassifier:
    """Classifies errors into categories for intelligent retry decisions.

    Follows Single Responsibility Principle: Only handles error categorization.
    Static methods for stateless classification.
    """

    @staticmethod
    def categorize(error: Exception) -> ErrorCategory:
        """Categorize an error into TRANSIENT, RATE_LIMIT, PERMANENT, or UNKNOWN.

        Args:
            error: Exception to categorize

        Returns:
            ErrorCategory enum value
        """
        if isinstance(error, PermanentRecordError):
            return ErrorCategory.PERMANENT

        error_str = str(error).lower()

        # Rate limiting shows up as 429 / quota messages from the AI service
        if "429" in error_str or "rate limit" in error_str or "resource exhausted" in error_str:
            return ErrorCategory.RATE_LIMIT

        if isinstance(error, (asyncio.TimeoutError, TimeoutError, ConnectionError)):
            return ErrorCategory.TRANSIENT

        if isinstance(error, TransientCallError):
            return ErrorCategory.TRANSIENT

        # Transient server errors
        if any(code in error_str for code in ["500", "502", "503", "504"]):
            return ErrorCategory.TRANSIENT

        if "timeout" in error_str or "timed out" in error_str:
            return ErrorCategory.TRANSIENT

        return ErrorCategory.UNKNOWN

    @staticmethod
    def reason(error: Exception) -> str:
        """Human-readable failure reason recorded against a record key."""
        if isinstance(error, PermanentRecordError):
            return NOT_FOUND_REASON
        message = getattr(error, "reason", None) or str(error)
        return message or type(error).__name__
