"""Retry configuration for the keyword enrichment engine.

Immutable configuration for error retry behavior.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ErrorCategory(str, Enum):
    """Error categories for classification and retry decisions.

    - TRANSIENT: Temporary errors (network timeouts, service unavailable)
    - RATE_LIMIT: Rate limiting errors (429, need exponential backoff)
    - PERMANENT: Record not found upstream, never retried
    - UNKNOWN: Anything else; the AI service is untrusted so these are retried
    """

    TRANSIENT = "transient"
    RATE_LIMIT = "rate_limit"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Delay before retry N (1-based) is initial_delay * backoff_factor ** (N - 1),
    which with the defaults gives 2s, 4s, 8s (2 ** attempt seconds).
    """

    max_retries: int = 3
    initial_delay: float = 2.0  # seconds
    backoff_factor: float = 2.0  # exponential backoff multiplier
    max_delay: float = 60.0  # cap at 60 seconds
    retry_on: List[ErrorCategory] = field(
        default_factory=lambda: [
            ErrorCategory.TRANSIENT,
            ErrorCategory.RATE_LIMIT,
            ErrorCategory.UNKNOWN,
        ]
    )

    def delay_for(self, retry_count: int) -> float:
        """Backoff in seconds before the given (0-based) retry."""
        return min(self.initial_delay * (self.backoff_factor**retry_count), self.max_delay)
