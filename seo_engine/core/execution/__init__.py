"""Execution module for the keyword enrichment engine.

Provides error classification, adaptive pacing and retry for external calls.
"""

from seo_engine.core.execution.adaptive_rate import (
    AdaptiveRateController,
    AdaptiveRateStats,
    RateControllerConfig,
)
from seo_engine.core.execution.error_classifier import ErrorClassifier
from seo_engine.core.execution.retry_policy import RetryPolicy

__all__ = [
    "AdaptiveRateController",
    "AdaptiveRateStats",
    "RateControllerConfig",
    "ErrorClassifier",
    "RetryPolicy",
]
