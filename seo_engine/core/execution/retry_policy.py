"""Retry policy for enrichment calls.

Bounded exponential-backoff retry around one call, reporting every attempt
to the adaptive rate controller.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from seo_engine.core.execution.adaptive_rate import AdaptiveRateController, Sleep
from seo_engine.core.execution.error_classifier import ErrorClassifier
from seo_engine.core.logging import logger
from seo_engine.core.retry_config import RetryConfig


class RetryPolicy:
    """Retries transient failures, propagates permanent ones immediately.

    Uses composition: wraps any zero-argument coroutine factory without
    knowing what it calls.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        rate_controller: Optional[AdaptiveRateController] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize RetryPolicy.

        Args:
            config: RetryConfig with retry behavior settings
            rate_controller: Controller receiving error/success hooks (optional)
            sleep: Awaitable sleep used for backoff
        """
        self.config = config or RetryConfig()
        self.rate_controller = rate_controller
        self._sleep = sleep

    async def run(self, call: Callable[[], Awaitable[Any]], key: Optional[str] = None) -> Any:
        """Run call with automatic retry on retryable failures.

        Uses exponential backoff: delay = initial_delay * (backoff_factor ^ retry_count),
        capped at max_delay.

        Args:
            call: Zero-argument coroutine factory, invoked once per attempt
            key: Record key used for logging

        Returns:
            The call's result from the first successful attempt

        Raises:
            The last failure once retries are exhausted, or the first
            non-retryable failure
        """
        retry_count = 0

        while True:
            try:
                result = await call()
            except Exception as e:
                if self.rate_controller is not None:
                    self.rate_controller.record_error()

                category = ErrorClassifier.categorize(e)

                # Don't retry permanent errors
                if category not in self.config.retry_on:
                    logger.info(
                        "enrichment_attempt_not_retryable",
                        key=key,
                        category=category.value,
                        attempt=retry_count + 1,
                        error=str(e),
                    )
                    raise

                if retry_count >= self.config.max_retries:
                    logger.warning(
                        "enrichment_retries_exhausted",
                        key=key,
                        attempts=retry_count + 1,
                        error=str(e),
                    )
                    raise

                delay = self.config.delay_for(retry_count)
                logger.info(
                    "enrichment_attempt_retrying",
                    key=key,
                    category=category.value,
                    attempt=retry_count + 1,
                    delay_seconds=delay,
                    error=str(e),
                )

                await self._sleep(delay)
                retry_count += 1
                continue

            if self.rate_controller is not None:
                self.rate_controller.record_success()
            return result
