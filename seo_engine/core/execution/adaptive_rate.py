"""Adaptive rate controller for calls to the AI keyword service.

Watches latency and outcome of every call and decides how long to wait
before dispatching the next one: exponential backoff on error bursts,
gradual relaxation while the service stays healthy.
"""

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Deque, Dict, Optional

from seo_engine.core.logging import logger

Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RateControllerConfig:
    """Tunables for the adaptive delay (all values in milliseconds)."""

    initial_delay_ms: float = 1000.0
    min_delay_ms: float = 500.0
    max_delay_ms: float = 30000.0
    # Healthy-service delay is derived from latency, clamped to this band
    healthy_floor_ms: float = 500.0
    healthy_ceiling_ms: float = 5000.0
    latency_factor: float = 0.5
    window_size: int = 20
    error_multiplier: float = 2.0
    success_multiplier: float = 0.8


@dataclass
class AdaptiveRateStats:
    """Sliding-window latency and error statistics."""

    window_size: int = 20
    recent_latencies_ms: Deque[float] = field(default_factory=deque)
    average_latency_ms: float = 0.0
    consecutive_errors: int = 0
    last_error_at: Optional[datetime] = None
    current_delay_ms: float = 1000.0

    def __post_init__(self):
        self.recent_latencies_ms = deque(self.recent_latencies_ms, maxlen=self.window_size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_latency_ms": round(self.average_latency_ms, 2),
            "recent_samples": len(self.recent_latencies_ms),
            "consecutive_errors": self.consecutive_errors,
            "last_error_at": self.last_error_at.isoformat() if self.last_error_at else None,
            "current_delay_ms": round(self.current_delay_ms, 2),
        }


class AdaptiveRateController:
    """Computes and applies the delay inserted before each enrichment call.

    State updates never await, so under asyncio they are atomic with respect
    to concurrently running pipelines. Only the sleep and the call itself are
    suspension points.
    """

    def __init__(
        self,
        config: Optional[RateControllerConfig] = None,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or RateControllerConfig()
        self.stats = AdaptiveRateStats(
            window_size=self.config.window_size,
            current_delay_ms=self.config.initial_delay_ms,
        )
        self._sleep = sleep
        self._clock = clock

    def next_delay_ms(self) -> float:
        """Delay to apply before the next call."""
        stats = self.stats
        if stats.consecutive_errors > 0 or not stats.recent_latencies_ms:
            return stats.current_delay_ms

        derived = stats.average_latency_ms * self.config.latency_factor
        derived = max(self.config.healthy_floor_ms, min(derived, self.config.healthy_ceiling_ms))
        return min(stats.current_delay_ms, derived)

    def record_latency(self, latency_ms: float) -> None:
        window = self.stats.recent_latencies_ms
        window.append(latency_ms)
        self.stats.average_latency_ms = sum(window) / len(window)

    def record_error(self) -> None:
        """Error hook: one call per failed attempt."""
        stats = self.stats
        stats.consecutive_errors += 1
        stats.last_error_at = datetime.now(timezone.utc)
        stats.current_delay_ms = min(
            stats.current_delay_ms * self.config.error_multiplier, self.config.max_delay_ms
        )
        logger.debug(
            "rate_controller_backoff",
            consecutive_errors=stats.consecutive_errors,
            current_delay_ms=stats.current_delay_ms,
        )

    def record_success(self) -> None:
        """Success hook: one call per succeeded record."""
        stats = self.stats
        stats.consecutive_errors = 0
        if stats.current_delay_ms > self.config.min_delay_ms:
            stats.current_delay_ms = max(
                stats.current_delay_ms * self.config.success_multiplier, self.config.min_delay_ms
            )

    async def delay_then_call(self, key: str, call: Callable[[], Awaitable[Any]]) -> Any:
        """Sleep for the adaptive delay, run the call and record its latency.

        Args:
            key: Record key (for logging)
            call: Zero-argument coroutine factory performing the external call

        Returns:
            Whatever the call returns; exceptions propagate unchanged
        """
        delay_ms = self.next_delay_ms()
        if delay_ms > 0:
            await self._sleep(delay_ms / 1000.0)

        started = self._clock()
        try:
            return await call()
        finally:
            latency_ms = (self._clock() - started) * 1000.0
            self.record_latency(latency_ms)
            logger.debug("enrichment_call_timed", key=key, latency_ms=round(latency_ms, 2))
