"""Abstract base class for trend signal sources."""
import asyncio
import logging
import math
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

import httpx

from meme_market.sources.core.error_mapper import SourceErrorMapper
from meme_market.sources.core.exceptions import MalformedExternalResponse
from meme_market.sources.core.outcome import (FallbackPolicy, FallbackReason,
                                              SourceOutcome)
from meme_market.sources.core.rate_limit import MinIntervalLimiter
from meme_market.utils import clamp

logger = logging.getLogger(__name__)


def _describe(exc: BaseException) -> str:
    """Log text for a source failure. HTTP errors omit the URL (it may carry credentials)."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    if isinstance(exc, httpx.RequestError):
        return type(exc).__name__
    return str(exc) or type(exc).__name__


class TrendSourceABC(ABC):
    """Base interface for all trend signal sources.

    Each source wraps one external provider and turns its raw signal (views,
    mentions, engagement, search interest) into a bounded contribution.
    Subclasses implement _fetch_signal and issue HTTP calls through
    _request(); the base class owns the shared policy: credential check,
    circuit breaker, rate limiting and timeout per request, clamping into
    value_range and fallback on any failure.

    Subclasses must call super().__init__().
    """

    name: str = "source"
    requires_credentials: bool = False

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        value_range: tuple[float, float],
        fallback: FallbackPolicy,
        timeout: float = 10.0,
        limiter: MinIntervalLimiter | None = None,
        error_mapper: SourceErrorMapper | None = None,
        failure_threshold: int | None = None,
        circuit_cooldown_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize shared source policy.

        Args:
            client: HTTP client owned by this source (closed by close()).
            value_range: (low, high) bounds of a measured contribution.
            fallback: Policy drawing the value used when the source fails.
            timeout: Seconds allowed for one network request.
            limiter: Optional spacing limiter applied before each request.
            error_mapper: Maps exceptions to fallback reasons.
            failure_threshold: Consecutive failures that open the circuit
                (None disables the breaker).
            circuit_cooldown_seconds: How long an open circuit skips the network.
            clock: Monotonic clock, injectable for tests.
        """
        low, high = value_range
        if low > high:
            raise ValueError(f"{self.name}: empty value range {value_range}")
        self._client = client
        self._value_range = (low, high)
        self._fallback = fallback
        self._timeout = timeout
        self._limiter = limiter
        self._errors = error_mapper or SourceErrorMapper()
        self._failure_threshold = failure_threshold
        self._circuit_cooldown = circuit_cooldown_seconds
        self._clock = clock
        self._consecutive_failures = 0
        self._open_until: float | None = None

    @property
    def value_range(self) -> tuple[float, float]:
        """Bounds of this source's contribution before weighting."""
        return self._value_range

    @property
    def has_credentials(self) -> bool:
        """Whether the credentials needed for a network call are configured."""
        return True

    @property
    def circuit_open(self) -> bool:
        if self._open_until is None:
            return False
        if self._clock() >= self._open_until:
            self._open_until = None
            return False
        return True

    async def contribution(self, symbol: str, terms: list[str]) -> SourceOutcome:
        """Produce this source's bounded contribution for a symbol.

        Never raises for provider problems: every failure becomes a fallback
        outcome carrying the reason.

        Args:
            symbol: Instrument symbol (e.g. "SKIBI").
            terms: Search terms for the symbol, most specific first.

        Returns:
            SourceOutcome with a value inside value_range on success, or a
            fallback value and reason.
        """
        if self.requires_credentials and not self.has_credentials:
            logger.debug("%s: no credentials, using fallback for %s", self.name, symbol)
            return self.fallback_outcome(FallbackReason.MISSING_CREDENTIALS)
        if self.circuit_open:
            return self.fallback_outcome(FallbackReason.CIRCUIT_OPEN)

        try:
            raw = await self._fetch_signal(symbol, terms)
            if not math.isfinite(raw):
                raise MalformedExternalResponse(f"non-finite signal {raw!r}")
        except Exception as exc:  # pylint: disable=broad-except
            reason = self._errors.to_reason(exc)
            logger.warning(
                "%s: fallback for %s (%s): %s",
                self.name,
                symbol,
                reason.value,
                _describe(exc),
            )
            self._record_failure()
            return self.fallback_outcome(reason)

        self._record_success()
        low, high = self._value_range
        return SourceOutcome.success(self.name, clamp(raw, low, high))

    @abstractmethod
    async def _fetch_signal(self, symbol: str, terms: list[str]) -> float:
        """Fetch and normalize the raw signal for a symbol.

        Implementations may raise any exception on failure; raise
        SourceUnavailable(no_data=True) for an empty result.
        """

    async def _request(
        self, method: str, url: str, *, throttle: bool = True, **kwargs
    ) -> httpx.Response:
        """Send one request through the limiter and timeout; raise on HTTP errors.

        Args:
            method: HTTP method.
            url: URL, absolute or relative to the client's base_url.
            throttle: Wait on the limiter first. Pass False for a follow-up
                request that belongs to the same logical query.
            **kwargs: Passed to httpx.AsyncClient.request.
        """
        if throttle and self._limiter is not None:
            await self._limiter.wait()
        response = await asyncio.wait_for(
            self._client.request(method, url, **kwargs), timeout=self._timeout
        )
        response.raise_for_status()
        return response

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "TrendSourceABC":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()

    def fallback_outcome(self, reason: FallbackReason) -> SourceOutcome:
        """Fallback outcome for this source, drawn from its fallback policy."""
        return SourceOutcome.fallback(self.name, self._fallback.draw(), reason)

    def _record_failure(self) -> None:
        if self._failure_threshold is None:
            return
        self._consecutive_failures += 1
        if self._consecutive_failures >= self._failure_threshold:
            self._open_until = self._clock() + self._circuit_cooldown
            self._consecutive_failures = 0
            logger.warning(
                "%s: %d consecutive failures, skipping network for %.0fs",
                self.name,
                self._failure_threshold,
                self._circuit_cooldown,
            )

    def _record_success(self) -> None:
        self._consecutive_failures = 0
