"""Maps exceptions raised by a source call to a fallback reason."""
import asyncio
import json
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from meme_market.sources.core.exceptions import (MalformedExternalResponse,
                                                 SourceUnavailable)
from meme_market.sources.core.outcome import FallbackReason


@dataclass(frozen=True)
class SourceErrorMapper:
    """Classifies source exceptions so the aggregator never sees them.

    One mapper is shared by all sources; the reason is only informational
    (logged and reported), the fallback value does not depend on it.
    """

    def to_reason(self, exc: BaseException) -> FallbackReason:
        """Map an exception from a source call to a FallbackReason.

        Args:
            exc: The exception raised while fetching or parsing a signal.

        Returns:
            The matching FallbackReason; UNEXPECTED_ERROR for anything unknown.
        """
        if isinstance(exc, SourceUnavailable):
            return FallbackReason.NO_DATA if exc.no_data else FallbackReason.NETWORK_ERROR
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
            return FallbackReason.TIMEOUT
        if isinstance(exc, httpx.HTTPStatusError):
            return FallbackReason.HTTP_ERROR
        if isinstance(exc, (httpx.TransportError, OSError)):
            return FallbackReason.NETWORK_ERROR
        if isinstance(
            exc,
            (
                MalformedExternalResponse,
                ValidationError,
                json.JSONDecodeError,
                KeyError,
                IndexError,
                TypeError,
                ValueError,
            ),
        ):
            return FallbackReason.MALFORMED_RESPONSE
        return FallbackReason.UNEXPECTED_ERROR
