"""Core trend source abstractions."""
from meme_market.sources.core.error_mapper import SourceErrorMapper
from meme_market.sources.core.exceptions import (MalformedExternalResponse,
                                                 SourceUnavailable)
from meme_market.sources.core.outcome import (FallbackPolicy, FallbackReason,
                                              SourceOutcome)
from meme_market.sources.core.rate_limit import MinIntervalLimiter
from meme_market.sources.core.source_abc import TrendSourceABC
from meme_market.sources.core.terms import (hashtags_for, normalize_symbol,
                                            search_terms_for)

__all__ = [
    "FallbackPolicy",
    "FallbackReason",
    "MalformedExternalResponse",
    "MinIntervalLimiter",
    "SourceErrorMapper",
    "SourceOutcome",
    "SourceUnavailable",
    "TrendSourceABC",
    "hashtags_for",
    "normalize_symbol",
    "search_terms_for",
]
