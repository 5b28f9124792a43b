"""Trend score models."""
from datetime import datetime

from pydantic import BaseModel, Field


class SourceComponent(BaseModel):
    """One source's share of a trend score."""

    source: str
    value: float = Field(description="Contribution before weighting")
    weight: float
    weighted: float
    fallback: bool = False
    reason: str | None = None


class TrendScore(BaseModel):
    """Aggregated social-sentiment score for one symbol at one time."""

    symbol: str
    value: float
    timestamp: datetime
    components: list[SourceComponent] = Field(default_factory=list)

    @property
    def fallback_count(self) -> int:
        return sum(1 for c in self.components if c.fallback)
