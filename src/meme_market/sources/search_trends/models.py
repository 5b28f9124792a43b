"""Models for the search-interest source (request params and API payloads)."""
from typing import Any

from pydantic import BaseModel, Field


class TrendsExploreParams(BaseModel):
    """Params for /explore. 'req' is the JSON-encoded comparison request."""

    hl: str = "en-US"
    tz: int = 0
    req: str


class TrendsWidgetParams(BaseModel):
    """Params for /widgetdata/multiline, built from the TIMESERIES widget."""

    hl: str = "en-US"
    tz: int = 0
    req: str
    token: str


class TrendsWidget(BaseModel):
    id: str
    token: str = ""
    request: dict[str, Any] = Field(default_factory=dict)


class TrendsExploreResponse(BaseModel):
    widgets: list[TrendsWidget] = Field(default_factory=list)

    def timeseries(self) -> TrendsWidget | None:
        """Return the interest-over-time widget, if the response has one."""
        return next((w for w in self.widgets if w.id == "TIMESERIES"), None)


class TimelinePoint(BaseModel):
    """One interest point; 'value' holds one number per compared keyword (0-100)."""

    time: str = ""
    value: list[float] = Field(default_factory=list)


class TimelineData(BaseModel):
    timeline_data: list[TimelinePoint] = Field(
        default_factory=list, alias="timelineData"
    )


class MultilineResponse(BaseModel):
    default: TimelineData
