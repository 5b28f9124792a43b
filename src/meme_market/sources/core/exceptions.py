"""Exceptions raised inside trend sources.

Neither exception leaves a source: TrendSourceABC.contribution maps both (and
any transport error) to a fallback outcome.
"""


class SourceUnavailable(Exception):
    """Source cannot be queried (no credentials, circuit open, empty result)."""

    def __init__(self, message: str, *, no_data: bool = False) -> None:
        super().__init__(message)
        self.no_data = no_data


class MalformedExternalResponse(Exception):
    """Provider answered with a payload of unexpected shape."""
