"""Shared mapping of domain errors to HTTP responses."""
from fastapi import HTTPException

from meme_market.errors import (InvalidNumericInput, UnknownEventType,
                                UnknownUser)


def domain_error_to_http(exc: Exception) -> tuple[int, str]:
    """Map a domain exception to (status_code, detail) for HTTP responses.

    Args:
        exc: Exception raised by a service.

    Returns:
        (status_code, detail) suitable for HTTPException.
    """
    if isinstance(exc, (UnknownEventType, UnknownUser)):
        return (404, str(exc))
    if isinstance(exc, InvalidNumericInput):
        return (422, str(exc))
    return (500, "Internal server error")


def raise_domain_http(exc: Exception) -> None:
    """Map a domain exception to HTTP and raise HTTPException. Never returns."""
    status_code, detail = domain_error_to_http(exc)
    raise HTTPException(status_code=status_code, detail=detail) from exc
