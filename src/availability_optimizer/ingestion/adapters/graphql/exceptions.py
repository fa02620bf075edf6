"""
Availability API Exception Hierarchy

Provides specific exception types for the ways a single chunk query can
fail, so the executor can count them and logs can classify them.
"""

from typing import Any


class AvailabilityQueryError(Exception):
    """Base exception for all availability query errors."""

    def __init__(
        self, message: str, status_code: int | None = None, endpoint: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class TransportError(AvailabilityQueryError):
    """Connection failure or timeout before a response arrived."""

    pass


class HttpStatusError(AvailabilityQueryError):
    """Non-success HTTP status."""

    pass


class RateLimitError(HttpStatusError):
    """429 - Too many requests. Recorded, never retried."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(HttpStatusError):
    """500+ - Server-side error."""

    pass


class GraphQLResponseError(AvailabilityQueryError):
    """Response carried a GraphQL `errors` array."""

    def __init__(self, message: str, errors: list[Any] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
