"""
HTTP failure → exception mapping for the availability endpoint.

Messages always start with "HTTP error! status: <code>" so log searches
for a status work the same for every subclass.
"""

from typing import Any

from .exceptions import (
    AvailabilityQueryError,
    HttpStatusError,
    RateLimitError,
    ServerError,
)


class AvailabilityErrorMapper:
    """Turns a non-success response into the matching HttpStatusError subclass."""

    @staticmethod
    def extract_error_message(response_body: Any) -> str:
        """Best human-readable reason found in a response body."""
        if isinstance(response_body, dict):
            for key in ("error", "message"):
                if response_body.get(key):
                    return str(response_body[key])
        return str(response_body)

    @staticmethod
    def parse_retry_after(value: str | None) -> int | None:
        """Retry-After in seconds; HTTP-date values are ignored."""
        if value and value.strip().isdigit():
            return int(value.strip())
        return None

    @staticmethod
    def map_error(
        status_code: int,
        response_body: Any,
        endpoint: str,
        retry_after: str | None = None,
    ) -> AvailabilityQueryError:
        """
        Build (not raise) the exception for a failed response.

        Args:
            status_code: HTTP status of the response
            response_body: Decoded body, or raw text
            endpoint: URL that was called
            retry_after: Raw Retry-After header, if any

        Returns:
            RateLimitError for 429, ServerError for 5xx, HttpStatusError otherwise
        """
        reason = AvailabilityErrorMapper.extract_error_message(response_body)
        context = {"status_code": status_code, "endpoint": endpoint}

        if status_code == 429:
            return RateLimitError(
                f"HTTP error! status: 429 (rate limited) for {endpoint}: {reason}",
                retry_after=AvailabilityErrorMapper.parse_retry_after(retry_after),
                **context,
            )

        error_cls = ServerError if status_code >= 500 else HttpStatusError
        return error_cls(
            f"HTTP error! status: {status_code} for {endpoint}: {reason}", **context
        )
