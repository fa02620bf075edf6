"""Transport port for the GraphQL fetcher.

The fetcher only needs "POST this JSON body, give me status and decoded
body back"; anything that can do that (aiohttp, a test double) plugs in here.
"""

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass
class HttpResponse:
    """What the fetcher needs to know about one HTTP exchange."""

    status_code: int
    body: Any  # decoded JSON, or the raw text when the body is not JSON
    headers: dict[str, str]
    url: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class IHttpClient(Protocol):
    """JSON-over-HTTP transport.

    Implementations send requests and hand back responses as they are.
    Status interpretation and GraphQL error handling belong to the fetcher;
    nothing here retries.
    """

    async def post(
        self,
        url: str,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """Send `json_body` to `url`.

        Raises:
            aiohttp.ClientError: The connection failed
            asyncio.TimeoutError: No response within the timeout (seconds)
        """
        ...

    async def close(self) -> None:
        """Release pooled connections."""
        ...
