"""aiohttp implementation of the IHttpClient port."""

from typing import Any

import aiohttp

from availability_optimizer.ingestion.config.value_objects import HttpClientConfig
from availability_optimizer.ingestion.ports.http import HttpResponse, IHttpClient


class AiohttpClient(IHttpClient):
    """
    Pooled aiohttp transport.

    All chunk requests of a run share one ClientSession, so concurrent
    queries reuse keep-alive connections instead of opening one each.
    The session is opened on the first request; close it with close()
    or by leaving an `async with` block.
    """

    def __init__(self, config: HttpClientConfig | None = None):
        self.config = config or HttpClientConfig()
        self._session: aiohttp.ClientSession | None = None

    def _session_for_request(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            )
        return self._session

    async def post(
        self,
        url: str,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> HttpResponse:
        """
        POST a JSON body and decode the reply.

        Non-JSON replies (proxy error pages and the like) are returned as
        text so the caller can put them into its error message.
        """
        request_timeout = aiohttp.ClientTimeout(total=timeout or self.config.timeout)

        async with self._session_for_request().post(
            url,
            json=json_body,
            headers=headers,
            timeout=request_timeout,
            ssl=self.config.verify_ssl,
        ) as resp:
            try:
                body: Any = await resp.json(content_type=None)
            except ValueError:
                body = await resp.text()

            return HttpResponse(
                status_code=resp.status,
                body=body,
                headers=dict(resp.headers),
                url=str(resp.url),
            )

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "AiohttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
