"""GraphQL availability fetcher.

Single Responsibility: Turn one set of query variables into one POST
request and map every failure mode to an AvailabilityQueryError.
Does NOT retry, chunk, or schedule requests.
"""

import asyncio
import json
from typing import Any

import aiohttp

from availability_optimizer.infrastructure.observability import get_ingestion_logger
from availability_optimizer.ingestion.ports.http import IHttpClient

from .error_mapper import AvailabilityErrorMapper
from .exceptions import GraphQLResponseError, TransportError
from .queries import AVAILABLE_SLOTS_QUERY

DEFAULT_HEADERS = {"Content-Type": "application/json"}


async def execute_query(
    http_client: IHttpClient,
    endpoint: str,
    variables: dict[str, str],
    headers: dict[str, str] | None = None,
    query: str = AVAILABLE_SLOTS_QUERY,
) -> Any:
    """
    Execute one GraphQL query.

    Args:
        http_client: Transport used for the POST
        endpoint: GraphQL endpoint URL
        variables: Query variables (base variables plus startDate/endDate)
        headers: Extra headers, merged over Content-Type: application/json
        query: GraphQL document

    Returns:
        The `data` member of the response

    Raises:
        TransportError: Connection failure or timeout
        HttpStatusError: Non-success HTTP status (RateLimitError, ServerError)
        GraphQLResponseError: Response carried GraphQL errors or was not JSON
    """
    request_headers = {**DEFAULT_HEADERS, **(headers or {})}

    try:
        response = await http_client.post(
            endpoint,
            json_body={"query": query, "variables": variables},
            headers=request_headers,
        )
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise TransportError(
            f"Request to {endpoint} failed: {e!r}", endpoint=endpoint
        ) from e

    if not response.ok:
        raise AvailabilityErrorMapper.map_error(
            response.status_code,
            response.body,
            endpoint,
            retry_after=response.headers.get("Retry-After"),
        )

    body = response.body
    if not isinstance(body, dict):
        raise GraphQLResponseError(
            f"Expected a JSON object from {endpoint}, got {type(body).__name__}",
            status_code=response.status_code,
            endpoint=endpoint,
        )

    if body.get("errors"):
        raise GraphQLResponseError(
            f"GraphQL errors: {json.dumps(body['errors'])}",
            errors=body["errors"],
            status_code=response.status_code,
            endpoint=endpoint,
        )

    return body.get("data")


class GraphQLAvailabilityFetcher:
    """
    Fetches one availability chunk from a GraphQL endpoint.

    Implements IQueryFetcher protocol by binding endpoint, headers and
    query to an injected HTTP client.
    """

    def __init__(
        self,
        http_client: IHttpClient,
        endpoint: str,
        headers: dict[str, str] | None = None,
        query: str = AVAILABLE_SLOTS_QUERY,
    ):
        """
        Args:
            http_client: HTTP client implementation (e.g., AiohttpClient)
            endpoint: GraphQL endpoint URL
            headers: Extra request headers
            query: GraphQL document to send
        """
        self.http_client = http_client
        self.endpoint = endpoint
        self.headers = dict(headers or {})
        self.query = query
        self.log = get_ingestion_logger("graphql-fetcher", endpoint=endpoint)

    async def fetch(self, variables: dict[str, str]) -> Any:
        self.log.debug(
            "query_sent",
            start_date=variables.get("startDate"),
            end_date=variables.get("endDate"),
        )
        return await execute_query(
            self.http_client,
            self.endpoint,
            variables,
            headers=self.headers,
            query=self.query,
        )
