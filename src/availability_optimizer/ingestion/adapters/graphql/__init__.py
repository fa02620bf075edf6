"""GraphQL availability adapter."""

from .exceptions import (
    AvailabilityQueryError,
    GraphQLResponseError,
    HttpStatusError,
    RateLimitError,
    ServerError,
    TransportError,
)
from .fetcher import GraphQLAvailabilityFetcher, execute_query
from .queries import AVAILABLE_SLOTS_QUERY

__all__ = [
    "AVAILABLE_SLOTS_QUERY",
    "AvailabilityQueryError",
    "GraphQLAvailabilityFetcher",
    "GraphQLResponseError",
    "HttpStatusError",
    "RateLimitError",
    "ServerError",
    "TransportError",
    "execute_query",
]
