"""Constructor-level configuration for ingestion components.

The composition root (dependency container, or the caller of
AvailabilityClient) turns OptimizerSettings into these small frozen
objects; components never read the global settings themselves.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HTTP client."""

    timeout: float = 30.0
    verify_ssl: bool = True


@dataclass(frozen=True)
class AvailabilityClientConfig:
    """Configuration for the production availability client.

    Defaults are a reasonable starting point; replace them with the
    strategy the optimizer recommends for your endpoint.
    """

    endpoint: str
    days_per_query: int = 7
    max_concurrency: int = 4
    request_delay: float = 0.0  # Seconds between batches, for rate-limited APIs

    def __post_init__(self):
        if self.days_per_query < 1:
            raise ValueError(f"days_per_query must be positive, got {self.days_per_query}")
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be positive, got {self.max_concurrency}")
        if self.request_delay < 0:
            raise ValueError(f"request_delay cannot be negative, got {self.request_delay}")
