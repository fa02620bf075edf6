"""
Dependency container for the optimizer.

Wires together:
- AiohttpClient (transport)
- GraphQLAvailabilityFetcher (one chunk request)
- OptimizationReporter (progress/logging)
- JsonResultsStore (run snapshot)
- AvailabilityQueryOptimizer (orchestration)
"""

import logging

from availability_optimizer.config.state import OptimizerSettings
from availability_optimizer.ingestion.adapters.graphql import (
    GraphQLAvailabilityFetcher,
)
from availability_optimizer.ingestion.config.value_objects import HttpClientConfig
from availability_optimizer.ingestion.connectors.aiohttp_client import AiohttpClient
from availability_optimizer.optimization.optimizer import AvailabilityQueryOptimizer
from availability_optimizer.optimization.persistence import JsonResultsStore
from availability_optimizer.optimization.reporter import OptimizationReporter

logger = logging.getLogger(__name__)


class OptimizerDependencyContainer:
    """
    Dependency injection container for an optimizer run.

    Single responsibility: Assemble dependencies. Owns the HTTP client it
    creates; call close() (or use `async with`) when the run is over.

    Usage:
        async with OptimizerDependencyContainer(settings) as container:
            optimizer = container.create_optimizer()
            report = await optimizer.optimize()
    """

    def __init__(self, settings: OptimizerSettings):
        """
        Args:
            settings: Validated configuration; must carry an endpoint

        Raises:
            ConfigurationError: If no endpoint is configured
        """
        self.settings = settings
        self.endpoint = settings.require_endpoint()
        self._http_client: AiohttpClient | None = None

        logger.info("OptimizerDependencyContainer initialized")

    def create_http_client(self) -> AiohttpClient:
        """Shared HTTP client, created on first use."""
        if self._http_client is None:
            self._http_client = AiohttpClient(
                HttpClientConfig(
                    timeout=self.settings.http.timeout,
                    verify_ssl=self.settings.http.verify_ssl,
                )
            )
        return self._http_client

    def create_fetcher(self) -> GraphQLAvailabilityFetcher:
        return GraphQLAvailabilityFetcher(
            http_client=self.create_http_client(),
            endpoint=self.endpoint,
            headers=self.settings.headers,
        )

    def create_reporter(self) -> OptimizationReporter:
        return OptimizationReporter()

    def create_results_store(self) -> JsonResultsStore:
        return JsonResultsStore(results_dir=self.settings.results_dir)

    def create_optimizer(self) -> AvailabilityQueryOptimizer:
        """
        Create the optimizer with every collaborator wired in.

        Returns:
            AvailabilityQueryOptimizer instance
        """
        return AvailabilityQueryOptimizer(
            settings=self.settings,
            fetcher=self.create_fetcher(),
            reporter=self.create_reporter(),
            results_store=self.create_results_store(),
        )

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.close()
            self._http_client = None

    async def __aenter__(self) -> "OptimizerDependencyContainer":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
