"""
Availability query optimizer.
Benchmarks chunked, concurrency-bounded querying of a date-range
availability API and recommends the fastest (chunk size, concurrency) pair.

Modules:
- optimization: Partitioning, bounded execution, statistics, strategies, optimizer
- ingestion: GraphQL fetch client, HTTP transport, production availability client
- infrastructure: Logging
- config: Typed configuration state
"""

__version__ = "0.1.0"
