"""Data acquisition: GraphQL availability fetcher, HTTP transport and client."""
