"""HTTP transport implementations."""

from .aiohttp_client import AiohttpClient

__all__ = ["AiohttpClient"]
