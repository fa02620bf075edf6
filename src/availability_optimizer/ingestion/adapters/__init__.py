"""Upstream API adapters."""
