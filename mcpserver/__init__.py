"""Asyncio framework for Model Context Protocol servers over line-delimited JSON-RPC."""

__version__ = "0.1.0"