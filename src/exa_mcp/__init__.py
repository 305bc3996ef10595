"""Exa MCP - MCP server for the Exa web search API."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("exa-mcp")
except PackageNotFoundError:
    # Package not installed (development mode without editable install)
    __version__ = "1.0.0"

from exa_mcp.server import create_server, main

__all__ = ["__version__", "create_server", "main"]
