"""FastMCP server for exa-mcp.

Exposes the Exa search, contents, answer, deep research and Websets APIs
as MCP tools over stdio. Which tools are registered is controlled by
``enabled_tools`` in the configuration.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from exa_mcp.config import ServerConfig, get_config
from exa_mcp.tools import register_tools

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = (
    "Exa AI web search tools. Search the web, fetch page contents, find "
    "similar pages, answer questions with citations, run deep research "
    "tasks, and manage Websets."
)


def create_server(config: Optional[ServerConfig] = None) -> FastMCP:
    """Create and configure the FastMCP server instance."""

    if config is None:
        config = get_config()

    config.setup_logging()
    if config.debug:
        logger.debug("Starting Exa MCP Server in debug mode")

    mcp = FastMCP(name=config.server_name, instructions=SERVER_INSTRUCTIONS)
    register_tools(mcp, config)

    logger.info("Server created: %s v%s", config.server_name, config.server_version)
    return mcp


def main() -> None:
    """Main entry point for the exa-mcp server."""

    try:
        config = get_config()
        server = create_server(config)

        logger.info("Starting %s v%s", config.server_name, config.server_version)
        server.run()

    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except Exception as exc:
        logger.error("Server error: %s: %s", type(exc).__name__, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
