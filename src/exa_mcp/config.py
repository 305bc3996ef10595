"""
Server configuration for exa-mcp.

Supports configuration via:
1. Environment variables (highest priority)
2. TOML config file (exa-mcp.toml)
3. Default values (lowest priority)

Environment variables:
- EXA_API_KEY: Exa API key sent as the x-api-key header
- EXA_MCP_BASE_URL: Exa API base URL
- EXA_MCP_REQUEST_TIMEOUT: Per-request timeout in seconds
- EXA_MCP_ENABLED_TOOLS: Comma-separated list of tool ids to register
- EXA_MCP_DEBUG: Enable debug logging (true/false)
- EXA_MCP_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- EXA_MCP_STRUCTURED_LOGGING: Emit JSON log lines (true/false)
- EXA_MCP_RESEARCH_POLL_INTERVAL: Seconds between research status checks
- EXA_MCP_RESEARCH_MAX_WAIT: Seconds to wait for a research task
- EXA_MCP_RESEARCH_MAX_POLL_FAILURES: Failed status reads tolerated per wait
- EXA_MCP_CONFIG_FILE: Path to TOML config file
"""

import logging
import os
import tomllib
from dataclasses import dataclass, field
from importlib.metadata import version as get_package_version, PackageNotFoundError
from pathlib import Path
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.exa.ai"
DEFAULT_REQUEST_TIMEOUT = 25.0


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("exa-mcp")
    except PackageNotFoundError:
        return "1.0.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _parse_list(value: Any) -> List[str]:
    # Handle both list and comma-separated string
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item).strip() for item in value if str(item).strip()]


@dataclass
class ResearchConfig:
    """Configuration for the deep research task poller.

    Attributes:
        poll_interval: Seconds to wait before each status check
        max_wait: Seconds to keep polling before returning a still-processing notice
        max_poll_failures: Consecutive failed status reads to tolerate (0 = fail fast)
    """

    poll_interval: float = 3.0
    max_wait: float = 120.0
    max_poll_failures: int = 0

    @classmethod
    def from_toml_dict(cls, data: Dict[str, Any]) -> "ResearchConfig":
        """Create config from TOML dict (typically [research] section).

        Args:
            data: Dict from TOML parsing

        Returns:
            ResearchConfig instance
        """
        return cls(
            poll_interval=float(data.get("poll_interval", 3.0)),
            max_wait=float(data.get("max_wait", 120.0)),
            max_poll_failures=int(data.get("max_poll_failures", 0)),
        )


@dataclass
class ServerConfig:
    """Server configuration with support for env vars and TOML overrides."""

    # Provider configuration
    exa_api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    # Tool selection (empty means use the catalog defaults)
    enabled_tools: List[str] = field(default_factory=list)

    # Logging configuration
    debug: bool = False
    log_level: str = "INFO"
    structured_logging: bool = False

    # Server configuration
    server_name: str = "exa-search-server"
    server_version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    # Deep research polling
    research: ResearchConfig = field(default_factory=ResearchConfig)

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ServerConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. TOML config file
        3. Default values
        """
        config = cls()

        # Load TOML config if available
        toml_path = config_file or os.environ.get("EXA_MCP_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            # Try default locations
            for default_path in ["exa-mcp.toml", ".exa-mcp.toml"]:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        # Override with environment variables
        config._load_env()

        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)

            if "exa_api_key" in data:
                self.exa_api_key = str(data["exa_api_key"]) or None
            if "base_url" in data:
                self.base_url = str(data["base_url"])
            if "request_timeout" in data:
                self.request_timeout = float(data["request_timeout"])
            if "enabled_tools" in data:
                self.enabled_tools = _parse_list(data["enabled_tools"])
            if "debug" in data:
                self.debug = _parse_bool(data["debug"])
            if "log_level" in data:
                self.log_level = str(data["log_level"]).upper()
            if "structured_logging" in data:
                self.structured_logging = _parse_bool(data["structured_logging"])
            if "server_name" in data:
                self.server_name = str(data["server_name"])

            # Research polling settings
            if "research" in data:
                self.research = ResearchConfig.from_toml_dict(data["research"])

        except Exception as e:
            logger.error(f"Error loading config file {path}: {e}")

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if api_key := os.environ.get("EXA_API_KEY"):
            self.exa_api_key = api_key

        if base_url := os.environ.get("EXA_MCP_BASE_URL"):
            self.base_url = base_url

        if timeout := os.environ.get("EXA_MCP_REQUEST_TIMEOUT"):
            try:
                self.request_timeout = float(timeout)
            except ValueError:
                pass

        if tools := os.environ.get("EXA_MCP_ENABLED_TOOLS"):
            self.enabled_tools = _parse_list(tools)

        if debug := os.environ.get("EXA_MCP_DEBUG"):
            self.debug = _parse_bool(debug)

        if level := os.environ.get("EXA_MCP_LOG_LEVEL"):
            self.log_level = level.upper()

        if structured := os.environ.get("EXA_MCP_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)

        # Research polling settings
        if interval := os.environ.get("EXA_MCP_RESEARCH_POLL_INTERVAL"):
            try:
                self.research.poll_interval = float(interval)
            except ValueError:
                pass
        if max_wait := os.environ.get("EXA_MCP_RESEARCH_MAX_WAIT"):
            try:
                self.research.max_wait = float(max_wait)
            except ValueError:
                pass
        if failures := os.environ.get("EXA_MCP_RESEARCH_MAX_POLL_FAILURES"):
            try:
                self.research.max_poll_failures = int(failures)
            except ValueError:
                pass

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug switch."""
        return "DEBUG" if self.debug else self.log_level

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        from exa_mcp.core.logging_config import configure_logging

        level = getattr(logging, self.effective_log_level, logging.INFO)
        configure_logging(
            level=level,
            format="structured" if self.structured_logging else "human",
        )


# Global configuration instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def set_config(config: ServerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
