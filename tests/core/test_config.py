"""Tests for layered server configuration (defaults -> TOML -> env)."""

import logging
import os
from unittest.mock import patch

import pytest

from exa_mcp.config import ResearchConfig, ServerConfig, get_config, set_config


@pytest.fixture
def clean_env(tmp_path):
    """Run from an empty directory with no EXA_* variables set."""
    original_cwd = os.getcwd()
    os.chdir(tmp_path)
    try:
        with patch.dict(os.environ, {}, clear=True):
            yield tmp_path
    finally:
        os.chdir(original_cwd)


class TestDefaults:
    def test_defaults_without_sources(self, clean_env):
        config = ServerConfig.from_env()

        assert config.exa_api_key is None
        assert config.base_url == "https://api.exa.ai"
        assert config.request_timeout == 25.0
        assert config.enabled_tools == []
        assert config.debug is False
        assert config.log_level == "INFO"
        assert config.server_name == "exa-search-server"

    def test_research_defaults(self, clean_env):
        research = ServerConfig.from_env().research

        assert research.poll_interval == 3.0
        assert research.max_wait == 120.0
        assert research.max_poll_failures == 0


class TestTomlLoading:
    def test_default_file_in_cwd_is_loaded(self, clean_env):
        (clean_env / "exa-mcp.toml").write_text(
            """
exa_api_key = "toml-key"
request_timeout = 40
enabled_tools = ["web_search_exa", "deep_research_exa"]
log_level = "warning"

[research]
poll_interval = 1.5
max_wait = 30
max_poll_failures = 2
"""
        )

        config = ServerConfig.from_env()

        assert config.exa_api_key == "toml-key"
        assert config.request_timeout == 40.0
        assert config.enabled_tools == ["web_search_exa", "deep_research_exa"]
        assert config.log_level == "WARNING"
        assert config.research == ResearchConfig(
            poll_interval=1.5, max_wait=30.0, max_poll_failures=2
        )

    def test_hidden_file_used_as_fallback(self, clean_env):
        (clean_env / ".exa-mcp.toml").write_text('server_name = "hidden"\n')

        assert ServerConfig.from_env().server_name == "hidden"

    def test_explicit_config_file_env_var(self, clean_env):
        custom = clean_env / "custom.toml"
        custom.write_text('base_url = "http://localhost:9999"\n')

        with patch.dict(os.environ, {"EXA_MCP_CONFIG_FILE": str(custom)}):
            config = ServerConfig.from_env()

        assert config.base_url == "http://localhost:9999"

    def test_broken_toml_is_skipped(self, clean_env, caplog):
        (clean_env / "exa-mcp.toml").write_text("this is = = not toml")

        with caplog.at_level(logging.ERROR, logger="exa_mcp.config"):
            config = ServerConfig.from_env()

        assert config.base_url == "https://api.exa.ai"
        assert "Error loading config file" in caplog.text

    def test_missing_explicit_file_is_warned(self, clean_env, caplog):
        with caplog.at_level(logging.WARNING, logger="exa_mcp.config"):
            ServerConfig.from_env(config_file=str(clean_env / "nope.toml"))

        assert "Config file not found" in caplog.text


class TestEnvironmentOverrides:
    def test_env_overrides_toml(self, clean_env):
        (clean_env / "exa-mcp.toml").write_text(
            'exa_api_key = "toml-key"\nenabled_tools = ["web_search_exa"]\n'
        )
        env = {
            "EXA_API_KEY": "env-key",
            "EXA_MCP_ENABLED_TOOLS": "get_contents_exa, answer_with_citations_exa",
            "EXA_MCP_RESEARCH_MAX_WAIT": "60",
        }

        with patch.dict(os.environ, env):
            config = ServerConfig.from_env()

        assert config.exa_api_key == "env-key"
        assert config.enabled_tools == ["get_contents_exa", "answer_with_citations_exa"]
        assert config.research.max_wait == 60.0

    def test_malformed_numbers_are_ignored(self, clean_env):
        env = {
            "EXA_MCP_REQUEST_TIMEOUT": "soon",
            "EXA_MCP_RESEARCH_POLL_INTERVAL": "fast",
            "EXA_MCP_RESEARCH_MAX_POLL_FAILURES": "a few",
        }

        with patch.dict(os.environ, env):
            config = ServerConfig.from_env()

        assert config.request_timeout == 25.0
        assert config.research.poll_interval == 3.0
        assert config.research.max_poll_failures == 0

    @pytest.mark.parametrize("raw,expected", [("true", True), ("1", True), ("off", False)])
    def test_debug_flag_parsing(self, clean_env, raw, expected):
        with patch.dict(os.environ, {"EXA_MCP_DEBUG": raw}):
            assert ServerConfig.from_env().debug is expected

    def test_debug_forces_debug_level(self, clean_env):
        with patch.dict(os.environ, {"EXA_MCP_DEBUG": "true", "EXA_MCP_LOG_LEVEL": "error"}):
            config = ServerConfig.from_env()

        assert config.log_level == "ERROR"
        assert config.effective_log_level == "DEBUG"


class TestGlobalConfig:
    def test_set_config_replaces_global(self):
        custom = ServerConfig(server_name="custom")
        set_config(custom)
        try:
            assert get_config() is custom
        finally:
            set_config(ServerConfig())
