"""
Tests for backend configuration and its reset.
"""

import pytest

import restchain
from restchain import RestChainConfig, canned_response, mockapp, reactive
from restchain.config import InProcessConfig


class TestConfig:
    """Test configuration defaults and reset."""

    def test_defaults(self):
        """Test the defaults of the direct HTTP backend."""
        config = RestChainConfig()

        assert config.base_uri == "http://localhost"
        assert config.port == 8080
        assert config.base_path == ""
        assert config.filters == []
        assert config.timeout is None

    def test_reset_restores_defaults(self):
        """Test that reset undoes every change."""
        restchain.config.port = 9000
        restchain.config.base_path = "/api"
        restchain.filters(canned_response(200))

        restchain.reset()

        assert restchain.config.port == 8080
        assert restchain.config.base_path == ""
        assert restchain.config.filters == []

    def test_environment_overrides(self, monkeypatch):
        """Test that defaults can come from the environment."""
        monkeypatch.setenv("RESTCHAIN_BASE_URI", "http://api.internal")
        monkeypatch.setenv("RESTCHAIN_PORT", "9443")
        monkeypatch.setenv("RESTCHAIN_BASE_PATH", "/v2")

        config = RestChainConfig()

        assert (config.base_uri, config.port, config.base_path) == ("http://api.internal", 9443, "/v2")

    def test_invalid_port_in_environment(self, monkeypatch):
        """Test that a non numeric port in the environment is rejected."""
        monkeypatch.setenv("RESTCHAIN_PORT", "eighty")

        with pytest.raises(ValueError, match="RESTCHAIN_PORT"):
            RestChainConfig()

    def test_in_process_defaults(self):
        """Test the defaults of the in-process backends."""
        config = InProcessConfig()

        assert config.base_uri == "http://testserver"
        assert config.port is None
        assert config.app is None

    def test_in_process_defaults_ignore_environment(self, monkeypatch):
        """Test that pointing the HTTP backend elsewhere leaves in-process backends alone."""
        monkeypatch.setenv("RESTCHAIN_BASE_URI", "http://remote.example")
        monkeypatch.setenv("RESTCHAIN_BASE_PATH", "/v2")

        config = InProcessConfig()

        assert (config.base_uri, config.port, config.base_path) == ("http://testserver", None, "")

    def test_backends_are_independent(self):
        """Test that each backend has its own configuration."""
        mockapp.filters(canned_response(200))

        assert restchain.config.filters == []
        assert reactive.config.filters == []
        assert len(mockapp.config.filters) == 1

    def test_snapshot_is_independent(self):
        """Test that a snapshot does not share mutable settings."""
        config = RestChainConfig()
        snapshot = config.snapshot()
        snapshot.default_headers["X"] = "1"
        snapshot.filters.append(canned_response())

        assert config.default_headers == {}
        assert config.filters == []
