"""
Shared test fixtures and configuration for gethosts tests.

This module provides common fixtures used across all test types:
- Isolation from the real ~/.gethosts directory and GETHOSTS_* environment
- Temporary cache directories
- Sample payloads and configurations
- Fake fetchers and clocks
"""

import json
from unittest.mock import Mock, patch

import pytest

from gethosts.config_manager import CONFIG_KEYS, ENV_PREFIX, ConfigManager, HostsConfig
from gethosts.fetcher import HostFetcher

# ============================================================================
# ISOLATION
# ============================================================================


@pytest.fixture(autouse=True)
def isolate_user_config(tmp_path, monkeypatch):
    """Keep tests away from ~/.gethosts/config.toml and GETHOSTS_* variables.

    CRITICAL PROTECTION: Tests should NEVER read or modify the real
    configuration of the user running them.
    """
    for key in CONFIG_KEYS:
        monkeypatch.delenv(ENV_PREFIX + key.upper(), raising=False)

    fake_config = tmp_path / "home-config" / "config.toml"
    with patch.object(ConfigManager, "DEFAULT_CONFIG_FILE", fake_config):
        yield


# ============================================================================
# DIRECTORY FIXTURES
# ============================================================================


@pytest.fixture
def temp_cache_dir(tmp_path):
    """Temporary cache directory (not created yet)."""
    return tmp_path / ".gethosts"


# ============================================================================
# SAMPLE DATA FIXTURES
# ============================================================================


@pytest.fixture
def sample_names():
    """Host names in inventory order."""
    return ["alpha", "beta", "alphabet"]


@pytest.fixture
def sample_payload(sample_names):
    """Inventory payload serving sample_names."""
    return json.dumps({"Results": [{"Name": name} for name in sample_names]}).encode()


@pytest.fixture
def hosts_config(temp_cache_dir):
    """Config pointing at a temporary cache directory."""
    return HostsConfig(
        url="https://inventory.example.com/hosts",
        user="bob",
        password="s3cret",
        cache_dir=temp_cache_dir,
        cache_file="hostslist.txt",
        cache_duration=3600.0,
    )


# ============================================================================
# COLLABORATOR MOCKS
# ============================================================================


@pytest.fixture
def mock_fetcher(sample_payload):
    """Fetcher returning sample_payload without network access."""
    fetcher = Mock(spec=HostFetcher)
    fetcher.fetch.return_value = sample_payload
    return fetcher


class FakeClock:
    """Settable clock returning Unix timestamps."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fake_clock():
    """Clock frozen at 1_700_000_000.0 until changed."""
    return FakeClock()
