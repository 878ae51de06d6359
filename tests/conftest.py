"""Shared pytest fixtures for atlassian-cli tests."""

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest

from atlassian_cli.atlassian.credentials import AtlassianCredentials


def _patch_credentials(base_url: str, product: str) -> Iterator[MagicMock]:
    with patch("atlassian_cli.atlassian.base.get_credentials") as mock:
        mock.return_value = AtlassianCredentials(
            product=product,
            base_url=base_url,
            username="test@example.com",
            api_token="test-token",
        )
        yield mock


@pytest.fixture
def mock_credentials() -> Iterator[MagicMock]:
    """Mock get_credentials to return Server-style test credentials."""
    yield from _patch_credentials("https://atlassian.example.com", "jira")


@pytest.fixture
def mock_cloud_credentials() -> Iterator[MagicMock]:
    """Mock get_credentials to return Bitbucket Cloud credentials."""
    yield from _patch_credentials("https://api.bitbucket.org", "bitbucket")


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Remove product variables from the environment and hide any .env file."""
    for product in ("JIRA", "CONFLUENCE", "BAMBOO", "BITBUCKET"):
        for suffix in ("_BASE_URL", "_USERNAME", "_API_TOKEN", "_PASSWORD"):
            monkeypatch.delenv(f"{product}{suffix}", raising=False)
    monkeypatch.chdir(tmp_path)
