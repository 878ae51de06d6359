"""Connection settings for Jira, Confluence, Bamboo and Bitbucket.

Each product reads its own variables, prefixed with the product name::

    JIRA_BASE_URL        JIRA_USERNAME        JIRA_API_TOKEN        JIRA_PASSWORD
    CONFLUENCE_BASE_URL  CONFLUENCE_USERNAME  CONFLUENCE_API_TOKEN  CONFLUENCE_PASSWORD
    BAMBOO_BASE_URL      BAMBOO_USERNAME      BAMBOO_API_TOKEN      BAMBOO_PASSWORD
    BITBUCKET_BASE_URL   BITBUCKET_USERNAME   BITBUCKET_API_TOKEN   BITBUCKET_PASSWORD

Values are resolved in the following order:
1. Explicit parameters passed to the client
2. Environment variables
3. .env file in current directory or parent directories

Example:
    from atlassian_cli.atlassian.credentials import build_auth, get_credentials

    creds = get_credentials("bamboo")
    session.auth = build_auth(creds, allow_bearer=True)
"""

import logging
import os
from pathlib import Path
from typing import NamedTuple

import requests
from requests.auth import AuthBase, HTTPBasicAuth

from atlassian_cli.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PRODUCTS = ("jira", "confluence", "bamboo", "bitbucket")

# Variable suffixes, prefixed with the upper-cased product name
BASE_URL_SUFFIX = "_BASE_URL"
USERNAME_SUFFIX = "_USERNAME"
API_TOKEN_SUFFIX = "_API_TOKEN"  # noqa: S105
PASSWORD_SUFFIX = "_PASSWORD"  # noqa: S105


class AtlassianCredentials(NamedTuple):
    """Connection settings for one product."""

    product: str
    base_url: str
    username: str | None = None
    api_token: str | None = None
    password: str | None = None


class BearerAuth(AuthBase):
    """Personal access token sent as ``Authorization: Bearer <token>``."""

    def __init__(self, token: str) -> None:
        self.token = token

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        request.headers["Authorization"] = f"Bearer {self.token}"
        return request


def env_name(product: str, suffix: str) -> str:
    """Return the variable name for ``product``, e.g. ``BAMBOO_API_TOKEN``."""
    return f"{product.upper()}{suffix}"


def get_credentials(
    product: str,
    base_url: str | None = None,
    username: str | None = None,
    api_token: str | None = None,
    password: str | None = None,
) -> AtlassianCredentials:
    """Get connection settings for a product.

    Args:
        product: One of 'jira', 'confluence', 'bamboo', 'bitbucket'
        base_url: Explicit base URL (overrides other sources)
        username: Explicit username (overrides other sources)
        api_token: Explicit API token or personal access token
        password: Explicit password

    Returns:
        AtlassianCredentials with the trailing slash removed from base_url

    Raises:
        ConfigurationError: If the base URL cannot be found
    """
    if product not in PRODUCTS:
        raise ConfigurationError(f"Unknown product: {product}")

    resolved = {
        BASE_URL_SUFFIX: base_url,
        USERNAME_SUFFIX: username,
        API_TOKEN_SUFFIX: api_token,
        PASSWORD_SUFFIX: password,
    }

    # Fall back to environment variables
    for suffix, value in resolved.items():
        if not value:
            resolved[suffix] = os.environ.get(env_name(product, suffix))

    # Fall back to .env file
    if not all(resolved.values()):
        env_vars = _load_dotenv()
        for suffix, value in resolved.items():
            if not value:
                resolved[suffix] = env_vars.get(env_name(product, suffix))

    resolved_url = resolved[BASE_URL_SUFFIX]
    if not resolved_url:
        variable = env_name(product, BASE_URL_SUFFIX)
        raise ConfigurationError(
            f"{variable} is not set. "
            f"Please set it to your {product.capitalize()} instance URL "
            "(e.g., https://example.com).",
            provider=product,
        )

    return AtlassianCredentials(
        product=product,
        base_url=resolved_url.rstrip("/"),
        username=resolved[USERNAME_SUFFIX] or None,
        api_token=resolved[API_TOKEN_SUFFIX] or None,
        password=resolved[PASSWORD_SUFFIX] or None,
    )


def build_auth(credentials: AtlassianCredentials, allow_bearer: bool = False) -> AuthBase:
    """Choose the authentication scheme for a product.

    - username + API token: HTTP Basic with the token as password
    - username + password: HTTP Basic
    - API token alone: Bearer personal access token (only if ``allow_bearer``)

    Raises:
        ConfigurationError: If no accepted combination is configured
    """
    username, token, password = credentials.username, credentials.api_token, credentials.password

    if token and not username and allow_bearer:
        return BearerAuth(token)
    if token and username:
        return HTTPBasicAuth(username, token)
    if username and password:
        return HTTPBasicAuth(username, password)

    product = credentials.product
    options = []
    if allow_bearer:
        options.append(
            f"{env_name(product, API_TOKEN_SUFFIX)} (for Personal Access Token / Bearer auth)"
        )
    options.append(
        f"{env_name(product, USERNAME_SUFFIX)} and {env_name(product, API_TOKEN_SUFFIX)} "
        "(for Atlassian Cloud)"
    )
    options.append(f"{env_name(product, USERNAME_SUFFIX)} and {env_name(product, PASSWORD_SUFFIX)}")
    raise ConfigurationError(
        "Authentication not configured. Please set either:\n"
        + ", or\n".join(f"  - {option}" for option in options),
        provider=product,
    )


def _load_dotenv() -> dict[str, str]:
    """Load variables from the first .env file found walking up from the cwd."""
    env_vars: dict[str, str] = {}

    current = Path.cwd()
    for directory in [current, *current.parents]:
        env_file = directory / ".env"
        if not env_file.is_file():
            continue
        logger.debug("Loading .env from %s", env_file)
        try:
            with open(env_file, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line or line.startswith("#") or "=" not in line:
                        continue
                    key, _, value = line.partition("=")
                    key = key.strip().removeprefix("export ").strip()
                    value = value.strip()
                    if value and value[0] in ('"', "'") and value[-1] == value[0]:
                        value = value[1:-1]
                    env_vars[key] = value
        except OSError as e:
            logger.debug("Error reading .env file: %s", e)
        break

    return env_vars
