"""Base client for Atlassian APIs with shared auth and request logic.

This module provides a base HTTP client for all products (Jira,
Confluence, Bamboo, Bitbucket) with:
- Credential resolution per product
- Basic or Bearer authentication
- Mapping of HTTP error statuses to atlassian-cli exceptions
- Request/response logging

Example:
    from atlassian_cli.atlassian.base import AtlassianClient

    class JiraClient(AtlassianClient):
        product = "jira"

        def get_issue(self, key: str) -> dict:
            return self._get(f"/rest/api/2/issue/{key}")
"""

import logging
from typing import Any

import requests

from atlassian_cli.atlassian.credentials import (
    AtlassianCredentials,
    build_auth,
    get_credentials,
)
from atlassian_cli.core.exceptions import (
    AtlassianConnectionError,
    AuthenticationError,
    MalformedPayloadError,
    NotFoundError,
    ProviderError,
    RateLimitError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30  # seconds

# Longest error body quoted back in a ProviderError message
MAX_ERROR_DETAIL = 500


class AtlassianClient:
    """Base HTTP client for Atlassian product APIs.

    Subclasses set ``product`` (used for configuration lookup and error
    prefixes) and ``allow_bearer`` (whether a token without a username is
    sent as a Bearer personal access token).

    Attributes:
        base_url: Product base URL without trailing slash
        timeout: Request timeout in seconds
    """

    product = "atlassian"
    allow_bearer = False

    def __init__(
        self,
        base_url: str | None = None,
        username: str | None = None,
        api_token: str | None = None,
        password: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Instance URL (e.g., https://jira.example.com)
            username: User name or e-mail for Basic authentication
            api_token: API token, or personal access token when used alone
            password: Password for Basic authentication
            timeout: Request timeout in seconds

        Raises:
            ConfigurationError: If the base URL or credentials are missing
        """
        creds = get_credentials(
            self.product,
            base_url=base_url,
            username=username,
            api_token=api_token,
            password=password,
        )
        self._credentials: AtlassianCredentials = creds
        self.base_url = creds.base_url
        self.timeout = timeout

        self._session = requests.Session()
        self._session.auth = build_auth(creds, allow_bearer=self.allow_bearer)
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

        logger.debug(
            "Initialized %s client for %s (user: %s)",
            self.product,
            self.base_url,
            creds.username or "token",
        )

    def __enter__(self) -> "AtlassianClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - close session."""
        self.close()

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()
        logger.debug("Closed %s client session", self.product)

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, etc.)
            path: API path (appended to base_url)
            params: Query parameters
            json: JSON body (will be serialized)
            headers: Additional headers

        Returns:
            Response object

        Raises:
            AuthenticationError: If authentication fails (401/403)
            NotFoundError: If resource not found (404)
            RateLimitError: If rate limit exceeded (429)
            AtlassianConnectionError: If the connection fails or times out
            ProviderError: For other HTTP errors
        """
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise AtlassianConnectionError(
                f"Request timed out after {self.timeout} seconds",
                provider=self.product,
                details={"url": url, "timeout": self.timeout},
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise AtlassianConnectionError(
                f"Could not connect to {self.base_url}",
                provider=self.product,
                details={"url": url},
            ) from e

        logger.debug(
            "%s %s -> %d (%d bytes, %.0fms)",
            method,
            path,
            response.status_code,
            len(response.content),
            response.elapsed.total_seconds() * 1000,
        )

        self._raise_for_status(method, path, response)
        return response

    def _raise_for_status(self, method: str, path: str, response: requests.Response) -> None:
        """Translate an HTTP error status into an atlassian-cli exception."""
        status = response.status_code
        if status < 400:
            return

        details: dict[str, Any] = {"status_code": status, "url": response.url}
        if status in (401, 403):
            reason = (
                "Authentication failed. Check your credentials."
                if status == 401
                else f"Access forbidden for {self._credentials.username or 'token'}."
                " Check your permissions."
            )
            raise AuthenticationError(reason, provider=self.product, details=details)
        if status == 404:
            raise NotFoundError(
                f"Resource not found: {path}", provider=self.product, details=details
            )
        if status == 429:
            raise RateLimitError(
                "Rate limit exceeded. Try again later.",
                retry_after=self._get_retry_after(response),
                provider=self.product,
                details=details,
            )

        message = f"{method} {path} failed: HTTP {status} ({response.reason})"
        detail = self._error_detail(response)
        if detail:
            message += f"\nDetails: {detail}"
        details["response"] = self._safe_json(response)
        raise ProviderError(message, status_code=status, provider=self.product, details=details)

    def _get(self, path: str, params: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        """GET a JSON resource."""
        return self._json(self._request("GET", path, params=params, **kwargs))

    def _get_text(self, path: str, params: dict[str, Any] | None = None) -> str:
        """GET a plain-text resource such as a build log."""
        response = self._request(
            "GET", path, params=params, headers={"Accept": "text/plain, */*"}
        )
        return response.text

    def _post(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        """POST a JSON body. Returns {} when the server sends no content."""
        return self._json_or_empty(self._request("POST", path, json=json, **kwargs))

    def _put(self, path: str, json: Any = None, **kwargs: Any) -> Any:
        """PUT a JSON body. Returns {} when the server sends no content."""
        return self._json_or_empty(self._request("PUT", path, json=json, **kwargs))

    def _json_or_empty(self, response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return {}
        return self._json(response)

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedPayloadError(
                f"Expected JSON from {response.request.method} {response.url}",
                details={"status_code": response.status_code},
            ) from e

    def _error_detail(self, response: requests.Response) -> str:
        """Describe an error response body for the exception message."""
        return response.text[:MAX_ERROR_DETAIL]

    def _get_retry_after(self, response: requests.Response) -> int | None:
        """Read the Retry-After header, if the server sent a usable one."""
        retry_after = response.headers.get("Retry-After")
        if retry_after and retry_after.isdigit():
            return int(retry_after)
        return None

    def _safe_json(self, response: requests.Response) -> Any:
        """Safely parse JSON response, returning raw text on failure.

        Args:
            response: HTTP response

        Returns:
            Parsed JSON or response text
        """
        try:
            return response.json()
        except (ValueError, TypeError):
            return response.text
