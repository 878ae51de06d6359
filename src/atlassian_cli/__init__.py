"""
atlassian-cli: one command line for Jira, Confluence, Bamboo and Bitbucket.

Each product has a thin REST client (``atlassian_cli.atlassian``) that
speaks typed wire models (``atlassian_cli.models``). Commands that take
long text accept it inline or from a file via ``resolve_content``.

Example Usage:
    from atlassian_cli import resolve_content
    from atlassian_cli.atlassian import JiraClient

    body = resolve_content(None, "notes.txt", "body")
    with JiraClient() as jira:
        jira.add_comment("PROJ-1", body)
"""

from atlassian_cli.core.content import resolve_content, resolve_optional_content
from atlassian_cli.core.exceptions import (
    AtlassianCliError,
    AuthenticationError,
    ConfigurationError,
    ConflictingSourcesError,
    MalformedPayloadError,
    MissingSourceError,
    NotFoundError,
    ProviderError,
    SourceNotFoundError,
    ValidationError,
)
from atlassian_cli.core.models import WireModel

__version__ = "0.1.0"

__all__ = [
    # Content
    "resolve_content",
    "resolve_optional_content",
    # Models
    "WireModel",
    # Exceptions
    "AtlassianCliError",
    "ConflictingSourcesError",
    "MissingSourceError",
    "SourceNotFoundError",
    "MalformedPayloadError",
    "ConfigurationError",
    "AuthenticationError",
    "NotFoundError",
    "ProviderError",
    "ValidationError",
]
