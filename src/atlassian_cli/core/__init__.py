"""Content resolution, wire model base and exceptions for atlassian-cli."""

from atlassian_cli.core.content import resolve_content, resolve_optional_content
from atlassian_cli.core.exceptions import (
    AtlassianCliError,
    ConflictingSourcesError,
    ContentSourceError,
    MalformedPayloadError,
    MissingSourceError,
    SourceNotFoundError,
)
from atlassian_cli.core.models import WireModel

__all__ = [
    "resolve_content",
    "resolve_optional_content",
    "WireModel",
    "AtlassianCliError",
    "ContentSourceError",
    "ConflictingSourcesError",
    "MissingSourceError",
    "SourceNotFoundError",
    "MalformedPayloadError",
]
