"""Exception hierarchy for atlassian-cli."""


class AtlassianCliError(Exception):
    """Base exception for all atlassian-cli errors."""

    def __init__(self, message: str, provider: str | None = None, details: dict | None = None):
        """Initialize AtlassianCliError.

        Args:
            message: Error message
            provider: Product name (e.g., 'jira', 'bitbucket')
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.provider:
            return f"[{self.provider}] {self.message}"
        return self.message


# =============================================================================
# Content resolution
# =============================================================================


class ContentSourceError(AtlassianCliError):
    """Long-form content could not be resolved from the command options."""


class ConflictingSourcesError(ContentSourceError):
    """Both inline content and a file path were supplied."""

    def __init__(self, content_option: str, file_option: str):
        super().__init__(
            f"You cannot specify both --{content_option} and --{file_option}. "
            "Please use only one."
        )
        self.options = (content_option, file_option)


class MissingSourceError(ContentSourceError):
    """Neither inline content nor a file path was supplied."""

    def __init__(self, content_option: str, file_option: str):
        super().__init__(f"You must specify either --{content_option} or --{file_option}.")
        self.options = (content_option, file_option)


class SourceNotFoundError(ContentSourceError):
    """The content file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"The specified file does not exist: {path}")
        self.path = path


# =============================================================================
# Wire payloads
# =============================================================================


class MalformedPayloadError(AtlassianCliError):
    """A JSON payload does not match the shape of its wire model."""

    def __init__(self, message: str, model: str | None = None, details: dict | None = None):
        """Initialize MalformedPayloadError.

        Args:
            message: Error message
            model: Name of the wire model that failed to parse
            details: Additional error details
        """
        super().__init__(message, details=details)
        self.model = model


# =============================================================================
# Configuration and HTTP
# =============================================================================


class ConfigurationError(AtlassianCliError):
    """Required connection settings are missing or inconsistent."""


class AuthenticationError(AtlassianCliError):
    """Authentication failed."""


class RateLimitError(AtlassianCliError):
    """Rate limit exceeded."""

    def __init__(
        self,
        message: str,
        retry_after: int | None = None,
        provider: str | None = None,
        details: dict | None = None,
    ):
        """Initialize RateLimitError.

        Args:
            message: Error message
            retry_after: Seconds until retry is allowed
            provider: Product name
            details: Additional error details
        """
        super().__init__(message, provider, details)
        self.retry_after = retry_after


class NotFoundError(AtlassianCliError):
    """Resource not found."""

    def __init__(
        self,
        message: str,
        resource_type: str | None = None,
        resource_id: str | None = None,
        provider: str | None = None,
        details: dict | None = None,
    ):
        """Initialize NotFoundError.

        Args:
            message: Error message
            resource_type: Type of resource (e.g., 'issue', 'page')
            resource_id: Resource identifier
            provider: Product name
            details: Additional error details
        """
        super().__init__(message, provider, details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ValidationError(AtlassianCliError):
    """A command argument was rejected before or after talking to the server."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        provider: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, provider, details)
        self.field = field


class AtlassianConnectionError(AtlassianCliError):
    """Connection to the server failed or timed out."""


class ProviderError(AtlassianCliError):
    """The server answered with an unexpected error status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        provider: str | None = None,
        details: dict | None = None,
    ):
        """Initialize ProviderError.

        Args:
            message: Error message
            status_code: HTTP status code
            provider: Product name
            details: Additional error details
        """
        super().__init__(message, provider, details)
        self.status_code = status_code
