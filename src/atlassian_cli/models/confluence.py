"""Confluence REST API payloads (``/rest/api/content``)."""

from pydantic import Field

from atlassian_cli.core.exceptions import MalformedPayloadError
from atlassian_cli.core.models import WireModel


class SpaceReference(WireModel):
    key: str = ""


class StorageContent(WireModel):
    """Page body in XHTML storage format, used for editing."""

    value: str = ""
    representation: str = "storage"


class ViewContent(WireModel):
    """Rendered HTML page body."""

    value: str = ""
    representation: str = "view"


class PageBody(WireModel):
    """Page body; ``storage`` and ``view`` are present only when expanded."""

    storage: StorageContent | None = None
    view: ViewContent | None = None


class PageVersion(WireModel):
    number: int = 0
    message: str | None = None


class PageLinks(WireModel):
    webui: str | None = None
    self_url: str | None = Field(default=None, alias="self")


class ConfluencePage(WireModel):
    id: str = ""
    type: str = "page"
    status: str = "current"
    title: str = ""
    space: SpaceReference | None = None
    body: PageBody | None = None
    version: PageVersion | None = None
    links: PageLinks | None = Field(default=None, alias="_links")

    @property
    def storage_value(self) -> str:
        """Storage-format body, or an empty string if it was not expanded."""
        if self.body and self.body.storage:
            return self.body.storage.value
        return ""


class CreatePageRequest(WireModel):
    """Body of ``POST /rest/api/content``."""

    type: str = "page"
    title: str = ""
    space: SpaceReference = Field(default_factory=SpaceReference)
    body: PageBody = Field(default_factory=PageBody)

    @classmethod
    def build(cls, space_key: str, title: str, storage: str) -> "CreatePageRequest":
        return cls(
            title=title,
            space=SpaceReference(key=space_key),
            body=PageBody(storage=StorageContent(value=storage)),
        )


class UpdatePageRequest(WireModel):
    """Body of ``PUT /rest/api/content/{id}``.

    Confluence rejects updates whose version number is not exactly one above
    the stored version, so requests should be built with :meth:`for_page`
    from the page as last read.
    """

    id: str = ""
    type: str = "page"
    title: str = ""
    body: PageBody = Field(default_factory=PageBody)
    version: PageVersion = Field(default_factory=PageVersion)

    @classmethod
    def for_page(
        cls,
        current: ConfluencePage,
        content: str,
        append: bool = False,
        title: str | None = None,
    ) -> "UpdatePageRequest":
        """Build the next revision of ``current``.

        Args:
            current: Page as returned by the server, with its version expanded
            content: New storage-format body
            append: Add ``content`` after the existing storage body
            title: New title (keeps the current title when omitted)

        Returns:
            Update request carrying version ``current + 1``

        Raises:
            MalformedPayloadError: If ``current`` has no version information
        """
        if current.version is None:
            raise MalformedPayloadError(
                f"Page {current.id} has no version; fetch it with expand=version",
                model=ConfluencePage.__name__,
            )

        value = current.storage_value + content if append else content
        return cls(
            id=current.id,
            type=current.type,
            title=title or current.title,
            body=PageBody(storage=StorageContent(value=value)),
            version=PageVersion(number=current.version.number + 1),
        )


class SearchResults(WireModel):
    results: list[ConfluencePage] = Field(default_factory=list)
    start: int = 0
    limit: int = 0
    size: int = 0


class ConfluenceError(WireModel):
    """Error body returned by Confluence alongside a 4xx/5xx status."""

    status_code: int = Field(default=0, alias="statusCode")
    message: str = ""
    reason: str | None = None
