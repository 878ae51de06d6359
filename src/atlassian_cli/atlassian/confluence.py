"""Confluence client for the content REST API.

Example:
    from atlassian_cli.atlassian import ConfluenceClient

    with ConfluenceClient() as confluence:
        page = confluence.get_page_by_title("DEV", "Release notes")
        confluence.update_page(page.id, "<p>More</p>", append=True)
"""

import logging

import requests

from atlassian_cli.atlassian.base import MAX_ERROR_DETAIL, AtlassianClient
from atlassian_cli.core.exceptions import MalformedPayloadError, NotFoundError
from atlassian_cli.models.confluence import (
    ConfluenceError,
    ConfluencePage,
    CreatePageRequest,
    SearchResults,
    UpdatePageRequest,
)

logger = logging.getLogger(__name__)

CONTENT_API = "/rest/api/content"
DEFAULT_EXPAND = "body.storage,body.view,version,space"
UPDATE_EXPAND = "body.storage,version"


class ConfluenceClient(AtlassianClient):
    """Page operations against Confluence Server, Data Center or Cloud."""

    product = "confluence"

    def create_page(self, space_key: str, title: str, body: str) -> ConfluencePage:
        """Create a page in storage format.

        Args:
            space_key: Key of the target space
            title: Page title
            body: Page body in Confluence storage format (XHTML)

        Returns:
            The created page
        """
        request = CreatePageRequest.build(space_key, title, body)
        data = self._post(CONTENT_API, json=request.to_wire())
        page = ConfluencePage.from_wire(data)
        logger.info("Created page %s: %s", page.id, title)
        return page

    def get_page(self, page_id: str, expand: str = DEFAULT_EXPAND) -> ConfluencePage:
        """Get a page by id.

        Raises:
            NotFoundError: If the page does not exist
        """
        data = self._get(f"{CONTENT_API}/{page_id}", params={"expand": expand})
        return ConfluencePage.from_wire(data)

    def get_page_by_title(
        self,
        space_key: str,
        title: str,
        expand: str = DEFAULT_EXPAND,
    ) -> ConfluencePage | None:
        """Get a page by space and exact title.

        Returns:
            The first matching page, or None if there is none
        """
        data = self._get(
            CONTENT_API,
            params={"spaceKey": space_key, "title": title, "expand": expand},
        )
        results = SearchResults.from_wire(data).results
        if not results:
            logger.debug("No page titled '%s' in space %s", title, space_key)
            return None
        return results[0]

    def update_page(self, page_id: str, body: str, append: bool = False) -> ConfluencePage:
        """Replace or extend the body of a page.

        The current page is read first so the update carries the next
        version number and keeps the title.

        Args:
            page_id: Page id
            body: Storage-format content
            append: Add ``body`` after the existing content instead of replacing it

        Returns:
            The updated page
        """
        current = self.get_page(page_id, expand=UPDATE_EXPAND)
        request = UpdatePageRequest.for_page(current, body, append=append)

        data = self._put(f"{CONTENT_API}/{page_id}", json=request.to_wire())
        page = ConfluencePage.from_wire(data)

        logger.info("Updated page %s to version %d", page_id, request.version.number)
        return page

    def update_page_by_title(
        self,
        space_key: str,
        title: str,
        body: str,
        append: bool = False,
    ) -> ConfluencePage:
        """Update the page titled ``title`` in ``space_key``.

        Raises:
            NotFoundError: If no such page exists
        """
        page = self.get_page_by_title(space_key, title, expand=UPDATE_EXPAND)
        if page is None:
            raise NotFoundError(
                f"Page with title '{title}' not found in space '{space_key}'",
                resource_type="page",
                resource_id=title,
                provider=self.product,
            )
        return self.update_page(page.id, body, append=append)

    def _error_detail(self, response: requests.Response) -> str:
        try:
            error = ConfluenceError.from_wire(response.json())
        except (ValueError, MalformedPayloadError):
            return super()._error_detail(response)
        if not error.message:
            return super()._error_detail(response)
        return error.message[:MAX_ERROR_DETAIL]
