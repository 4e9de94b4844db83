"""Confluence client facade.

ConfluenceClient is the single entry point the query engine and the CLI
talk to. It owns one Transport, picks one dialect at construction time and
adds the behavior common to both dialects (read-modify-write updates, label
de-duplication, legacy-only CQL search).
"""

import logging
from typing import List, Optional

import requests

from src.models import Ancestor, ContentSummary, Label, Page, SearchResult, Space

from .dialects import CloudDialect, Dialect, ServerDialect
from .errors import ClientConfigError, ConfluenceError, PageNotFoundError
from .models import ClientConfig, InstanceType
from .search import CQLSearch
from .transport import Transport

logger = logging.getLogger(__name__)


class ConfluenceClient:
    """Dialect-independent Confluence operations.

    Example:
        >>> client = ConfluenceClient(ClientConfig(
        ...     base_url="https://company.atlassian.net/wiki",
        ...     token="api-token",
        ...     email="me@company.com",
        ...     instance_type=InstanceType.CLOUD,
        ... ))
        >>> page = client.get_page("12345")
        >>> client.update_page("12345", body="<p>new</p>", message="edit")
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """Initialize the client.

        Args:
            config: Connection settings
            session: Optional requests session passed to the transport

        Raises:
            ClientConfigError: If the configuration is incomplete or invalid
        """
        try:
            instance_type = InstanceType(config.instance_type)
        except ValueError:
            raise ClientConfigError(f"unsupported instance type {config.instance_type!r}")

        self._transport = Transport(config, session=session)
        self._instance_type = instance_type
        self._dialect: Dialect = (
            CloudDialect(self._transport)
            if instance_type == InstanceType.CLOUD
            else ServerDialect(self._transport)
        )
        self._search = CQLSearch(self._transport)

    @property
    def is_cloud(self) -> bool:
        return self._instance_type == InstanceType.CLOUD

    @property
    def base_url(self) -> str:
        return self._transport.base_url

    @property
    def transport(self) -> Transport:
        return self._transport

    def resolve_space_key(self, space_key: str) -> str:
        """Space key -> space ID, memoized for the lifetime of this client."""
        return self._dialect.resolve_space_key(space_key)

    # --- Pages ---

    def get_page(self, page_id: str, include_body: bool = False) -> Page:
        return self._dialect.get_page(page_id, include_body)

    def list_pages(
        self,
        space_key: str,
        title: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Page]:
        return self._dialect.list_pages(space_key, title, limit)

    def get_children(self, page_id: str, limit: Optional[int] = None) -> List[Page]:
        return self._dialect.get_children(page_id, limit)

    def get_ancestors(self, page_id: str) -> List[Ancestor]:
        return self._dialect.get_ancestors(page_id)

    def create_page(
        self,
        space_key: str,
        title: str,
        body: str = "",
        parent_id: Optional[str] = None,
    ) -> Page:
        return self._dialect.create_page(space_key, title, body, parent_id)

    def update_page(
        self,
        page_id: str,
        title: Optional[str] = None,
        body: Optional[str] = None,
        message: Optional[str] = None,
    ) -> Page:
        """Update a page, handling the version increment.

        Reads the current version first and submits current + 1; the API
        rejects stale numbers. A blank title keeps the current title and a
        blank body leaves the content untouched.

        Args:
            page_id: Page to update
            title: New title (current title when blank)
            body: New storage-format body
            message: Version comment

        Returns:
            The updated page

        Raises:
            PageNotFoundError: If the current version cannot be read
            APIError: If the update itself is rejected (e.g. 409 stale version)
        """
        try:
            current = self._dialect.get_page(page_id, False)
        except ConfluenceError as e:
            raise PageNotFoundError(page_id, reason=f"reading current version: {e}") from e

        current_version = current.version.number if current.version else 0
        if not title:
            title = current.title

        logger.info(f"Updating page {page_id} to version {current_version + 1}")
        return self._dialect.put_page(
            page_id,
            title,
            body or "",
            message or "",
            current_version + 1,
        )

    def delete_page(self, page_id: str) -> None:
        self._dialect.delete_page(page_id)

    # --- Spaces ---

    def list_spaces(self, limit: Optional[int] = None) -> List[Space]:
        return self._dialect.list_spaces(limit)

    def get_space(self, space_key: str) -> Space:
        return self._dialect.get_space(space_key)

    # --- Labels ---

    def get_labels(self, page_id: str) -> List[Label]:
        return self._dialect.get_labels(page_id)

    def add_labels(self, page_id: str, names: List[str]) -> None:
        """Add labels to a page; repeated names are sent once."""
        unique: List[str] = []
        for name in names:
            name = name.strip()
            if name and name not in unique:
                unique.append(name)
        if not unique:
            return
        self._dialect.add_labels(page_id, unique)

    def remove_label(self, page_id: str, name: str) -> None:
        """Remove one label by name.

        Raises:
            LabelNotFoundError: On Cloud, when the page has no such label
        """
        self._dialect.remove_label(page_id, name)

    # --- Search (always legacy API) ---

    def search_cql(self, cql: str, limit: Optional[int] = None) -> SearchResult:
        return self._search.search_cql(cql, limit)

    def search_content_cql(
        self,
        cql: str,
        limit: Optional[int] = None,
        expand: Optional[str] = None,
    ) -> List[ContentSummary]:
        return self._search.search_content_cql(cql, limit, expand)
