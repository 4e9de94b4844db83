"""Abstract dialect interface shared by the v2 and v1 implementations."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from src.models import Ancestor, Label, Page, Space

from ..transport import Transport

logger = logging.getLogger(__name__)


class Dialect(ABC):
    """Canonical Confluence operations implemented against one API dialect.

    Subclasses translate each operation into the HTTP calls of their API
    version and return canonical entities (Page, Space, Label, Ancestor).

    Space key to space ID resolution is memoized here for the lifetime of
    the dialect (and therefore of the owning client): a miss performs one
    lookup call, a hit performs none. Entries are never invalidated since
    space keys are not renamed during a session.
    """

    def __init__(self, transport: Transport):
        self._transport = transport
        self._space_key_cache: Dict[str, str] = {}

    def resolve_space_key(self, space_key: str) -> str:
        """Translate a space key to its ID, caching the result.

        Raises:
            SpaceNotFoundError: If no space has this key
        """
        cached = self._space_key_cache.get(space_key)
        if cached is not None:
            return cached

        space_id = self._lookup_space_id(space_key)
        logger.debug(f"Resolved space key {space_key} -> {space_id}")
        self._space_key_cache[space_key] = space_id
        return space_id

    @abstractmethod
    def _lookup_space_id(self, space_key: str) -> str:
        """Fetch the ID for a space key from the API (one call)."""

    @abstractmethod
    def get_page(self, page_id: str, include_body: bool = False) -> Page:
        pass

    @abstractmethod
    def list_pages(
        self,
        space_key: str,
        title: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Page]:
        pass

    @abstractmethod
    def get_children(self, page_id: str, limit: Optional[int] = None) -> List[Page]:
        pass

    @abstractmethod
    def get_ancestors(self, page_id: str) -> List[Ancestor]:
        pass

    @abstractmethod
    def create_page(
        self,
        space_key: str,
        title: str,
        body: str,
        parent_id: Optional[str] = None,
    ) -> Page:
        pass

    @abstractmethod
    def put_page(
        self,
        page_id: str,
        title: str,
        body: str,
        message: str,
        version_number: int,
    ) -> Page:
        """Submit a page update with an explicit version number."""

    @abstractmethod
    def delete_page(self, page_id: str) -> None:
        pass

    @abstractmethod
    def list_spaces(self, limit: Optional[int] = None) -> List[Space]:
        pass

    @abstractmethod
    def get_space(self, space_key: str) -> Space:
        pass

    @abstractmethod
    def get_labels(self, page_id: str) -> List[Label]:
        pass

    @abstractmethod
    def add_labels(self, page_id: str, names: List[str]) -> None:
        pass

    @abstractmethod
    def remove_label(self, page_id: str, name: str) -> None:
        pass


def limit_params(limit: Optional[int]) -> Dict[str, str]:
    """Query parameters for an optional positive result limit."""
    if limit is not None and limit > 0:
        return {'limit': str(limit)}
    return {}


def storage_body(body: str) -> Dict[str, str]:
    """Storage-format body payload shared by create and update requests."""
    return {'representation': 'storage', 'value': body}
