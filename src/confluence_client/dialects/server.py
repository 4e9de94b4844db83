"""Legacy (v1) dialect for Confluence Server / Data Center.

The v1 API addresses spaces by key, paginates with offsets and returns
nested content objects whose details depend on the `expand` parameter.
Responses are translated into canonical entities by the normalizer.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from src.models import Ancestor, Label, Page, Space

from ..errors import APIError, SpaceNotFoundError
from ..transport import decode_object, decode_results
from .base import Dialect, limit_params
from .normalizer import (
    v1_ancestors,
    v1_content_to_page,
    v1_labels,
    v1_space_to_space,
)

logger = logging.getLogger(__name__)

PAGE_EXPAND = "version,space,ancestors,metadata.labels"


def _storage(body: str) -> Dict[str, Any]:
    return {'storage': {'value': body, 'representation': 'storage'}}


class ServerDialect(Dialect):
    """Canonical operations over the /rest/api path family."""

    def _lookup_space_id(self, space_key: str) -> str:
        try:
            data = self._transport.get_v1(f"space/{quote(space_key, safe='')}")
        except APIError as e:
            if e.status_code == 404:
                raise SpaceNotFoundError(space_key) from e
            raise
        return v1_space_to_space(decode_object(data, "v1 space")).id

    # --- Pages ---

    def get_page(self, page_id: str, include_body: bool = False) -> Page:
        expand = PAGE_EXPAND
        if include_body:
            expand += ",body.storage"
        data = self._transport.get_v1(f"content/{page_id}", {'expand': expand})
        return v1_content_to_page(decode_object(data, "v1 page"))

    def list_pages(
        self,
        space_key: str,
        title: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Page]:
        params = {
            'type': 'page',
            'spaceKey': space_key,
            'expand': 'version,space',
        }
        if title:
            params['title'] = title
        params.update(limit_params(limit))

        data = self._transport.get_v1("content", params)
        return [v1_content_to_page(item) for item in decode_results(data, "v1 pages")]

    def get_children(self, page_id: str, limit: Optional[int] = None) -> List[Page]:
        params = {'expand': 'version'}
        params.update(limit_params(limit))
        data = self._transport.get_v1(f"content/{page_id}/child/page", params)
        return [v1_content_to_page(item) for item in decode_results(data, "v1 children")]

    def get_ancestors(self, page_id: str) -> List[Ancestor]:
        # No dedicated endpoint: the breadcrumb comes from an expansion on the page
        data = self._transport.get_v1(f"content/{page_id}", {'expand': 'ancestors'})
        return v1_ancestors(decode_object(data, "v1 ancestors"))

    def create_page(
        self,
        space_key: str,
        title: str,
        body: str,
        parent_id: Optional[str] = None,
    ) -> Page:
        request: Dict[str, Any] = {
            'type': 'page',
            'title': title,
            'space': {'key': space_key},
        }
        if body:
            request['body'] = _storage(body)
        if parent_id:
            request['ancestors'] = [{'id': parent_id}]

        data = self._transport.post_v1("content", request)
        return v1_content_to_page(decode_object(data, "v1 created page"))

    def put_page(
        self,
        page_id: str,
        title: str,
        body: str,
        message: str,
        version_number: int,
    ) -> Page:
        request: Dict[str, Any] = {
            'type': 'page',
            'title': title,
            'version': {'number': version_number, 'message': message},
        }
        if body:
            request['body'] = _storage(body)

        data = self._transport.put_v1(f"content/{page_id}", request)
        return v1_content_to_page(decode_object(data, "v1 updated page"))

    def delete_page(self, page_id: str) -> None:
        self._transport.delete_v1(f"content/{page_id}")

    # --- Spaces ---

    def list_spaces(self, limit: Optional[int] = None) -> List[Space]:
        data = self._transport.get_v1("space", limit_params(limit))
        return [v1_space_to_space(item) for item in decode_results(data, "v1 spaces")]

    def get_space(self, space_key: str) -> Space:
        data = self._transport.get_v1(f"space/{quote(space_key, safe='')}")
        return v1_space_to_space(decode_object(data, "v1 space"))

    # --- Labels ---

    def get_labels(self, page_id: str) -> List[Label]:
        data = self._transport.get_v1(f"content/{page_id}", {'expand': 'metadata.labels'})
        return v1_labels(decode_object(data, "v1 labels")) or []

    def add_labels(self, page_id: str, names: List[str]) -> None:
        entries = [{'prefix': 'global', 'name': name} for name in names]
        self._transport.post_v1(f"content/{page_id}/label", entries)

    def remove_label(self, page_id: str, name: str) -> None:
        self._transport.delete_v1(f"content/{page_id}/label/{quote(name, safe='')}")
