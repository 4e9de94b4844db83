"""Modern (v2) dialect for Confluence Cloud.

The v2 API addresses spaces by numeric ID, paginates with cursors and
returns flat page objects, which are already the canonical shape.
"""

import logging
from typing import Any, Dict, List, Optional

from src.models import Ancestor, Label, Page, Space

from ..errors import LabelNotFoundError, SpaceNotFoundError
from ..transport import decode_object, decode_results
from .base import Dialect, limit_params, storage_body

logger = logging.getLogger(__name__)


class CloudDialect(Dialect):
    """Canonical operations over the /api/v2 path family."""

    def _lookup_space_id(self, space_key: str) -> str:
        data = self._transport.get_v2("spaces", {'keys': space_key})
        results = decode_results(data, "space response")
        if not results:
            raise SpaceNotFoundError(space_key)
        return str(results[0].get('id') or "")

    # --- Pages ---

    def get_page(self, page_id: str, include_body: bool = False) -> Page:
        params = {'body-format': 'storage'} if include_body else {}
        data = self._transport.get_v2(f"pages/{page_id}", params)
        return Page.from_dict(decode_object(data, "page"))

    def list_pages(
        self,
        space_key: str,
        title: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Page]:
        space_id = self.resolve_space_key(space_key)
        params = {'space-id': space_id}
        if title:
            params['title'] = title
        params.update(limit_params(limit))

        data = self._transport.get_v2("pages", params)
        return [Page.from_dict(item) for item in decode_results(data, "pages")]

    def get_children(self, page_id: str, limit: Optional[int] = None) -> List[Page]:
        data = self._transport.get_v2(f"pages/{page_id}/children", limit_params(limit))
        return [Page.from_dict(item) for item in decode_results(data, "children")]

    def get_ancestors(self, page_id: str) -> List[Ancestor]:
        data = self._transport.get_v2(f"pages/{page_id}/ancestors")
        return [Ancestor.from_dict(item) for item in decode_results(data, "ancestors")]

    def create_page(
        self,
        space_key: str,
        title: str,
        body: str,
        parent_id: Optional[str] = None,
    ) -> Page:
        request: Dict[str, Any] = {
            'spaceId': self.resolve_space_key(space_key),
            'status': 'current',
            'title': title,
        }
        if parent_id:
            request['parentId'] = parent_id
        if body:
            request['body'] = storage_body(body)

        data = self._transport.post_v2("pages", request)
        return Page.from_dict(decode_object(data, "created page"))

    def put_page(
        self,
        page_id: str,
        title: str,
        body: str,
        message: str,
        version_number: int,
    ) -> Page:
        request: Dict[str, Any] = {
            'id': page_id,
            'status': 'current',
            'title': title,
            'version': {'number': version_number, 'message': message},
        }
        if body:
            request['body'] = storage_body(body)

        data = self._transport.put_v2(f"pages/{page_id}", request)
        return Page.from_dict(decode_object(data, "updated page"))

    def delete_page(self, page_id: str) -> None:
        self._transport.delete_v2(f"pages/{page_id}")

    # --- Spaces ---

    def list_spaces(self, limit: Optional[int] = None) -> List[Space]:
        data = self._transport.get_v2("spaces", limit_params(limit))
        return [Space.from_dict(item) for item in decode_results(data, "spaces")]

    def get_space(self, space_key: str) -> Space:
        space_id = self.resolve_space_key(space_key)
        data = self._transport.get_v2(f"spaces/{space_id}")
        return Space.from_dict(decode_object(data, "space"))

    # --- Labels ---

    def get_labels(self, page_id: str) -> List[Label]:
        data = self._transport.get_v2(f"pages/{page_id}/labels")
        return [Label.from_dict(item) for item in decode_results(data, "labels")]

    def add_labels(self, page_id: str, names: List[str]) -> None:
        entries = [{'prefix': 'global', 'name': name} for name in names]
        self._transport.post_v2(f"pages/{page_id}/labels", entries)

    def remove_label(self, page_id: str, name: str) -> None:
        # v2 deletes by opaque label ID, so the name has to be looked up first
        for label in self.get_labels(page_id):
            if label.name == name:
                self._transport.delete_v2(f"pages/{page_id}/labels/{label.id}")
                return
        raise LabelNotFoundError(name, page_id)
