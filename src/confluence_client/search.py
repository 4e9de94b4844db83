"""CQL search.

Neither search endpoint has a v2 equivalent, so both always go through the
legacy (v1) path family regardless of the instance type.
"""

import logging
from typing import List, Optional

from src.models import ContentSummary, SearchResult

from .transport import Transport, decode_object, result_items

logger = logging.getLogger(__name__)


class CQLSearch:
    """Runs CQL queries against /rest/api/search and /rest/api/content/search.

    CQL strings are passed through verbatim; they are never parsed or
    rewritten here.

    Example:
        >>> search = CQLSearch(transport)
        >>> result = search.search_cql('type=page AND space="DEV"', limit=25)
        >>> for item in result.results:
        ...     print(item.title, item.excerpt)
    """

    def __init__(self, transport: Transport):
        self._transport = transport

    def search_cql(self, cql: str, limit: Optional[int] = None) -> SearchResult:
        """Rich search with excerpts and container info.

        Args:
            cql: CQL query string
            limit: Maximum number of results (API default when None)

        Returns:
            SearchResult with one item per hit
        """
        params = {'cql': cql}
        if limit is not None and limit > 0:
            params['limit'] = str(limit)

        logger.debug(f"CQL search: {cql}")
        data = self._transport.get_v1("search", params)
        payload = decode_object(data, "search results")
        result_items(payload, "search results")  # rejects a malformed results array
        return SearchResult.from_dict(payload)

    def search_content_cql(
        self,
        cql: str,
        limit: Optional[int] = None,
        expand: Optional[str] = None,
    ) -> List[ContentSummary]:
        """Content-only search returning legacy-shaped content objects.

        Args:
            cql: CQL query string
            limit: Maximum number of results (API default when None)
            expand: Optional v1 expansion list (e.g. "version,space")

        Returns:
            List of ContentSummary, each keeping its raw v1 JSON
        """
        params = {'cql': cql}
        if limit is not None and limit > 0:
            params['limit'] = str(limit)
        if expand:
            params['expand'] = expand

        data = self._transport.get_v1("content/search", params)
        items = result_items(decode_object(data, "content search"), "content search")
        return [ContentSummary.from_dict(item) for item in items]
