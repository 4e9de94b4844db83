"""CQL search result data models.

CQL search only exists in the legacy (v1) API, so these models keep the
legacy response shape instead of the canonical page shape.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ContentSummary:
    """Legacy (v1) content object as returned by CQL searches.

    Attributes:
        id: Content ID
        type: "page", "blogpost", "comment", ...
        status: "current", "draft", ...
        title: Content title
        space_key: Key of the containing space, when expanded
        raw: The untouched v1 JSON object (expanded data lives here)
    """
    id: str
    type: str = ""
    status: str = ""
    title: str = ""
    space_key: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContentSummary':
        space = data.get('space') or {}
        return cls(
            id=str(data.get('id') or ""),
            type=data.get('type') or "",
            status=data.get('status') or "",
            title=data.get('title') or "",
            space_key=space.get('key') or "",
            raw=data,
        )


@dataclass
class SearchResultItem:
    """One hit of a rich CQL search (/rest/api/search)."""
    title: str = ""
    excerpt: str = ""
    url: str = ""
    container_title: str = ""
    content: Optional[ContentSummary] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchResultItem':
        content = data.get('content')
        container = data.get('resultGlobalContainer') or {}
        return cls(
            title=data.get('title') or "",
            excerpt=data.get('excerpt') or "",
            url=data.get('url') or "",
            container_title=container.get('title') or "",
            content=ContentSummary.from_dict(content) if content else None,
        )

    def to_excerpt(self) -> Dict[str, Any]:
        """Reduce to the minimal excerpt shape used by search-style queries."""
        item: Dict[str, Any] = {
            'title': self.title,
            'excerpt': self.excerpt,
        }
        if self.content is not None:
            item['id'] = self.content.id
            item['type'] = self.content.type
            if self.content.space_key:
                item['spaceKey'] = self.content.space_key
        return item


@dataclass
class SearchResult:
    """Rich CQL search response with excerpts and paging metadata."""
    results: List[SearchResultItem] = field(default_factory=list)
    start: int = 0
    limit: int = 0
    size: int = 0
    total_size: int = 0
    cql_query: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchResult':
        return cls(
            results=[SearchResultItem.from_dict(item) for item in data.get('results') or []],
            start=int(data.get('start') or 0),
            limit=int(data.get('limit') or 0),
            size=int(data.get('size') or 0),
            total_size=int(data.get('totalSize') or 0),
            cql_query=data.get('cqlQuery') or "",
        )
