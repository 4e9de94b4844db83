"""Confluence page data model.

The canonical page shape follows the modern (v2) API response. Legacy (v1)
responses are translated into it by the dialect normalizer, so everything
downstream works with a single structure.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class Version:
    """A page version.

    Attributes:
        number: Version number, starts at 1 and increases on every update
        message: Optional version comment
        created_at: Timestamp the version was created
        author_id: Account ID (Cloud) or username (Server/DC) of the author
    """
    number: int = 0
    message: str = ""
    created_at: str = ""
    author_id: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['Version']:
        if not data:
            return None
        return cls(
            number=int(data.get('number') or 0),
            message=data.get('message') or "",
            created_at=data.get('createdAt') or "",
            author_id=data.get('authorId') or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'message': self.message,
            'createdAt': self.created_at,
            'authorId': self.author_id,
        }


@dataclass
class PageBody:
    """Page content in storage format (XHTML)."""
    value: str = ""
    representation: str = "storage"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['PageBody']:
        storage = (data or {}).get('storage')
        if not storage:
            return None
        return cls(
            value=storage.get('value') or "",
            representation=storage.get('representation') or "storage",
        )


@dataclass
class Label:
    """A page label.

    Attributes:
        id: Opaque label ID (needed by the v2 API to delete a label)
        name: Label name
        prefix: "global", "my" or "team"
    """
    id: str = ""
    name: str = ""
    prefix: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Label':
        return cls(
            id=str(data.get('id') or ""),
            name=data.get('name') or "",
            prefix=data.get('prefix') or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'prefix': self.prefix}


@dataclass
class Ancestor:
    """One entry of a page breadcrumb (root first, immediate parent last)."""
    id: str
    title: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Ancestor':
        return cls(id=str(data.get('id') or ""), title=data.get('title') or "")

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'title': self.title}


@dataclass
class Page:
    """Confluence page in canonical (v2) shape.

    Attributes:
        id: Unique identifier for the page
        status: "current", "draft" or "trashed" (empty when not reported)
        title: Page title
        space_id: Numeric space ID as a string
        parent_id: Parent page ID (empty when the page is at space root)
        author_id: Account ID of the page creator
        created_at: Creation timestamp
        version: Current version (required for updates)
        body: Storage-format content, only present when requested
        labels: Labels attached to the page, None when not fetched
        web_url: Link to the page in the web UI
    """
    id: str
    status: str = ""
    title: str = ""
    space_id: str = ""
    parent_id: str = ""
    parent_type: str = ""
    author_id: str = ""
    created_at: str = ""
    version: Optional[Version] = None
    body: Optional[PageBody] = None
    labels: Optional[List[Label]] = None
    web_url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Page':
        """Build a Page from a v2 API page object."""
        labels = None
        if data.get('labels') is not None:
            labels = [Label.from_dict(item) for item in data['labels'].get('results') or []]

        return cls(
            id=str(data.get('id') or ""),
            status=data.get('status') or "",
            title=data.get('title') or "",
            space_id=str(data.get('spaceId') or ""),
            parent_id=str(data.get('parentId') or ""),
            parent_type=data.get('parentType') or "",
            author_id=data.get('authorId') or "",
            created_at=data.get('createdAt') or "",
            version=Version.from_dict(data.get('version')),
            body=PageBody.from_dict(data.get('body')),
            labels=labels,
            web_url=(data.get('_links') or {}).get('webui') or "",
        )

    @property
    def label_names(self) -> Optional[List[str]]:
        if self.labels is None:
            return None
        return [label.name for label in self.labels]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the v2 JSON shape, omitting empty optional parts."""
        result: Dict[str, Any] = {
            'id': self.id,
            'status': self.status,
            'title': self.title,
            'spaceId': self.space_id,
        }
        if self.parent_id:
            result['parentId'] = self.parent_id
        if self.author_id:
            result['authorId'] = self.author_id
        if self.created_at:
            result['createdAt'] = self.created_at
        if self.version is not None:
            result['version'] = self.version.to_dict()
        if self.body is not None:
            result['body'] = {
                'storage': {
                    'value': self.body.value,
                    'representation': self.body.representation,
                }
            }
        if self.labels is not None:
            result['labels'] = {'results': [label.to_dict() for label in self.labels]}
        if self.web_url:
            result['_links'] = {'webui': self.web_url}
        return result
