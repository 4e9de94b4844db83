"""Translation of legacy (v1) response shapes into canonical entities.

The v1 API nests most page data behind expansion parameters (space,
version.by, ancestors, metadata.labels, body.storage). These helpers flatten
whatever was expanded into the canonical Page/Space/Label/Ancestor shapes and
leave the rest at their empty defaults.
"""

from typing import Any, Dict, List, Optional

from src.models import Ancestor, Label, Page, PageBody, Space, Version


def _id_string(value: Any) -> str:
    """v1 reports some IDs as integers; canonical IDs are strings."""
    if value is None or value == "":
        return ""
    return str(value)


def v1_version_to_version(data: Optional[Dict[str, Any]]) -> Optional[Version]:
    if not data:
        return None

    author_id = ""
    by = data.get('by')
    if by:
        # Cloud reports accountId, Server/DC only has a username
        author_id = by.get('accountId') or by.get('username') or ""

    return Version(
        number=int(data.get('number') or 0),
        message=data.get('message') or "",
        created_at=data.get('when') or "",
        author_id=author_id,
    )


def v1_labels(data: Dict[str, Any]) -> Optional[List[Label]]:
    """Labels from an expanded metadata.labels block, None when not expanded."""
    labels = (data.get('metadata') or {}).get('labels')
    if labels is None:
        return None
    return [Label.from_dict(item) for item in labels.get('results') or []]


def v1_ancestors(data: Dict[str, Any]) -> List[Ancestor]:
    """Breadcrumb from an expanded ancestors list (root first)."""
    return [Ancestor.from_dict(item) for item in data.get('ancestors') or []]


def v1_content_to_page(data: Dict[str, Any]) -> Page:
    """Convert a v1 content object into a canonical Page.

    Args:
        data: v1 content JSON (any subset of expansions)

    Returns:
        Page with every field the expansions provided
    """
    space = data.get('space') or {}

    body = None
    storage = (data.get('body') or {}).get('storage')
    if storage:
        body = PageBody(
            value=storage.get('value') or "",
            representation=storage.get('representation') or "storage",
        )

    ancestors = v1_ancestors(data)
    parent_id = ancestors[-1].id if ancestors else ""

    return Page(
        id=_id_string(data.get('id')),
        status=data.get('status') or "",
        title=data.get('title') or "",
        space_id=_id_string(space.get('id')),
        parent_id=parent_id,
        version=v1_version_to_version(data.get('version')),
        body=body,
        labels=v1_labels(data),
        web_url=(data.get('_links') or {}).get('webui') or "",
    )


def v1_space_to_space(data: Dict[str, Any]) -> Space:
    """Convert a v1 space object into a canonical Space."""
    homepage = data.get('homepage') or {}
    return Space(
        id=_id_string(data.get('id')),
        key=data.get('key') or "",
        name=data.get('name') or "",
        type=data.get('type') or "",
        status=data.get('status') or "",
        homepage_id=_id_string(homepage.get('id')),
    )
