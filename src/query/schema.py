"""Field schema: named extractors and presets for projecting pages.

The schema decouples "which fields exist and how to compute them" from the
Page shape. It is built once by build_page_schema() and handed explicitly to
the parser (which validates field names against it) and to the executor
(which projects entities through it). Nothing is registered globally.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from src.models import Page

Extractor = Callable[[Any], Any]

MINIMAL_FIELDS = ("id", "title", "status")
DEFAULT_FIELDS = ("id", "title", "status", "spaceKey", "version", "url")
OVERVIEW_FIELDS = (
    "id", "title", "status", "spaceKey", "version", "ancestors", "labels", "url",
)
FULL_FIELDS = (
    "id", "title", "status", "spaceKey", "version", "ancestors", "labels",
    "body", "created", "updated", "author", "url",
)


class FieldSchema:
    """Registry of field extractors plus named, ordered presets.

    Extractors are pure functions of one entity. Projection never calls an
    extractor with None: a missing entity yields None for every field.

    Example:
        >>> schema = FieldSchema()
        >>> schema.field("id", lambda p: p.id).preset("minimal", "id")
        >>> schema.set_default_preset("minimal")
        >>> schema.apply(page)
        {'id': '123'}
    """

    def __init__(self):
        self._fields: Dict[str, Extractor] = {}
        self._presets: Dict[str, Tuple[str, ...]] = {}
        self._default_preset: Optional[str] = None

    def field(self, name: str, extractor: Extractor) -> 'FieldSchema':
        """Register a field; returns self for chaining."""
        self._fields[name] = extractor
        return self

    def preset(self, name: str, *fields: str) -> 'FieldSchema':
        """Register a preset; every member must already be a field.

        Raises:
            ValueError: If a member is not a registered field or a name
                collides with a field name
        """
        if name in self._fields:
            raise ValueError(f"preset {name!r} collides with a field of the same name")
        unknown = [f for f in fields if f not in self._fields]
        if unknown:
            raise ValueError(f"preset {name!r} references unknown fields: {', '.join(unknown)}")
        self._presets[name] = tuple(dict.fromkeys(fields))
        return self

    def set_default_preset(self, name: str) -> 'FieldSchema':
        if name not in self._presets:
            raise ValueError(f"unknown preset {name!r}")
        self._default_preset = name
        return self

    @property
    def field_names(self) -> List[str]:
        return list(self._fields)

    @property
    def preset_names(self) -> List[str]:
        return list(self._presets)

    def is_field(self, name: str) -> bool:
        return name in self._fields

    def is_preset(self, name: str) -> bool:
        return name in self._presets

    def preset_fields(self, name: str) -> Tuple[str, ...]:
        return self._presets[name]

    @property
    def default_fields(self) -> Tuple[str, ...]:
        if self._default_preset is None:
            return tuple(self._fields)
        return self._presets[self._default_preset]

    def apply(self, entity: Any, fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """Project an entity onto the selected fields.

        Args:
            entity: The entity to project (None yields all-None values)
            fields: Field names in output order; the default preset when None

        Returns:
            Dict with exactly the selected keys, in order

        Raises:
            KeyError: If a field name is not registered
        """
        selected: Iterable[str] = self.default_fields if fields is None else fields
        result: Dict[str, Any] = {}
        for name in selected:
            extractor = self._fields[name]
            result[name] = None if entity is None else extractor(entity)
        return result


def _version_number(page: Page) -> Optional[int]:
    if page.version is None:
        return None
    return page.version.number


def _body_value(page: Page) -> Optional[str]:
    if page.body is None:
        return None
    return page.body.value


def _always_none(page: Page) -> None:
    return None


def build_page_schema() -> FieldSchema:
    """Build the page field schema with the minimal/default/overview/full presets.

    `ancestors` and `updated` are declared but always null: a single page
    fetch does not carry them. `key`, `name`, `type` and `homepageId` are
    space attributes, always null for pages, and exist so that spaces()
    field selections pass validation.
    """
    schema = FieldSchema()

    # Page fields
    schema.field("id", lambda p: p.id)
    schema.field("title", lambda p: p.title)
    schema.field("status", lambda p: p.status)
    schema.field("spaceId", lambda p: p.space_id)
    # v2 pages carry spaceId only, so spaceKey reports it as a best effort
    schema.field("spaceKey", lambda p: p.space_id)
    schema.field("version", _version_number)
    schema.field("body", _body_value)
    schema.field("labels", lambda p: p.label_names)
    schema.field("created", lambda p: p.created_at)
    schema.field("updated", _always_none)
    schema.field("author", lambda p: p.author_id)
    schema.field("url", lambda p: p.web_url)
    schema.field("parentId", lambda p: p.parent_id)
    schema.field("ancestors", _always_none)

    # Space-compatible fields
    schema.field("key", _always_none)
    schema.field("name", _always_none)
    schema.field("type", _always_none)
    schema.field("homepageId", _always_none)

    schema.preset("minimal", *MINIMAL_FIELDS)
    schema.preset("default", *DEFAULT_FIELDS)
    schema.preset("overview", *OVERVIEW_FIELDS)
    schema.preset("full", *FULL_FIELDS)
    schema.set_default_preset("default")

    return schema
