"""Unit tests for the field schema and page projection."""

import pytest

from src.models import Label, Page, PageBody, Version
from src.query.schema import (
    DEFAULT_FIELDS,
    FULL_FIELDS,
    FieldSchema,
    build_page_schema,
)


@pytest.fixture
def schema():
    return build_page_schema()


@pytest.fixture
def full_page():
    return Page(
        id="123",
        status="current",
        title="Home",
        space_id="1001",
        parent_id="50",
        author_id="user-1",
        created_at="2024-01-15T10:30:00Z",
        version=Version(number=4),
        body=PageBody(value="<p>x</p>"),
        labels=[Label(name="a"), Label(name="b")],
        web_url="/spaces/DEV/pages/123",
    )


class TestPresets:
    """Test cases for preset definitions."""

    def test_preset_contents(self, schema):
        assert schema.preset_fields("minimal") == ("id", "title", "status")
        assert schema.preset_fields("default") == DEFAULT_FIELDS
        assert schema.preset_fields("overview") == DEFAULT_FIELDS[:5] + ("ancestors", "labels", "url")
        assert schema.preset_fields("full") == FULL_FIELDS

    def test_default_preset(self, schema):
        assert schema.default_fields == DEFAULT_FIELDS

    def test_preset_with_unknown_field_rejected(self):
        schema = FieldSchema().field("id", lambda p: p.id)
        with pytest.raises(ValueError, match="nope"):
            schema.preset("broken", "id", "nope")

    def test_preset_name_cannot_shadow_field(self):
        schema = FieldSchema().field("id", lambda p: p.id)
        with pytest.raises(ValueError):
            schema.preset("id", "id")


class TestApply:
    """Test cases for projection."""

    def test_default_projection(self, schema, full_page):
        assert schema.apply(full_page) == {
            "id": "123",
            "title": "Home",
            "status": "current",
            "spaceKey": "1001",
            "version": 4,
            "url": "/spaces/DEV/pages/123",
        }

    def test_keys_follow_selection_order(self, schema, full_page):
        assert list(schema.apply(full_page, ["version", "id"])) == ["version", "id"]

    def test_full_projection(self, schema, full_page):
        result = schema.apply(full_page, FULL_FIELDS)

        assert len(result) == 12
        assert result["body"] == "<p>x</p>"
        assert result["labels"] == ["a", "b"]
        assert result["created"] == "2024-01-15T10:30:00Z"
        assert result["author"] == "user-1"
        assert result["ancestors"] is None
        assert result["updated"] is None

    def test_missing_substructures_are_null(self, schema):
        """A page without version, body or labels projects those as None."""
        result = schema.apply(Page(id="1"), ["version", "body", "labels", "parentId"])
        assert result == {"version": None, "body": None, "labels": None, "parentId": ""}

    def test_none_entity(self, schema):
        assert schema.apply(None, ["id", "title"]) == {"id": None, "title": None}

    def test_space_fields_null_for_pages(self, schema, full_page):
        result = schema.apply(full_page, ["key", "name", "type", "homepageId"])
        assert set(result.values()) == {None}

    def test_unknown_field(self, schema, full_page):
        with pytest.raises(KeyError):
            schema.apply(full_page, ["nope"])
