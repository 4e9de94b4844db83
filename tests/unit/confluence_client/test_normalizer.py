"""Unit tests for the v1 to canonical shape normalizer."""

from src.confluence_client.dialects.normalizer import (
    v1_content_to_page,
    v1_space_to_space,
    v1_version_to_version,
)


class TestContentToPage:
    """Test cases for v1_content_to_page function."""

    def test_minimal_object(self):
        """Unexpanded parts stay at their empty defaults."""
        page = v1_content_to_page({"id": 123, "title": "Home"})

        assert page.id == "123"
        assert page.space_id == ""
        assert page.parent_id == ""
        assert page.version is None
        assert page.body is None
        assert page.labels is None

    def test_parent_is_last_ancestor(self):
        page = v1_content_to_page({
            "id": "3",
            "ancestors": [{"id": 1, "title": "Root"}, {"id": 2, "title": "Parent"}],
        })
        assert page.parent_id == "2"

    def test_empty_label_block(self):
        """An expanded but empty label list is [] rather than None."""
        page = v1_content_to_page({"id": "1", "metadata": {"labels": {"results": []}}})
        assert page.labels == []
        assert page.label_names == []


class TestVersion:
    """Test cases for v1_version_to_version function."""

    def test_cloud_account_id_preferred(self):
        version = v1_version_to_version({
            "number": 7, "when": "2024-01-01", "by": {"accountId": "abc", "username": "jdoe"},
        })
        assert version.number == 7
        assert version.created_at == "2024-01-01"
        assert version.author_id == "abc"

    def test_missing(self):
        assert v1_version_to_version(None) is None


class TestSpace:
    """Test cases for v1_space_to_space function."""

    def test_homepage_id(self):
        space = v1_space_to_space({"id": 5, "key": "DEV", "homepage": {"id": 9}, "status": "current"})
        assert (space.id, space.key, space.homepage_id, space.status) == ("5", "DEV", "9", "current")
