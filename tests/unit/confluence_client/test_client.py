"""Unit tests for ConfluenceClient over both API dialects.

HTTP is served by FakeSession, so these tests check the exact endpoints,
parameters and payloads each dialect sends.
"""

import pytest

from src.confluence_client.client import ConfluenceClient
from src.confluence_client.errors import (
    APIError,
    ClientConfigError,
    LabelNotFoundError,
    PageNotFoundError,
    ResponseParseError,
    SpaceNotFoundError,
)
from src.confluence_client.models import ClientConfig
from tests.helpers.builders import v1_content, v1_list, v2_list, v2_page


class TestConstruction:
    """Test cases for dialect selection."""

    def test_cloud_flag(self, cloud_client, server_client):
        assert cloud_client.is_cloud is True
        assert server_client.is_cloud is False

    def test_invalid_instance_type(self):
        with pytest.raises(ClientConfigError, match="instance type"):
            ConfluenceClient(ClientConfig(base_url="https://x", token="t", instance_type="desktop"))


class TestCloudPages:
    """Test cases for page operations on the v2 dialect."""

    def test_get_page(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/pages/123", json_body=v2_page("123", "Home", version=4))

        page = cloud_client.get_page("123")

        assert page.id == "123"
        assert page.title == "Home"
        assert page.version.number == 4
        assert page.body is None
        assert cloud_session.calls[0].params == {}

    def test_get_page_with_body(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/pages/123", json_body=v2_page("123", body="<p>x</p>"))

        page = cloud_client.get_page("123", include_body=True)

        assert page.body.value == "<p>x</p>"
        assert cloud_session.calls[0].params == {"body-format": "storage"}

    def test_list_pages_resolves_space_once(self, cloud_client, cloud_session):
        """The space key lookup happens once per client, however many list calls follow."""
        cloud_session.add("GET", "/api/v2/spaces", json_body=v2_list([{"id": "1001", "key": "DEV"}]))
        cloud_session.add("GET", "/api/v2/pages", json_body=v2_list([v2_page("1"), v2_page("2")]))

        first = cloud_client.list_pages("DEV", title="Home", limit=1)
        cloud_client.list_pages("DEV")

        assert [p.id for p in first] == ["1", "2"]
        assert len(cloud_session.calls_to("GET", "/api/v2/spaces")) == 1
        page_calls = cloud_session.calls_to("GET", "/api/v2/pages")
        assert page_calls[0].params == {"space-id": "1001", "title": "Home", "limit": "1"}
        assert page_calls[1].params == {"space-id": "1001"}

    def test_unknown_space(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/spaces", json_body=v2_list([]))

        with pytest.raises(SpaceNotFoundError):
            cloud_client.list_pages("NOPE")

    def test_children_and_ancestors(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/pages/1/children", json_body=v2_list([v2_page("2")]))
        cloud_session.add("GET", "/api/v2/pages/3/ancestors", json_body=v2_list([
            {"id": "1", "title": "Root"}, {"id": "2", "title": "Parent"},
        ]))

        assert [c.id for c in cloud_client.get_children("1")] == ["2"]
        assert [a.title for a in cloud_client.get_ancestors("3")] == ["Root", "Parent"]

    def test_create_page_payload(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/spaces", json_body=v2_list([{"id": "1001", "key": "DEV"}]))
        cloud_session.add("POST", "/api/v2/pages", json_body=v2_page("9", "New"))

        page = cloud_client.create_page("DEV", "New", "<p>hi</p>", parent_id="5")

        assert page.id == "9"
        assert cloud_session.calls_to("POST", "/api/v2/pages")[0].body == {
            "spaceId": "1001",
            "status": "current",
            "title": "New",
            "parentId": "5",
            "body": {"representation": "storage", "value": "<p>hi</p>"},
        }

    def test_update_increments_version(self, cloud_client, cloud_session):
        """update_page reads version N and submits N + 1, keeping the title when blank."""
        cloud_session.add("GET", "/api/v2/pages/7", json_body=v2_page("7", "Old", version=3))
        cloud_session.add("PUT", "/api/v2/pages/7", json_body=v2_page("7", "Old", version=4))

        page = cloud_client.update_page("7", body="<p>new</p>", message="edit")

        assert page.version.number == 4
        assert cloud_session.calls_to("PUT", "/api/v2/pages/7")[0].body == {
            "id": "7",
            "status": "current",
            "title": "Old",
            "version": {"number": 4, "message": "edit"},
            "body": {"representation": "storage", "value": "<p>new</p>"},
        }

    def test_update_missing_page(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/pages/7", status=404, json_body={"message": "gone"})

        with pytest.raises(PageNotFoundError) as exc_info:
            cloud_client.update_page("7", title="T")

        assert isinstance(exc_info.value.__cause__, APIError)
        assert cloud_session.calls_to("PUT", "/api/v2/pages/7") == []

    def test_update_conflict_surfaces(self, cloud_client, cloud_session):
        """A 409 on the write is not retried and not wrapped."""
        cloud_session.add("GET", "/api/v2/pages/7", json_body=v2_page("7", version=3))
        cloud_session.add("PUT", "/api/v2/pages/7", status=409, json_body={"message": "stale"})

        with pytest.raises(APIError) as exc_info:
            cloud_client.update_page("7", title="T")

        assert exc_info.value.status_code == 409

    def test_delete_page(self, cloud_client, cloud_session):
        cloud_session.add("DELETE", "/api/v2/pages/7", status=204)
        cloud_client.delete_page("7")
        assert cloud_session.calls[0].method == "DELETE"


class TestCloudSpacesAndLabels:
    """Test cases for spaces and labels on the v2 dialect."""

    def test_get_space(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/spaces", json_body=v2_list([{"id": "1001", "key": "DEV"}]))
        cloud_session.add("GET", "/api/v2/spaces/1001", json_body={
            "id": 1001, "key": "DEV", "name": "Development", "homepageId": 55,
        })

        space = cloud_client.get_space("DEV")

        assert space.id == "1001"
        assert space.homepage_id == "55"

    def test_add_labels_deduplicates(self, cloud_client, cloud_session):
        cloud_session.add("POST", "/api/v2/pages/1/labels", json_body=v2_list([]))

        cloud_client.add_labels("1", ["a", "b", "a", " b ", ""])

        assert cloud_session.calls[0].body == [
            {"prefix": "global", "name": "a"},
            {"prefix": "global", "name": "b"},
        ]

    def test_add_no_labels_sends_nothing(self, cloud_client, cloud_session):
        cloud_client.add_labels("1", [])
        assert cloud_session.calls == []

    def test_remove_label_by_id(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/pages/1/labels", json_body=v2_list([
            {"id": "77", "name": "draft", "prefix": "global"},
        ]))
        cloud_session.add("DELETE", "/api/v2/pages/1/labels/77", status=204)

        cloud_client.remove_label("1", "draft")

        assert len(cloud_session.calls_to("DELETE", "/api/v2/pages/1/labels/77")) == 1

    def test_remove_missing_label(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/pages/1/labels", json_body=v2_list([]))

        with pytest.raises(LabelNotFoundError):
            cloud_client.remove_label("1", "draft")


class TestServerDialect:
    """Test cases for the v1 dialect."""

    def test_get_page_normalized(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content/123", json_body=v1_content(
            "123", "Home", version=2,
            ancestors=[{"id": "1", "title": "Root"}, {"id": "50", "title": "Parent"}],
            labels=["a", "b"],
        ))

        page = server_client.get_page("123")

        assert page.space_id == "98306"
        assert page.parent_id == "50"
        assert page.version.number == 2
        assert page.version.author_id == "jdoe"
        assert page.label_names == ["a", "b"]
        assert page.web_url == "/display/DEV/Home"
        assert server_session.calls[0].params == {"expand": "version,space,ancestors,metadata.labels"}
        assert server_session.calls[0].headers["Authorization"] == "Bearer pat-token"

    def test_get_page_with_body(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content/123", json_body=v1_content("123", body="<p>b</p>"))

        page = server_client.get_page("123", include_body=True)

        assert page.body.value == "<p>b</p>"
        assert server_session.calls[0].params["expand"].endswith(",body.storage")

    def test_list_pages_by_key(self, server_client, server_session):
        """The v1 listing filters by space key directly; no lookup call."""
        server_session.add("GET", "/rest/api/content", json_body=v1_list([v1_content("1")]))

        pages = server_client.list_pages("DEV", title="Home", limit=1)

        assert [p.id for p in pages] == ["1"]
        assert server_session.calls[0].params == {
            "type": "page", "spaceKey": "DEV", "expand": "version,space", "title": "Home", "limit": "1",
        }

    def test_resolve_space_key_memoized(self, server_client, server_session):
        server_session.add("GET", "/rest/api/space/DEV", json_body={"id": 98306, "key": "DEV"})

        assert server_client.resolve_space_key("DEV") == "98306"
        assert server_client.resolve_space_key("DEV") == "98306"
        assert len(server_session.calls) == 1

    def test_resolve_unknown_space(self, server_client, server_session):
        server_session.add("GET", "/rest/api/space/NOPE", status=404, json_body={"message": "No space"})

        with pytest.raises(SpaceNotFoundError):
            server_client.resolve_space_key("NOPE")

    def test_ancestors_from_expansion(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content/3", json_body=v1_content(
            "3", ancestors=[{"id": "1", "title": "Root"}],
        ))

        ancestors = server_client.get_ancestors("3")

        assert [a.to_dict() for a in ancestors] == [{"id": "1", "title": "Root"}]
        assert server_session.calls[0].params == {"expand": "ancestors"}

    def test_create_payload(self, server_client, server_session):
        server_session.add("POST", "/rest/api/content", json_body=v1_content("9", "New"))

        server_client.create_page("DEV", "New", "<p>hi</p>", parent_id="5")

        assert server_session.calls[0].body == {
            "type": "page",
            "title": "New",
            "space": {"key": "DEV"},
            "body": {"storage": {"value": "<p>hi</p>", "representation": "storage"}},
            "ancestors": [{"id": "5"}],
        }

    def test_update_payload(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content/7", json_body=v1_content("7", "Old", version=5))
        server_session.add("PUT", "/rest/api/content/7", json_body=v1_content("7", "New", version=6))

        page = server_client.update_page("7", title="New", message="m")

        assert page.version.number == 6
        assert server_session.calls_to("PUT", "/rest/api/content/7")[0].body == {
            "type": "page",
            "title": "New",
            "version": {"number": 6, "message": "m"},
        }

    def test_labels(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content/1", json_body=v1_content("1", labels=["x"]))
        server_session.add("POST", "/rest/api/content/1/label", json_body=v1_list([]))
        server_session.add("DELETE", "/rest/api/content/1/label/my%20label", status=204)

        assert [label.name for label in server_client.get_labels("1")] == ["x"]
        server_client.add_labels("1", ["y", "y"])
        server_client.remove_label("1", "my label")

        assert server_session.calls[1].body == [{"prefix": "global", "name": "y"}]
        assert server_session.calls[2].method == "DELETE"

    def test_remove_missing_label_is_api_error(self, server_client, server_session):
        server_session.add("DELETE", "/rest/api/content/1/label/x", status=404)

        with pytest.raises(APIError) as exc_info:
            server_client.remove_label("1", "x")

        assert exc_info.value.status_code == 404

    def test_list_spaces(self, server_client, server_session):
        server_session.add("GET", "/rest/api/space", json_body=v1_list([
            {"id": 1, "key": "DEV", "name": "Development", "type": "global", "homepage": {"id": 10}},
        ]))

        spaces = server_client.list_spaces(limit=10)

        assert spaces[0].to_dict() == {
            "id": "1", "key": "DEV", "name": "Development", "type": "global",
            "status": "", "homepageId": "10",
        }
        assert server_session.calls[0].params == {"limit": "10"}


class TestSearch:
    """Test cases for CQL search, which always uses the v1 path family."""

    def test_search_cql_on_cloud(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/rest/api/search", json_body={
            "results": [{
                "title": "Home",
                "excerpt": "welcome",
                "url": "/x",
                "content": {"id": "1", "type": "page", "status": "current", "title": "Home",
                            "space": {"key": "DEV"}},
            }],
            "start": 0, "limit": 25, "size": 1, "totalSize": 1, "cqlQuery": "type=page",
        })

        result = cloud_client.search_cql("type=page", limit=25)

        assert cloud_session.calls[0].params == {"cql": "type=page", "limit": "25"}
        assert result.total_size == 1
        assert result.results[0].to_excerpt() == {
            "title": "Home", "excerpt": "welcome", "id": "1", "type": "page", "spaceKey": "DEV",
        }

    def test_search_content_cql(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content/search", json_body=v1_list([
            {"id": "1", "type": "page", "title": "Home", "space": {"key": "DEV"}},
        ]))

        results = server_client.search_content_cql("space=DEV", expand="space")

        assert results[0].space_key == "DEV"
        assert server_session.calls[0].params == {"cql": "space=DEV", "expand": "space"}


class TestUnexpectedResponseShapes:
    """Test cases for 2xx bodies that are valid JSON of the wrong shape."""

    @pytest.mark.parametrize("raw", [b"[]", b"null", b'"x"', b"42"])
    def test_cloud_page_not_an_object(self, cloud_client, cloud_session, raw):
        cloud_session.add("GET", "/api/v2/pages/1", raw=raw)

        with pytest.raises(ResponseParseError, match="parsing page: expected a JSON object"):
            cloud_client.get_page("1")

    def test_server_page_not_an_object(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content/1", raw=b"[]")

        with pytest.raises(ResponseParseError, match="got array"):
            server_client.get_page("1")

    def test_cloud_children_results_not_a_list(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/api/v2/pages/1/children", json_body={"results": {"id": "2"}})

        with pytest.raises(ResponseParseError, match="expected results array, got object"):
            cloud_client.get_children("1")

    def test_server_list_item_not_an_object(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content", json_body={"results": ["1"]})

        with pytest.raises(ResponseParseError, match="expected result object, got string"):
            server_client.list_pages("DEV")

    def test_null_results_is_empty(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content/1/child/page", json_body={"results": None})
        assert server_client.get_children("1") == []

    def test_search_body_not_an_object(self, cloud_client, cloud_session):
        cloud_session.add("GET", "/rest/api/search", raw=b"null")

        with pytest.raises(ResponseParseError, match="search results"):
            cloud_client.search_cql("type=page")

    def test_content_search_results_not_a_list(self, server_client, server_session):
        server_session.add("GET", "/rest/api/content/search", json_body={"results": "none"})

        with pytest.raises(ResponseParseError, match="content search"):
            server_client.search_content_cql("space=DEV")
