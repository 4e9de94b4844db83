"""Unit tests for confluence_client.errors module."""

from src.confluence_client.errors import (
    APIError,
    APIUnreachableError,
    ClientConfigError,
    ConfluenceError,
    ConfluenceMgmtError,
    LabelNotFoundError,
    NotFoundError,
    PageNotFoundError,
    ResponseParseError,
    SpaceNotFoundError,
)


class TestHierarchy:
    """Test cases for the exception hierarchy."""

    def test_all_client_errors_share_a_base(self):
        for error in (
            ClientConfigError("x"),
            APIError(500, "x"),
            APIUnreachableError("https://x"),
            ResponseParseError("page", "x"),
            PageNotFoundError("1"),
        ):
            assert isinstance(error, ConfluenceError)
            assert isinstance(error, ConfluenceMgmtError)

    def test_not_found_family(self):
        assert isinstance(SpaceNotFoundError("DEV"), NotFoundError)
        assert isinstance(LabelNotFoundError("x", "1"), NotFoundError)


class TestMessages:
    """Test cases for error messages and attributes."""

    def test_api_error_flags(self):
        assert APIError(401, "x").is_auth_error is True
        assert APIError(403, "x").is_auth_error is True
        assert APIError(404, "x").is_auth_error is False
        assert APIError(429, "x").is_retryable is True
        assert APIError(409, "x").is_retryable is False

    def test_page_not_found_by_id(self):
        assert str(PageNotFoundError("123")) == "Page 123 not found"

    def test_page_not_found_by_title(self):
        error = PageNotFoundError(title="Home", space_key="DEV")
        assert str(error) == 'page "Home" not found in space DEV'

    def test_page_not_found_with_reason(self):
        assert str(PageNotFoundError("1", reason="gone")) == "Page 1 not found (gone)"

    def test_unreachable_hint(self):
        error = APIUnreachableError("https://c.example.com", "connection refused")
        assert str(error).startswith("confluence: request failed: connection refused")
        assert "could not reach https://c.example.com" in str(error)

    def test_client_config_prefix(self):
        assert str(ClientConfigError("token is required")) == "confluence: token is required"
