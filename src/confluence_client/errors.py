"""Typed exception hierarchy for Confluence-related errors.

This module defines all custom exceptions raised by the Confluence client
library. Every exception inherits from ConfluenceError so callers can catch
client failures in one place, and each carries the context (status code,
endpoint, page ID, ...) needed to report it.
"""

from typing import Optional


class ConfluenceMgmtError(Exception):
    """Base exception for all confluence-mgmt errors.

    Use this to catch any application-level error from the tool.
    """
    pass


class ConfluenceError(ConfluenceMgmtError):
    """Base exception for all Confluence-related errors."""
    pass


class ClientConfigError(ConfluenceError):
    """Raised when a client is constructed with missing or invalid settings."""

    def __init__(self, message: str):
        super().__init__(f"confluence: {message}")


class InvalidCredentialsError(ConfluenceError):
    """Raised when API credentials are missing or incomplete."""

    def __init__(self, missing: list, endpoint: str = "unknown"):
        super().__init__(
            f"Missing credentials: {', '.join(missing)} (endpoint: {endpoint})"
        )
        self.missing = list(missing)
        self.endpoint = endpoint


class APIError(ConfluenceError):
    """Raised when the Confluence API answers with a non-2xx status.

    Both API dialects report errors with a different JSON shape; the
    transport folds either into a status code and a single message.
    """

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_retryable(self) -> bool:
        """True for rate limiting (429) and server errors (5xx)."""
        return self.status_code == 429 or self.status_code >= 500

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)


class APIUnreachableError(ConfluenceError):
    """Raised when the Confluence API cannot be reached at the network level."""

    def __init__(self, endpoint: str, reason: Optional[str] = None):
        message = "confluence: request failed"
        if reason:
            message += f": {reason}"
        message += (
            f"\n\nHint: could not reach {endpoint}; "
            f"check your network connection or corporate VPN"
        )
        super().__init__(message)
        self.endpoint = endpoint
        self.reason = reason


class ResponseParseError(ConfluenceError):
    """Raised when a successful response body is not the expected JSON."""

    def __init__(self, context: str, reason: str):
        super().__init__(f"parsing {context}: {reason}")
        self.context = context
        self.reason = reason


class NotFoundError(ConfluenceError):
    """Base for logical absence (page, space or label), not transport failure."""
    pass


class PageNotFoundError(NotFoundError):
    """Raised when a requested page does not exist."""

    def __init__(
        self,
        page_id: Optional[str] = None,
        title: Optional[str] = None,
        space_key: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        if title is not None:
            message = f'page "{title}" not found in space {space_key}'
        else:
            message = f"Page {page_id} not found"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.page_id = page_id
        self.title = title
        self.space_key = space_key


class SpaceNotFoundError(NotFoundError):
    """Raised when a space key does not resolve to a space."""

    def __init__(self, space_key: str):
        super().__init__(f'space "{space_key}" not found')
        self.space_key = space_key


class LabelNotFoundError(NotFoundError):
    """Raised when removing a label the page does not carry."""

    def __init__(self, label: str, page_id: str):
        super().__init__(f'label "{label}" not found on page {page_id}')
        self.label = label
        self.page_id = page_id
