"""Authentication module for Confluence credentials and auth headers.

This module loads Confluence credentials from environment variables using
python-dotenv, validates that the ones required by the chosen auth scheme
are present, and builds the Authorization header value for either scheme.
"""

import base64
import os
from enum import Enum
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import ClientConfigError, InvalidCredentialsError


class AuthType(str, Enum):
    """Authentication scheme sent on every request."""
    BASIC = "basic"    # Cloud: email + API token -> Basic base64(email:token)
    BEARER = "bearer"  # Server/DC: personal access token -> Bearer <token>


class Credentials(NamedTuple):
    """Confluence API credentials."""
    url: str
    user: Optional[str]
    api_token: str


def build_auth_header(auth_type: AuthType, token: str, email: Optional[str] = None) -> str:
    """Build the Authorization header value for the given scheme.

    Args:
        auth_type: BASIC or BEARER
        token: API token (basic) or personal access token (bearer)
        email: Account email, required for basic auth

    Returns:
        "Basic <base64(email:token)>" or "Bearer <token>"

    Raises:
        ClientConfigError: If basic auth is requested without an email
    """
    if auth_type == AuthType.BEARER:
        return f"Bearer {token}"
    if not email:
        raise ClientConfigError("email is required for basic auth")
    encoded = base64.b64encode(f"{email}:{token}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


class Authenticator:
    """Loads and validates Confluence credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Environment variables:
        CONFLUENCE_URL: Instance URL (e.g., https://yourinstance.atlassian.net/wiki)
        CONFLUENCE_USER: Account email address (required for basic auth only)
        CONFLUENCE_API_TOKEN: API token or personal access token

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials(AuthType.BASIC)
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(self):
        """Initialize the authenticator by loading environment variables from .env file."""
        load_dotenv()

    def get_credentials(
        self,
        auth_type: Optional[AuthType] = None,
        fallback_url: Optional[str] = None,
    ) -> Credentials:
        """Get Confluence credentials from environment variables.

        Args:
            auth_type: Scheme the credentials are for. CONFLUENCE_USER is only
                required for BASIC.
            fallback_url: Instance URL to use when CONFLUENCE_URL is unset
                (typically the config file's instance_url)

        Returns:
            Credentials: A named tuple containing url, user, and api_token

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        url = os.getenv('CONFLUENCE_URL') or fallback_url
        user = os.getenv('CONFLUENCE_USER')
        api_token = os.getenv('CONFLUENCE_API_TOKEN')

        missing = []
        if not url:
            missing.append('CONFLUENCE_URL')
        if auth_type == AuthType.BASIC and not user:
            missing.append('CONFLUENCE_USER')
        if not api_token:
            missing.append('CONFLUENCE_API_TOKEN')

        if missing:
            raise InvalidCredentialsError(missing, endpoint=url or "unknown")

        # Type checker: url and api_token are guaranteed to be str here
        return Credentials(url=url, user=user or None, api_token=api_token)  # type: ignore[arg-type]
