"""Confluence client library.

This package provides Python abstractions over the Confluence REST API for
both Cloud (v2 API) and Server/Data Center (v1 API) instances: an
authenticated retrying transport, one canonical operation surface over both
dialects, and CQL search.
"""

from .auth import AuthType, Authenticator, Credentials
from .client import ConfluenceClient
from .errors import (
    ConfluenceMgmtError,
    ConfluenceError,
    ClientConfigError,
    InvalidCredentialsError,
    APIError,
    APIUnreachableError,
    ResponseParseError,
    NotFoundError,
    PageNotFoundError,
    SpaceNotFoundError,
    LabelNotFoundError,
)
from .models import ClientConfig, InstanceType
from .transport import Transport

__all__ = [
    "AuthType",
    "Authenticator",
    "Credentials",
    "ConfluenceClient",
    "ClientConfig",
    "InstanceType",
    "Transport",
    "ConfluenceMgmtError",
    "ConfluenceError",
    "ClientConfigError",
    "InvalidCredentialsError",
    "APIError",
    "APIUnreachableError",
    "ResponseParseError",
    "NotFoundError",
    "PageNotFoundError",
    "SpaceNotFoundError",
    "LabelNotFoundError",
]
