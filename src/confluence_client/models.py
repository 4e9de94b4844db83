"""Configuration models for the Confluence client."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .auth import AuthType


class InstanceType(str, Enum):
    """Confluence deployment type; selects the API dialect."""
    CLOUD = "cloud"    # *.atlassian.net, modern v2 API
    SERVER = "server"  # Server / Data Center, legacy v1 API


@dataclass
class ClientConfig:
    """Settings needed to connect to a Confluence instance.

    Attributes:
        base_url: e.g. "https://company.atlassian.net/wiki" (Cloud) or
            "https://confluence.company.com" (Server/DC)
        token: API token (basic auth) or personal access token (bearer auth)
        email: Account email, required for basic auth
        instance_type: CLOUD or SERVER
        auth_type: BASIC or BEARER; inferred from `email` when None
        tls_skip_verify: Disable certificate validation (corporate proxies)
        timeout: Per-request timeout in seconds

    Example:
        >>> config = ClientConfig(
        ...     base_url="https://company.atlassian.net/wiki",
        ...     token="api-token",
        ...     email="me@company.com",
        ... )
    """
    base_url: str
    token: str
    email: Optional[str] = None
    instance_type: Union[InstanceType, str] = InstanceType.CLOUD
    auth_type: Optional[Union[AuthType, str]] = None
    tls_skip_verify: bool = False
    timeout: int = 30
