"""Data models for CLI operations."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): API errors, not-found, config problems
    - USAGE_ERROR (2): Malformed query or missing/invalid arguments
    - AUTH_ERROR (3): Missing credentials or a 401/403 response
    - NETWORK_ERROR (4): Instance unreachable

    Example:
        >>> raise typer.Exit(ExitCode.USAGE_ERROR)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4


@dataclass
class AppConfig:
    """User configuration stored in ~/.config/confluence-mgmt/config.yaml.

    Attributes:
        instance_url: Confluence base URL (e.g. https://company.atlassian.net/wiki)
        instance_type: "cloud" or "server"
        auth_type: "basic" or "bearer"; inferred from instance_type when unset
        active_space: Space key used when a command does not name one
        tls_skip_verify: Disable TLS certificate verification
    """
    instance_url: Optional[str] = None
    instance_type: str = "cloud"
    auth_type: Optional[str] = None
    active_space: Optional[str] = None
    tls_skip_verify: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'instance_url': self.instance_url,
            'instance_type': self.instance_type,
            'auth_type': self.auth_type,
            'active_space': self.active_space,
            'tls_skip_verify': self.tls_skip_verify,
        }
