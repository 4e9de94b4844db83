"""Builds a ConfluenceClient from the user config and the environment."""

import logging
from typing import Optional

from src.confluence_client.auth import Authenticator, AuthType
from src.confluence_client.client import ConfluenceClient
from src.confluence_client.models import ClientConfig, InstanceType

from .errors import NotConfiguredError
from .models import AppConfig

logger = logging.getLogger(__name__)


def resolve_auth_type(config: AppConfig) -> AuthType:
    """Configured auth type, else basic for Cloud and bearer for Server/DC."""
    if config.auth_type:
        return AuthType(config.auth_type)
    if config.instance_type == InstanceType.SERVER.value:
        return AuthType.BEARER
    return AuthType.BASIC


def build_client(config: AppConfig, authenticator: Optional[Authenticator] = None) -> ConfluenceClient:
    """Create a client for the configured instance.

    Args:
        config: Loaded user configuration
        authenticator: Credential source (environment / .env when None)

    Returns:
        ConfluenceClient ready for use

    Raises:
        InvalidCredentialsError: If a required credential is missing
        NotConfiguredError: If no instance URL is known
    """
    auth_type = resolve_auth_type(config)
    authenticator = authenticator or Authenticator()
    creds = authenticator.get_credentials(auth_type, fallback_url=config.instance_url)
    if not creds.url:
        raise NotConfiguredError()

    logger.debug(f"Connecting to {creds.url} ({config.instance_type}, {auth_type.value} auth)")
    return ConfluenceClient(ClientConfig(
        base_url=creds.url,
        token=creds.api_token,
        email=creds.user if auth_type == AuthType.BASIC else None,
        instance_type=InstanceType(config.instance_type),
        auth_type=auth_type.value,
        tls_skip_verify=config.tls_skip_verify,
    ))
