"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError so the command layer can catch them
in one place and map them to exit codes.
"""

from typing import Optional

from src.confluence_client.errors import ConfluenceMgmtError


class CLIError(ConfluenceMgmtError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigError(CLIError):
    """Raised when the configuration file is invalid or cannot be written."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Config error in field '{config_field}': {message}"
        else:
            full_message = f"Config error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class NotConfiguredError(CLIError):
    """Raised when a command needs an instance URL and none is configured."""

    def __init__(self):
        super().__init__(
            "confluence-mgmt is not configured\n"
            "Run 'confluence-mgmt config set instance <url>' or set CONFLUENCE_URL"
        )
