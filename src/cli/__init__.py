"""Command-line interface for Confluence queries and page management.

This package provides the `confluence-mgmt` CLI tool: query-language reads,
page/label/space operations, and a YAML user configuration.
"""

__version__ = "0.1.0"

from .config import ConfigManager
from .errors import CLIError, ConfigError, NotConfiguredError
from .models import AppConfig, ExitCode
from .output import OutputHandler

__all__ = [
    '__version__',
    'ConfigManager',
    'CLIError',
    'ConfigError',
    'NotConfiguredError',
    'AppConfig',
    'ExitCode',
    'OutputHandler',
]
