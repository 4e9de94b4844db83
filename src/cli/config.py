"""User configuration loading and saving.

The configuration lives in a single YAML file. A missing or empty file is
not an error: it yields the defaults. Every setter is a read-modify-write of
the whole file.
"""

import os
from typing import Any, Dict, Optional

import yaml

from src.confluence_client.auth import AuthType
from src.confluence_client.models import InstanceType

from .errors import ConfigError
from .models import AppConfig

_STRING_FIELDS = ('instance_url', 'instance_type', 'auth_type', 'active_space')


class ConfigManager:
    """Handles config file loading, validation, and saving.

    Config file structure:
        instance_url: https://company.atlassian.net/wiki
        instance_type: cloud
        auth_type: basic
        active_space: DEV
        tls_skip_verify: false

    Example:
        >>> manager = ConfigManager()
        >>> manager.set_active_space("DEV")
        >>> manager.load().active_space
        'DEV'
    """

    DEFAULT_CONFIG_DIR = os.path.join('~', '.config', 'confluence-mgmt')
    DEFAULT_CONFIG_FILE = 'config.yaml'

    def __init__(self, config_path: Optional[str] = None):
        if config_path is None:
            config_path = os.path.join(
                os.path.expanduser(self.DEFAULT_CONFIG_DIR), self.DEFAULT_CONFIG_FILE
            )
        self.config_path = config_path

    def exists(self) -> bool:
        return os.path.exists(self.config_path)

    def load(self) -> AppConfig:
        """Load and validate the config file.

        Returns:
            AppConfig (defaults when the file is missing or empty)

        Raises:
            ConfigError: If the file cannot be read or is malformed
        """
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            return AppConfig()
        except OSError as e:
            raise ConfigError(f"cannot read {self.config_path}: {e}")

        if not content.strip():
            return AppConfig()

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if data is None:
            return AppConfig()

        if not isinstance(data, dict):
            raise ConfigError(
                f"Config must be a YAML dictionary, got {type(data).__name__}"
            )

        return self._parse_config(data)

    def save(self, config: AppConfig) -> None:
        """Write the config file, creating its directory if needed.

        Raises:
            ConfigError: If the file cannot be written
        """
        yaml_str = yaml.safe_dump(
            config.to_dict(),
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(self.config_path)
        try:
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except OSError as e:
            raise ConfigError(f"cannot write {self.config_path}: {e}")

    # --- Setters ---

    def set_instance_url(self, instance_url: str) -> None:
        config = self.load()
        config.instance_url = instance_url.rstrip('/')
        self.save(config)

    def set_instance_type(self, instance_type: str) -> None:
        _validate_choice(instance_type, InstanceType, 'instance_type')
        config = self.load()
        config.instance_type = instance_type
        self.save(config)

    def set_auth_type(self, auth_type: str) -> None:
        _validate_choice(auth_type, AuthType, 'auth_type')
        config = self.load()
        config.auth_type = auth_type
        self.save(config)

    def set_active_space(self, space_key: str) -> None:
        config = self.load()
        config.active_space = space_key
        self.save(config)

    def set_tls_skip_verify(self, skip: bool) -> None:
        config = self.load()
        config.tls_skip_verify = skip
        self.save(config)

    @classmethod
    def _parse_config(cls, data: Dict[str, Any]) -> AppConfig:
        """Validate field types and build an AppConfig.

        Raises:
            ConfigError: If a field has the wrong type or an invalid value
        """
        for name in _STRING_FIELDS:
            value = data.get(name)
            if value is not None and not isinstance(value, str):
                raise ConfigError(
                    f"must be a string, got {type(value).__name__}",
                    name
                )

        tls_skip_verify = data.get('tls_skip_verify', False)
        if tls_skip_verify is None:
            tls_skip_verify = False
        if not isinstance(tls_skip_verify, bool):
            raise ConfigError(
                f"must be a boolean, got {type(tls_skip_verify).__name__}",
                'tls_skip_verify'
            )

        instance_type = data.get('instance_type') or InstanceType.CLOUD.value
        _validate_choice(instance_type, InstanceType, 'instance_type')

        auth_type = data.get('auth_type') or None
        if auth_type is not None:
            _validate_choice(auth_type, AuthType, 'auth_type')

        return AppConfig(
            instance_url=data.get('instance_url') or None,
            instance_type=instance_type,
            auth_type=auth_type,
            active_space=data.get('active_space') or None,
            tls_skip_verify=tls_skip_verify,
        )


def _validate_choice(value: str, enum_cls, config_field: str) -> None:
    allowed = [member.value for member in enum_cls]
    if value not in allowed:
        raise ConfigError(
            f"invalid value {value!r} (expected one of: {', '.join(allowed)})",
            config_field
        )
