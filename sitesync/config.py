"""Configuration management for SiteSync.

Settings are resolved from environment variables first, then from the
JSON config file in ``~/.config/sitesync/config.json``, then from the
built-in defaults.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from .exceptions import SiteSyncConfigError
from .utils import DEFAULT_CONTAINER, DEFAULT_SOURCE_DIR, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"

# Setting name -> environment variable
ENV_VARS = {
    "connection_string": "AZURE_STORAGE_CONNECTION_STRING",
    "source_dir": "SITESYNC_SOURCE_DIR",
    "container": "SITESYNC_CONTAINER",
    "timeout": "SITESYNC_TIMEOUT",
}


class Config:
    """Layered configuration: environment, config file, defaults."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_dir: Directory holding the config file. Defaults to
                ``$SITESYNC_CONFIG_DIR`` or ``~/.config/sitesync``.
        """
        if config_dir is None:
            env_dir = os.environ.get("SITESYNC_CONFIG_DIR")
            if env_dir:
                config_dir = Path(env_dir)
            else:
                config_dir = Path.home() / ".config" / "sitesync"
        self.config_dir = config_dir

    def get_config_path(self) -> Path:
        """Return the path of the config file."""
        return self.config_dir / CONFIG_FILE_NAME

    def _load_file(self) -> dict[str, Any]:
        path = self.get_config_path()
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SiteSyncConfigError(f"Cannot read config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise SiteSyncConfigError(f"Config file {path} must contain an object")
        return data

    def get(self, name: str, default: Any = None) -> Any:
        """Look up a setting by name.

        Args:
            name: Setting name (e.g. "source_dir")
            default: Value returned when the setting is not set anywhere

        Returns:
            The setting value
        """
        env_var = ENV_VARS.get(name)
        if env_var:
            value = os.environ.get(env_var)
            if value:
                return value
        return self._load_file().get(name, default)

    @property
    def connection_string(self) -> Optional[str]:
        """Azure Storage connection string."""
        return self.get("connection_string")

    @property
    def source_dir(self) -> str:
        """Directory holding the generated static site."""
        return self.get("source_dir", DEFAULT_SOURCE_DIR)

    @property
    def container(self) -> str:
        """Name of the target container."""
        return self.get("container", DEFAULT_CONTAINER)

    @property
    def timeout(self) -> int:
        """Per-call storage timeout in seconds."""
        value = self.get("timeout", DEFAULT_TIMEOUT)
        try:
            timeout = int(value)
        except (TypeError, ValueError) as e:
            raise SiteSyncConfigError(f"Invalid timeout: {value!r}") from e
        if timeout <= 0:
            raise SiteSyncConfigError(f"Timeout must be positive, got {timeout}")
        return timeout

    def is_configured(self) -> bool:
        """Check whether a connection string is available."""
        return bool(self.connection_string)

    def save(self, **values: Any) -> Path:
        """Merge values into the config file.

        Args:
            **values: Settings to store; ``None`` values are ignored

        Returns:
            Path of the written config file
        """
        data = self._load_file()
        data.update({k: v for k, v in values.items() if v is not None})

        self.config_dir.mkdir(parents=True, exist_ok=True)
        path = self.get_config_path()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        # The connection string carries the account key
        path.chmod(0o600)
        logger.debug(f"Saved {len(data)} setting(s) to {path}")
        return path


config = Config()
