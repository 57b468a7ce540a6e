"""Configuration management for dataverse-client.

Loads settings from YAML configuration file with sensible defaults.
Supports environment variable overrides for sensitive settings.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

# Module logger
logger = logging.getLogger("dataverse_client.config")


# Default configuration values
DEFAULT_CONFIG = {
    "api": {
        "base_url": "https://demo.dataverse.org/api",
        "timeout": 60,
        "token": None,  # Prefer DATAVERSE_API_TOKEN over storing it in a file
    },
    "output": {
        "json_indent": 2,
    },
}


class Config:
    """Configuration manager for dataverse-client."""

    def __init__(self, config_file: Path | None = None):
        """Initialize configuration.

        Args:
            config_file: Path to YAML config file (optional)
        """
        self._config = copy.deepcopy(DEFAULT_CONFIG)

        if config_file and config_file.exists():
            self._load_from_file(config_file)

        # Apply environment variable overrides
        self._apply_env_overrides()

    def _load_from_file(self, config_file: Path) -> None:
        """Load configuration from YAML file.

        Args:
            config_file: Path to YAML config file
        """
        try:
            with open(config_file, 'r') as f:
                user_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {config_file}: {e}")
            return

        if not user_config:
            return
        if not isinstance(user_config, dict):
            logger.warning(f"Ignoring config {config_file}: top level is not a mapping")
            return
        self._merge_config(user_config)

    def _merge_config(self, user_config: dict) -> None:
        """Merge user configuration with defaults.

        Sections that are not mappings are skipped.

        Args:
            user_config: User-provided configuration dict
        """
        for section, values in user_config.items():
            if not isinstance(values, dict):
                logger.warning(f"Ignoring config section '{section}': not a mapping")
                continue
            if section in self._config:
                self._config[section].update(values)
            else:
                self._config[section] = values

        # Validate security-sensitive values after merge
        self._validate_config()

    def _validate_config(self) -> None:
        """Validate security-sensitive configuration values."""
        # api.base_url must be HTTPS, the API key travels in a header
        base_url = self._config.get("api", {}).get("base_url", "")
        if not isinstance(base_url, str) or not base_url.startswith("https://"):
            logger.warning(f"Rejecting non-HTTPS api.base_url: {base_url}")
            self._config["api"]["base_url"] = DEFAULT_CONFIG["api"]["base_url"]

        timeout = self._config.get("api", {}).get("timeout")
        if not isinstance(timeout, (int, float)) or timeout <= 0:
            logger.warning(f"Rejecting invalid api.timeout: {timeout}")
            self._config["api"]["timeout"] = DEFAULT_CONFIG["api"]["timeout"]

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides.

        Supports:
        - DATAVERSE_API_BASE_URL
        - DATAVERSE_API_TIMEOUT
        - DATAVERSE_API_TOKEN
        """
        if base_url := os.getenv("DATAVERSE_API_BASE_URL"):
            self._config["api"]["base_url"] = base_url

        if timeout := os.getenv("DATAVERSE_API_TIMEOUT"):
            try:
                self._config["api"]["timeout"] = int(timeout)
            except ValueError:
                logger.warning(f"Ignoring non-integer DATAVERSE_API_TIMEOUT: {timeout}")

        if token := os.getenv("DATAVERSE_API_TOKEN"):
            self._config["api"]["token"] = token

    def get(self, section: str, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            section: Configuration section (e.g., 'api', 'output')
            key: Configuration key within section
            default: Default value if not found

        Returns:
            Configuration value or default
        """
        return self._config.get(section, {}).get(key, default)

    @property
    def api_base_url(self) -> str:
        """Get Dataverse API base URL (ending in /api)."""
        return self.get("api", "base_url").rstrip("/")

    @property
    def api_timeout(self) -> int:
        """Get API request timeout in seconds."""
        return self.get("api", "timeout")

    @property
    def api_token(self) -> str | None:
        """Get the API token, if configured."""
        return self.get("api", "token")

    @property
    def json_indent(self) -> int:
        """Get JSON output indentation."""
        return self.get("output", "json_indent")

    def dataverse_uri(self, alias: str) -> str:
        """Build the URI of a dataverse from its alias."""
        return f"{self.api_base_url}/dataverses/{alias}"

    def dataset_uri(self, dataset_id: str | int) -> str:
        """Build the URI of a dataset from its numeric id."""
        return f"{self.api_base_url}/datasets/{dataset_id}"


# Global default config instance
_default_config = None


def get_config(config_file: Path | None = None) -> Config:
    """Get configuration instance.

    Args:
        config_file: Optional path to config file

    Returns:
        Config instance
    """
    global _default_config

    if config_file:
        _default_config = Config(config_file)
        return _default_config

    if _default_config is None:
        # Try to load from default locations
        default_paths = [
            Path.cwd() / ".dataverse-client.yaml",
            Path.home() / ".dataverse-client.yaml",
            Path("/etc/dataverse-client/config.yaml"),
        ]

        for path in default_paths:
            if path.exists():
                _default_config = Config(path)
                break

        if _default_config is None:
            _default_config = Config()

    return _default_config


def reset_config() -> None:
    """Forget the cached configuration instance."""
    global _default_config
    _default_config = None
