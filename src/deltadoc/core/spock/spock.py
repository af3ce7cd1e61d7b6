"""Spock - Configuration Manager for deltadoc.

Spock merges configuration from defaults, an explicit dict, a JSON file and
environment variables into one read-mostly structure.

Configuration hierarchy:
- deltadoc: Core settings
  - mongo_uri: Connection string used to build the default fetcher
  - database: Database name used to build the default fetcher
  - discover_capabilities: Load capabilities from entry points at startup
- capabilities: Settings for capability providers
  - <provider>: Settings read by that provider's operations

Environment variables follow the naming convention:
DELTADOC__<SECTION>__<KEY> for nested values
Example: DELTADOC__DELTADOC__DATABASE="blog"
         DELTADOC__CAPABILITIES__AUDIT__ENABLED=true
"""

import json
import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class Spock:
    """Configuration manager for deltadoc instances.

    Each DeltaDoc instance has its own Spock instance to maintain
    isolated configuration state.

    Famous quote from Spock in Star Trek:
    "Logic is the beginning of wisdom, not the end."
    """

    ENV_PREFIX = "DELTADOC"
    ENV_SEPARATOR = "__"
    SECTIONS = ("deltadoc", "capabilities")

    def __init__(self, config_path: str | None = None):
        """Initialize Spock configuration manager.

        Args:
            config_path: Path to JSON configuration file. If None, only the
                        given dict and environment variables are used.
        """
        self._config_path = config_path
        self._config = self.default_config()
        self._base_config: dict[str, Any] | None = None
        self._loaded = False
        logger.debug("Spock instance created with config_path=%s", config_path)

    @staticmethod
    def default_config() -> dict[str, Any]:
        """Return a new default config dict each time."""
        return {"deltadoc": {}, "capabilities": {}}

    def load(self, config: dict[str, Any] | None = None) -> None:
        """Load configuration from a dict, a JSON file and the environment.

        Args:
            config: Optional config dict used as base. Remembered for reload().

        Priority (highest to lowest):
        1. Environment variables
        2. JSON file
        3. Provided config (if any)
        4. Default values
        """
        if self._loaded:
            logger.debug("Configuration already loaded, skipping reload")
            return

        if config is not None:
            self._base_config = deepcopy(config)

        self._config = self.default_config()

        if self._base_config is not None:
            self._merge_sections(self._base_config, source="config")

        if self._config_path:
            self._load_from_json()

        self._load_from_env()

        self._loaded = True
        logger.info("Configuration loaded successfully")
        logger.debug(
            "Final config structure: deltadoc keys=%s, capabilities=%s",
            list(self._config["deltadoc"].keys()),
            list(self._config["capabilities"].keys()),
        )

    def _merge_sections(self, data: Any, *, source: str) -> None:
        """Validate a {section: {...}} mapping and merge it over the current config."""
        if not isinstance(data, dict):
            raise ValueError(f"Configuration from {source} must be an object")

        for section in self.SECTIONS:
            if section not in data:
                continue
            if not isinstance(data[section], dict):
                raise ValueError(f"'{section}' section from {source} must be an object")
            self._config[section].update(deepcopy(data[section]))

    def _load_from_json(self) -> None:
        """Load configuration from the JSON file."""
        config_file = Path(self._config_path)
        if not config_file.exists():
            logger.warning("Config file not found: %s", self._config_path)
            return

        try:
            with open(config_file, encoding="utf-8") as f:
                json_config = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Invalid JSON in config file %s: %s", self._config_path, e)
            raise ValueError(f"Invalid JSON configuration file: {e}") from e

        self._merge_sections(json_config, source="JSON file")
        logger.info("Loaded configuration from JSON: %s", self._config_path)

    def _load_from_env(self) -> None:
        """Load configuration from environment variables.

        Environment variables follow the pattern:
        DELTADOC__<SECTION>__<KEY>__<SUBKEY>...

        Examples:
        - DELTADOC__DELTADOC__MONGO_URI=mongodb://localhost:27017
        - DELTADOC__CAPABILITIES__AUDIT__COLLECTION=audit_log
        """
        prefix = f"{self.ENV_PREFIX}{self.ENV_SEPARATOR}"

        for env_key, env_value in os.environ.items():
            if not env_key.startswith(prefix):
                continue

            key_path = [part.lower() for part in env_key[len(prefix) :].split(self.ENV_SEPARATOR)]

            if len(key_path) < 2 or not all(key_path):
                logger.warning("Invalid env var format: %s", env_key)
                continue

            section = key_path[0]
            if section not in self.SECTIONS:
                logger.warning("Invalid section in env var %s: %s", env_key, section)
                continue

            if section == "capabilities" and len(key_path) < 3:
                logger.warning("Capability env var too short: %s", env_key)
                continue

            target = self._config[section]
            for key in key_path[1:-1]:
                if not isinstance(target.get(key), dict):
                    target[key] = {}
                target = target[key]
            target[key_path[-1]] = self._parse_env_value(env_value)
            logger.debug("Set from env: %s", env_key)

    @staticmethod
    def _parse_env_value(value: str) -> Any:
        """Parse as JSON when possible (numbers, booleans, null, arrays), else keep the string."""
        try:
            return json.loads(value)
        except (json.JSONDecodeError, ValueError):
            return value

    def get_deltadoc_config(self, key: str | None = None, default: Any = None) -> Any:
        """Get core configuration.

        Args:
            key: Specific configuration key. If None, returns the whole section.
            default: Default value if key not found.
        """
        if not self._loaded:
            self.load()

        if key is None:
            return deepcopy(self._config["deltadoc"])

        return self._config["deltadoc"].get(key, default)

    def get_capability_config(
        self, provider: str, key: str | None = None, default: Any = None
    ) -> Any:
        """Get the configuration of a capability provider.

        Args:
            provider: Provider identifier (usually the capability name, lowercased).
            key: Specific configuration key. If None, returns the provider section.
            default: Default value if key not found.
        """
        if not self._loaded:
            self.load()

        provider_config = self._config["capabilities"].get(provider, {})

        if key is None:
            return deepcopy(provider_config)

        return provider_config.get(key, default)

    def set_deltadoc_config(self, key: str, value: Any) -> None:
        """Set core configuration (runtime only, not persisted)."""
        if not self._loaded:
            self.load()

        self._config["deltadoc"][key] = value
        logger.debug("Set deltadoc config: %s = %s", key, value)

    def set_capability_config(self, provider: str, key: str, value: Any) -> None:
        """Set capability provider configuration (runtime only, not persisted)."""
        if not self._loaded:
            self.load()

        self._config["capabilities"].setdefault(provider, {})[key] = value
        logger.debug("Set capability config: %s.%s = %s", provider, key, value)

    def get_all_config(self) -> dict[str, Any]:
        """Deep copy of the entire configuration."""
        if not self._loaded:
            self.load()

        return deepcopy(self._config)

    def reload(self) -> None:
        """Reload configuration from its sources, dropping runtime changes."""
        self._loaded = False
        self.load()
        logger.info("Configuration reloaded")

    @property
    def config_path(self) -> str | None:
        """Get the configuration file path."""
        return self._config_path

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._loaded


ConfigManager = Spock
