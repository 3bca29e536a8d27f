"""TOML-based configuration provider.

Loads configuration from groundwork.toml.

Config loading priority (highest to lowest):
1. The given groundwork.toml
2. Built-in defaults (lenient mode only)
"""

import logging
from pathlib import Path

from groundwork.domain.config import GroundworkConfig
from groundwork.shared.config_io import load_config

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    By default missing or invalid configs fall back to defaults with a
    warning. With strict=True an invalid file raises instead, so callers
    that must not run on defaults see the real problem.
    """

    def __init__(self, *, strict: bool = False) -> None:
        """Initialize the provider.

        Args:
            strict: Raise ValueError for invalid config instead of falling
                back to defaults.
        """
        self._strict = strict

    def load(self, config_path: Path) -> GroundworkConfig:
        """Load configuration, falling back to defaults unless strict.

        Args:
            config_path: Path to groundwork.toml

        Returns:
            GroundworkConfig instance with loaded values or defaults

        Raises:
            ValueError: In strict mode, if the file is malformed or has
                invalid values.
        """
        if not config_path.exists():
            logger.debug("No config at %s, using defaults", config_path)
            return GroundworkConfig.default()

        try:
            config = load_config(config_path)
        except (FileNotFoundError, ValueError, TypeError) as e:
            if self._strict:
                raise ValueError(f"Invalid config file {config_path}: {e}") from e
            logger.warning(
                "Failed to load config at %s: %s. Using default configuration.",
                config_path,
                e,
            )
            return GroundworkConfig.default()

        logger.debug("Loaded config from %s", config_path)
        return config
