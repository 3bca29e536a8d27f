"""Configuration provider port.

Defines the interface for loading and accessing application configuration.
"""

from pathlib import Path
from typing import Protocol

from groundwork.domain.config import GroundworkConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, config_path: Path) -> GroundworkConfig:
        """Load configuration from a groundwork.toml file.

        Args:
            config_path: Path to groundwork.toml

        Returns:
            GroundworkConfig instance with loaded or default values

        Note:
            A missing file gives defaults. An invalid file either falls
            back to defaults or raises ValueError, depending on how the
            implementation was configured.
        """
        ...
