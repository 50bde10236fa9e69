# src/event_dispatch/configs/config.py
"""
YAML registry of Bulker destinations.

Example file:

    destinations:
      warehouse:
        bulkerEndpoint: http://bulker:3042
        authToken: secret
        dataLayout: segment
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from event_dispatch.destination.bulker import BulkerDestinationConfig
from event_dispatch.errors import ConfigurationError

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("bulkerEndpoint", "authToken")


class DestinationRegistry:
    """
    Destinations declared in a YAML file, keyed by destination id.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the registry.

        Args:
            config_path: Path to the destinations YAML file
        """
        self.config_path = Path(config_path)
        self._config: dict[str, Any] | None = None

    @property
    def config(self) -> dict[str, Any]:
        """Load and cache configuration."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")

        with open(self.config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict) or not isinstance(data.get("destinations", {}), dict):
            raise ConfigurationError(
                f"Invalid destinations config at {self.config_path}: "
                "expected a 'destinations' mapping"
            )
        return data

    def list_destinations(self) -> list[str]:
        """List configured destination ids."""
        return list(self.config.get("destinations", {}).keys())

    def get_destination_config(self, destination_id: str) -> BulkerDestinationConfig:
        """
        Build the config of one destination.

        Args:
            destination_id: Key under ``destinations``

        Returns:
            BulkerDestinationConfig

        Raises:
            ConfigurationError: If the destination is unknown or incomplete
        """
        destinations = self.config.get("destinations", {})
        props = destinations.get(destination_id)
        if not isinstance(props, dict):
            raise ConfigurationError(
                f"Destination '{destination_id}' not found in {self.config_path}"
            )

        missing = [key for key in REQUIRED_KEYS if not props.get(key)]
        if missing:
            raise ConfigurationError(
                f"Destination '{destination_id}' is missing: {', '.join(missing)}"
            )

        logger.debug(f"Loaded destination '{destination_id}' from {self.config_path}")
        return BulkerDestinationConfig.from_props(
            {"destinationId": destination_id, **props}
        )
