"""Configuration loading."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ruamel.yaml import YAML
from pydantic import ValidationError

from weestack.models.batch import BatchConfig
from weestack.models.config import WeeStackConfig


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "WEESTACK_CONFIG"


class ConfigManager:
    """Loads settings, and optionally a batch, from one YAML file.

    The file has a 'weestack' section for WeeStackConfig and a 'batch'
    section for BatchConfig; both are optional. Without a file, the
    defaults are used.
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """Initialize configuration manager."""
        self.config_file = Path(config_file) if config_file else None
        self.yaml = YAML()
        self.yaml.preserve_quotes = True
        self.config: Optional[WeeStackConfig] = None
        self.batch: Optional[BatchConfig] = None

    @classmethod
    def from_environment(cls) -> "ConfigManager":
        """Use the file named by WEESTACK_CONFIG, if set."""
        return cls(os.environ.get(CONFIG_ENV_VAR))

    async def load(self):
        """Load the configuration file."""
        if self.config_file is None:
            logger.debug("No configuration file, using defaults")
            self.config = WeeStackConfig()
            self.batch = None
            return

        logger.info(f"Loading configuration from {self.config_file}")
        if not self.config_file.exists():
            raise FileNotFoundError(f"Config not found: {self.config_file}")

        data = await self._read_yaml(self.config_file) or {}
        try:
            self.config = WeeStackConfig(**(data.get("weestack") or {}))
            batch_data = data.get("batch")
            self.batch = BatchConfig(**batch_data) if batch_data else None
        except ValidationError as e:
            logger.error(f"Invalid config: {e}")
            raise

        logger.debug(f"Loaded config: {self.config_file}")

    async def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse YAML file off the event loop."""
        return await asyncio.to_thread(self._load_yaml_file, file_path)

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        return self.yaml.load(file_path.read_text())
