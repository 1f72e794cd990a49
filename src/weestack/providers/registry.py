"""Provider registry for managing resource providers."""

import logging
from typing import Dict, Optional, Type

from weestack.providers.base import BaseProvider
from weestack.providers.artifact import ArtifactProvider
from weestack.providers.disk import DiskProvider
from weestack.providers.instance import InstanceProvider


logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry for managing providers.

    Built once per process and shared read-only by every machine task,
    so the parsed preseed template and the resolved host directories
    are set up exactly once.
    """

    def __init__(self):
        """Initialize provider registry."""
        self._providers: Dict[str, BaseProvider] = {}
        self._provider_classes: Dict[str, Type[BaseProvider]] = {
            "artifact": ArtifactProvider,
            "disk": DiskProvider,
            "instance": InstanceProvider,
        }

    async def initialize(self, config):
        """Initialize all providers with two-pass injection.

        Providers are initialized in declaration order, so the disk
        provider exists before the instance provider looks it up.
        """
        for name, provider_class in self._provider_classes.items():
            self._providers[name] = provider_class()

        for name, provider in self._providers.items():
            try:
                await provider.initialize(config, self)
            except Exception as e:
                logger.error(f"Failed to initialize {name} provider: {e}")
                raise
            logger.debug(f"Initialized {name} provider")

    def get_provider(self, name: str) -> Optional[BaseProvider]:
        """Get a provider by name."""
        return self._providers.get(name)

    @property
    def artifact(self) -> ArtifactProvider:
        """Preseed provider, for the first step of every machine."""
        return self._providers["artifact"]

    @property
    def disk(self) -> DiskProvider:
        """Disk image provider."""
        return self._providers["disk"]

    @property
    def instance(self) -> InstanceProvider:
        """virt-install and virsh provider."""
        return self._providers["instance"]
