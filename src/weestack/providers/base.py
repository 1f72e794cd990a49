"""Base provider interface."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from weestack.models.batch import BatchConfig
from weestack.models.machine import MachineSpec


class ProviderStatus(Enum):
    """Provider resource status."""
    PRESENT = "present"
    ABSENT = "absent"


class BaseProvider(ABC):
    """Base provider interface that all providers must implement.

    Each provider wraps one kind of external resource of a machine and
    raises the matching MachineError when it cannot be made present.
    Providers that tear resources down also define absent.
    """

    @abstractmethod
    async def initialize(self, config: Any, registry: Any) -> None:
        """Initialize the provider with configuration."""
        pass

    @abstractmethod
    async def present(self, machine: MachineSpec, batch: BatchConfig) -> None:
        """Ensure the machine's resource is present."""
        pass
