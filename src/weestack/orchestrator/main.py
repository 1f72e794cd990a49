"""Creating and deleting batches of machines."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from weestack.errors import ConfigValidationError
from weestack.models.batch import BatchConfig, validate_batch
from weestack.models.config import WeeStackConfig
from weestack.models.machine import MachineSpec
from weestack.orchestrator.batch import TaskOutcome, run_batch
from weestack.orchestrator.config import ConfigManager
from weestack.orchestrator.provisioner import MachineProvisioner
from weestack.providers import ProviderRegistry
from weestack.utils.logging import setup_logging


logger = logging.getLogger(__name__)


class WeeStack:
    """Creates and deletes machines on the local host."""

    def __init__(self, config: Optional[WeeStackConfig] = None):
        """Initialize weestack."""
        self.config = config or WeeStackConfig()
        self.provider_registry: Optional[ProviderRegistry] = None
        self.provisioner: Optional[MachineProvisioner] = None

    async def initialize(self):
        """Build the providers shared by every machine task."""
        if self.provisioner is not None:
            return

        registry = ProviderRegistry()
        await registry.initialize(self.config)
        self.provider_registry = registry
        self.provisioner = MachineProvisioner(registry)
        logger.debug("WeeStack initialized")

    async def create_machines(self, batch: BatchConfig) -> List[TaskOutcome]:
        """Create one machine per address in the batch, concurrently.

        The whole batch is validated first. A machine that fails does not
        stop the others; all failures are raised together as a BatchError.
        """
        validate_batch(batch)
        await self.initialize()

        machines = [MachineSpec.for_address(address) for address in batch.ip_addresses]

        async def _create(machine: MachineSpec):
            await self.provisioner.create(machine, batch)

        return await run_batch(
            machines, _create, "creating machines", key=lambda m: m.hostname
        )

    async def delete_machines(self, identifiers: Iterable[str]) -> List[TaskOutcome]:
        """Delete machines named by IP address or by name, concurrently."""
        identifiers = list(identifiers)
        if not identifiers or not all(identifiers):
            raise ConfigValidationError("machines list is empty")
        await self.initialize()

        machines: List[MachineSpec] = []
        seen = set()
        for identifier in identifiers:
            machine = MachineSpec.for_identifier(identifier)
            if machine.hostname in seen:
                logger.debug(f"{identifier} already listed as {machine.hostname}")
                continue
            seen.add(machine.hostname)
            machines.append(machine)

        return await run_batch(
            machines, self.provisioner.delete, "deleting machines", key=lambda m: m.hostname
        )


async def _load(config_file: Optional[Union[str, Path]]) -> ConfigManager:
    if config_file:
        manager = ConfigManager(config_file)
    else:
        manager = ConfigManager.from_environment()
    await manager.load()
    setup_logging(manager.config.log_level)
    return manager


async def create(
    batch: Optional[BatchConfig] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> List[TaskOutcome]:
    """Create the machines of batch, or of the batch in the config file."""
    manager = await _load(config_file)
    batch = batch or manager.batch
    if batch is None:
        raise ConfigValidationError("no batch configuration given")

    stack = WeeStack(manager.config)
    return await stack.create_machines(batch)


async def delete(
    machines: Iterable[str],
    config_file: Optional[Union[str, Path]] = None,
) -> List[TaskOutcome]:
    """Delete machines named by IP address or by name."""
    manager = await _load(config_file)
    stack = WeeStack(manager.config)
    return await stack.delete_machines(machines)
