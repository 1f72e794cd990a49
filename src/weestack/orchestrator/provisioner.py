"""Per-machine create and delete sequences."""

import logging

from weestack.errors import MachineError
from weestack.models.batch import BatchConfig
from weestack.models.machine import MachineSpec, MachineState
from weestack.providers import ProviderRegistry


logger = logging.getLogger(__name__)


class MachineProvisioner:
    """Runs the steps of one machine in order, stopping at the first failure.

    Nothing is retried. Re-running a whole sequence is safe up to the
    instance step: the preseed is rewritten and an existing disk is kept,
    but an existing instance makes creation fail.
    """

    def __init__(self, provider_registry: ProviderRegistry):
        """Initialize provisioner."""
        self.provider_registry = provider_registry

    async def create(self, machine: MachineSpec, batch: BatchConfig):
        """Preseed, then disk, then instance."""
        artifact_provider = self.provider_registry.artifact
        disk_provider = self.provider_registry.disk
        instance_provider = self.provider_registry.instance

        try:
            await artifact_provider.present(machine, batch)
            machine.advance(MachineState.ARTIFACT_READY)

            await disk_provider.present(machine, batch)
            machine.advance(MachineState.DISK_READY)

            await instance_provider.present(machine, batch)
            machine.advance(MachineState.INSTANCE_READY)
        except MachineError as e:
            machine.fail(e.step)
            raise

    async def delete(self, machine: MachineSpec):
        """Tear down the instance and its disk, then drop its preseed."""
        instance_provider = self.provider_registry.instance
        artifact_provider = self.provider_registry.artifact

        try:
            await instance_provider.absent(machine)
            await artifact_provider.absent(machine)
        except MachineError as e:
            machine.fail(e.step)
            raise
        machine.advance(MachineState.REMOVED)
