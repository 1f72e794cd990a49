"""Disk provider for machine disk images."""

import asyncio
import logging
import subprocess
from typing import Optional

from weestack.errors import DiskCreationFailed, OwnershipFailed
from weestack.models.batch import BatchConfig
from weestack.models.config import DiskConfig, PathsConfig
from weestack.models.machine import DiskSpec, MachineSpec
from weestack.providers.base import BaseProvider, ProviderStatus
from weestack.utils.files import chown, ensure_dir
from weestack.utils.process import run_command, failure_detail


logger = logging.getLogger(__name__)


class DiskProvider(BaseProvider):
    """Provider for qemu-img disk images.

    An existing image is never recreated or truncated.
    """

    def __init__(self):
        """Initialize disk provider."""
        self.paths: Optional[PathsConfig] = None
        self.disk_config: Optional[DiskConfig] = None

    async def initialize(self, config, registry) -> None:
        """Initialize provider with configuration."""
        self.paths = config.paths
        self.disk_config = config.disk

    def disk_spec(self, machine: MachineSpec) -> DiskSpec:
        """Disk image of the machine."""
        return DiskSpec.for_machine(machine.hostname, self.paths, self.disk_config)

    async def status(self, disk: DiskSpec) -> ProviderStatus:
        """Check if the disk image exists."""
        if await asyncio.to_thread(disk.path.exists):
            return ProviderStatus.PRESENT
        return ProviderStatus.ABSENT

    async def present(self, machine: MachineSpec, batch: Optional[BatchConfig] = None) -> None:
        """Ensure the machine's disk image exists and belongs to the disk owner."""
        disk = self.disk_spec(machine)

        try:
            await asyncio.to_thread(ensure_dir, self.paths.disks_dir)
            current_status = await self.status(disk)
        except OSError as e:
            logger.error(f"Cannot prepare disk for {machine.hostname}: {e}")
            raise DiskCreationFailed(machine.hostname, str(e)) from e
        await self._chown(machine, self.paths.disks_dir)

        if current_status == ProviderStatus.PRESENT:
            logger.debug(f"Disk {disk.path} already present")
        else:
            logger.info(f"Creating disk {disk.path}")
            try:
                await run_command([
                    "qemu-img", "create",
                    "-f", disk.format,
                    str(disk.path),
                    disk.size,
                ])
            except subprocess.CalledProcessError as e:
                logger.error(f"Failed to create disk {disk.path}: {e}. Stderr: {e.stderr}")
                raise DiskCreationFailed(machine.hostname, failure_detail(e)) from e
            except OSError as e:
                logger.error(f"Failed to run qemu-img: {e}")
                raise DiskCreationFailed(machine.hostname, str(e)) from e

        await self._chown(machine, disk.path)

    async def _chown(self, machine: MachineSpec, path) -> None:
        owner = self.disk_config.owner
        try:
            await asyncio.to_thread(chown, path, owner)
        except KeyError as e:
            logger.error(f"Unknown disk owner {owner}")
            raise OwnershipFailed(machine.hostname, f"no such user {owner!r}") from e
        except OSError as e:
            logger.error(f"Failed to give {path} to {owner}: {e}")
            raise OwnershipFailed(machine.hostname, f"{owner}: {e.strerror or e}") from e
