"""Instance provider for libvirt virtual machines."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

from weestack.errors import InstanceCreationFailed, TeardownFailed
from weestack.models.batch import BatchConfig
from weestack.models.config import InstanceConfig
from weestack.models.machine import MachineSpec
from weestack.providers.base import BaseProvider
from weestack.utils.process import run_command, failure_detail

if TYPE_CHECKING:
    from weestack.providers.registry import ProviderRegistry
    from weestack.providers.disk import DiskProvider

logger = logging.getLogger(__name__)


class InstanceProvider(BaseProvider):
    """Provider for virt-install and virsh managed instances.

    Creation is not idempotent: virt-install refuses a name that is
    already defined, and that refusal is reported as a failure.
    """

    def __init__(self):
        """Initialize instance provider."""
        self.instance_config: Optional[InstanceConfig] = None
        self._disk_provider: Optional["DiskProvider"] = None

    async def initialize(self, config, registry: "ProviderRegistry") -> None:
        """Initialize provider with configuration and registry."""
        self.instance_config = config.instance

        # Disk paths are owned by the disk provider
        self._disk_provider = registry.get_provider("disk")

    @property
    def disk_provider(self) -> Optional["DiskProvider"]:
        """Get disk provider."""
        return self._disk_provider

    def install_command(self, machine: MachineSpec, batch: BatchConfig, disk_path: Path) -> List[str]:
        """virt-install command line for the machine."""
        c = self.instance_config
        cmd = [
            "virt-install", "--connect", c.connect,
            "--virt-type", c.virt_type,
            "--name", machine.hostname,
            "--cpu", c.cpu,
            "--vcpus", str(c.vcpus),
            "--ram", str(c.ram),
            "--disk", str(disk_path),
            "--location", c.location,
            "--initrd-inject", str(machine.artifact_path),
            "--extra-args", c.extra_args,
            "--network", f"bridge={batch.bridge}",
            "--graphics", c.graphics,
        ]
        if c.os_type:
            cmd.extend(["--os-type", c.os_type])
        if c.os_variant:
            cmd.extend(["--os-variant", c.os_variant])
        return cmd

    async def present(self, machine: MachineSpec, batch: BatchConfig) -> None:
        """Create and boot the machine from network install media."""
        if machine.artifact_path is None:
            raise InstanceCreationFailed(machine.hostname, "no preseed has been generated")

        disk = self.disk_provider.disk_spec(machine)
        logger.info(f"Creating machine {machine.hostname}")
        try:
            await run_command(self.install_command(machine, batch, disk.path))
        except subprocess.CalledProcessError as e:
            logger.error(f"Failed to create machine {machine.hostname}: {e}. Stderr: {e.stderr}")
            raise InstanceCreationFailed(machine.hostname, failure_detail(e)) from e
        except OSError as e:
            logger.error(f"Failed to run virt-install: {e}")
            raise InstanceCreationFailed(machine.hostname, str(e)) from e

        logger.info(f"Created machine {machine.hostname}")

    async def absent(self, machine: MachineSpec) -> None:
        """Undefine the machine and release its disk image."""
        c = self.instance_config
        disk = self.disk_provider.disk_spec(machine)

        logger.info(f"Removing machine {machine.hostname}")
        try:
            # Fails harmlessly when the machine is not running
            result = await run_command(
                ["virsh", "--connect", c.connect, "destroy", machine.hostname],
                check=False,
            )
            if result.returncode != 0:
                logger.debug(f"virsh destroy {machine.hostname}: {result.stderr.strip()}")

            await run_command([
                "virsh", "--connect", c.connect,
                "undefine", machine.hostname,
                "--storage", str(disk.path),
            ])
        except subprocess.CalledProcessError as e:
            logger.error(f"Failed to remove machine {machine.hostname}: {e}. Stderr: {e.stderr}")
            raise TeardownFailed(machine.hostname, failure_detail(e)) from e
        except OSError as e:
            logger.error(f"Failed to run virsh: {e}")
            raise TeardownFailed(machine.hostname, str(e)) from e

        logger.info(f"Removed machine {machine.hostname}")
