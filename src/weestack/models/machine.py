"""Per-machine models."""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field

from weestack.models.config import DiskConfig, PathsConfig


logger = logging.getLogger(__name__)


class MachineState(Enum):
    """Where a machine is in its create or delete sequence."""
    PENDING = "pending"
    ARTIFACT_READY = "artifact_ready"
    DISK_READY = "disk_ready"
    INSTANCE_READY = "instance_ready"
    REMOVED = "removed"
    FAILED = "failed"


def canonical_name(identifier: str) -> str:
    """Derive the instance name for an IP address or an existing name.

    '192.168.122.101' becomes '192-168-122-101'; a name already in
    hyphen form is returned unchanged.
    """
    return identifier.replace(".", "-")


class MachineSpec(BaseModel):
    """State of one machine, owned by the task working on it."""
    hostname: str = Field(..., description="Instance name and guest hostname")
    ip_address: Optional[str] = None
    artifact_path: Optional[Path] = None
    state: MachineState = Field(default=MachineState.PENDING)
    failed_step: Optional[str] = None

    @classmethod
    def for_address(cls, ip_address: str) -> "MachineSpec":
        """Machine to be created at ip_address."""
        return cls(hostname=canonical_name(ip_address), ip_address=ip_address)

    @classmethod
    def for_identifier(cls, identifier: str) -> "MachineSpec":
        """Existing machine, named either by its IP address or its name."""
        return cls(hostname=canonical_name(identifier))

    def advance(self, state: MachineState):
        logger.debug(f"Machine {self.hostname}: {self.state.value} -> {state.value}")
        self.state = state

    def fail(self, step: str):
        logger.debug(f"Machine {self.hostname}: {self.state.value} -> failed ({step})")
        self.state = MachineState.FAILED
        self.failed_step = step


class DiskSpec(BaseModel):
    """Disk image of one machine."""
    path: Path
    size: str
    format: str

    @classmethod
    def for_machine(cls, hostname: str, paths: PathsConfig, disk: DiskConfig) -> "DiskSpec":
        return cls(
            path=paths.disks_dir / f"{hostname}.{disk.extension}",
            size=disk.size,
            format=disk.format,
        )
