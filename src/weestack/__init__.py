"""
WeeStack - a 'local cloud' manager, for when you don't need a big stack.

Creates and deletes Debian virtual machines on the local host using
qemu-img, virt-install and virsh, with one preseed per machine.
"""

__version__ = "1.0.0"
__author__ = "WeeStack Development Team"

# Re-export key components for easier access
from weestack.models.batch import BatchConfig
from weestack.models.config import WeeStackConfig
from weestack.models.machine import MachineSpec, DiskSpec
from weestack.orchestrator.main import WeeStack, create, delete

__all__ = [
    "BatchConfig",
    "WeeStackConfig",
    "MachineSpec",
    "DiskSpec",
    "WeeStack",
    "create",
    "delete",
]
