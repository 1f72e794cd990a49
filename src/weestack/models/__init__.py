"""Pydantic models for configuration and validation."""

from weestack.models.config import (
    WeeStackConfig,
    PathsConfig,
    DiskConfig,
    InstanceConfig,
    ArtifactConfig,
)
from weestack.models.batch import BatchConfig, validate_batch, validate_ip_address
from weestack.models.machine import MachineSpec, MachineState, DiskSpec, canonical_name

__all__ = [
    "WeeStackConfig",
    "PathsConfig",
    "DiskConfig",
    "InstanceConfig",
    "ArtifactConfig",
    "BatchConfig",
    "validate_batch",
    "validate_ip_address",
    "MachineSpec",
    "MachineState",
    "DiskSpec",
    "canonical_name",
]
