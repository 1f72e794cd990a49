"""Configuration models."""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, validator


DEFAULT_LOCATION = "http://ftp.debian.org/debian/dists/jessie/main/installer-amd64/"
DEFAULT_EXTRA_ARGS = "console=tty0 console=ttyS0,115200 console=ttyS1,115200 panic=30 raid=noautodetect"


class PathsConfig(BaseModel):
    """Host directories used by weestack."""
    data_dir: str = Field(default=str(Path.home() / ".local" / "share" / "weestack"))
    libvirt_dir: str = Field(default="/var/lib/libvirt")

    @property
    def preseeds_dir(self) -> Path:
        """Parent of the per-machine preseed directories."""
        return Path(self.data_dir) / "preseeds"

    @property
    def disks_dir(self) -> Path:
        """Directory holding one disk image per machine."""
        return Path(self.libvirt_dir) / "weestack"


class DiskConfig(BaseModel):
    """Disk image configuration shared by all machines."""
    size: str = Field(default="10G")
    format: str = Field(default="qcow2")
    extension: str = Field(default="qcow2")
    owner: str = Field(default="libvirt-qemu")


class InstanceConfig(BaseModel):
    """virt-install settings shared by all machines."""
    connect: str = Field(default="qemu:///system")
    virt_type: str = Field(default="kvm")
    cpu: str = Field(default="host-model-only")
    vcpus: int = Field(default=2, ge=1)
    ram: int = Field(default=2048, ge=256, description="RAM in MiB")
    location: str = Field(default=DEFAULT_LOCATION)
    extra_args: str = Field(default=DEFAULT_EXTRA_ARGS)
    graphics: str = Field(default="none")
    os_type: str = Field(default="linux")
    os_variant: str = Field(default="debian8")


class ArtifactConfig(BaseModel):
    """Preseed artifact configuration."""
    template_file: Optional[str] = Field(None, description="Replaces the built-in preseed template")


class WeeStackConfig(BaseModel):
    """Main configuration model."""
    log_level: str = Field(default="INFO")
    paths: PathsConfig = Field(default_factory=PathsConfig)
    disk: DiskConfig = Field(default_factory=DiskConfig)
    instance: InstanceConfig = Field(default_factory=InstanceConfig)
    artifact: ArtifactConfig = Field(default_factory=ArtifactConfig)

    @validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    class Config:
        """Pydantic config."""
        extra = "ignore"
