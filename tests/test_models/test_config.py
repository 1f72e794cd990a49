"""Tests for configuration models."""

import pytest
from pathlib import Path
from pydantic import ValidationError

from weestack.models.config import (
    WeeStackConfig,
    PathsConfig,
    DiskConfig,
    InstanceConfig,
    ArtifactConfig,
)


class TestPathsConfig:
    """Test PathsConfig model."""

    def test_default_values(self):
        """Test default host directories."""
        config = PathsConfig()

        assert config.data_dir == str(Path.home() / ".local" / "share" / "weestack")
        assert config.libvirt_dir == "/var/lib/libvirt"

    def test_derived_directories(self):
        """Test preseed and disk directories are derived from the roots."""
        config = PathsConfig(data_dir="/tmp/data", libvirt_dir="/tmp/libvirt")

        assert config.preseeds_dir == Path("/tmp/data/preseeds")
        assert config.disks_dir == Path("/tmp/libvirt/weestack")


class TestDiskConfig:
    """Test DiskConfig model."""

    def test_default_values(self):
        """Test default disk settings."""
        config = DiskConfig()

        assert config.size == "10G"
        assert config.format == "qcow2"
        assert config.extension == "qcow2"
        assert config.owner == "libvirt-qemu"


class TestInstanceConfig:
    """Test InstanceConfig model."""

    def test_default_values(self):
        """Test default virt-install settings."""
        config = InstanceConfig()

        assert config.connect == "qemu:///system"
        assert config.vcpus == 2
        assert config.ram == 2048
        assert config.os_variant == "debian8"
        assert "installer-amd64" in config.location

    def test_sizing_validation(self):
        """Test vcpus and ram lower bounds."""
        with pytest.raises(ValidationError) as exc_info:
            InstanceConfig(vcpus=0)

        assert "vcpus" in str(exc_info.value)

        with pytest.raises(ValidationError) as exc_info:
            InstanceConfig(ram=16)

        assert "ram" in str(exc_info.value)


class TestWeeStackConfig:
    """Test WeeStackConfig model."""

    def test_default_config(self):
        """Test default configuration."""
        config = WeeStackConfig()

        assert config.log_level == "INFO"
        assert isinstance(config.paths, PathsConfig)
        assert isinstance(config.disk, DiskConfig)
        assert isinstance(config.instance, InstanceConfig)
        assert isinstance(config.artifact, ArtifactConfig)
        assert config.artifact.template_file is None

    def test_log_level_validation(self):
        """Test log level validation."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            config = WeeStackConfig(log_level=level)
            assert config.log_level == level

        # Case insensitive
        config = WeeStackConfig(log_level="debug")
        assert config.log_level == "DEBUG"

        with pytest.raises(ValidationError) as exc_info:
            WeeStackConfig(log_level="INVALID")

        assert "log_level" in str(exc_info.value)

    def test_nested_sections_from_dicts(self):
        """Test sections given as plain dictionaries, as loaded from YAML."""
        config = WeeStackConfig(
            paths={"data_dir": "/srv/weestack"},
            disk={"size": "20G"},
            instance={"vcpus": 4},
        )

        assert config.paths.preseeds_dir == Path("/srv/weestack/preseeds")
        assert config.disk.size == "20G"
        assert config.disk.format == "qcow2"
        assert config.instance.vcpus == 4

    def test_extra_fields_ignored(self):
        """Test that extra fields are ignored."""
        config = WeeStackConfig(extra_field="ignored")

        assert not hasattr(config, "extra_field")
