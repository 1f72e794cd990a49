"""Preseed provider for unattended Debian installs."""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Optional

from jinja2 import Template, TemplateError

from weestack.errors import ArtifactGenerationFailed, TeardownFailed
from weestack.models.batch import BatchConfig
from weestack.models.machine import MachineSpec
from weestack.providers.base import BaseProvider
from weestack.utils.files import MODE_RW, ensure_dir
from weestack.utils.templates import compile_template


logger = logging.getLogger(__name__)


PRESEED_TEMPLATE = r"""d-i debian-installer/locale select en_GB.UTF-8
d-i keyboard-configuration/xkb-keymap select gb
d-i netcfg/choose_interface select auto
d-i netcfg/disable_autoconfig boolean true
d-i netcfg/get_ipaddress string {{ ip_address }}
d-i netcfg/get_netmask string {{ net_mask }}
d-i netcfg/get_gateway string {{ gateway }}
d-i netcfg/get_nameservers string {{ nameserver }}
d-i netcfg/confirm_static boolean true
d-i netcfg/get_hostname string {{ hostname }}
d-i netcfg/get_domain string {{ domain }}
d-i netcfg/wireless_wep string
d-i mirror/country string IE
d-i mirror/http/mirror select ftp.ie.debian.org
d-i mirror/http/hostname string ftp.ie.debian.org
d-i mirror/http/directory string /debian/
d-i mirror/http/proxy string
d-i passwd/root-password password {{ password }}
d-i passwd/root-password-again password {{ password }}
d-i passwd/user-fullname string Debian
d-i passwd/username string debian
d-i passwd/user-password password {{ password }}
d-i passwd/user-password-again password {{ password }}
d-i clock-setup/utc boolean true
d-i time/zone string Europe/Dublin
d-i clock-setup/ntp boolean true
d-i partman-auto/method string regular
d-i partman-lvm/device_remove_lvm boolean true
d-i partman-md/device_remove_md boolean true
d-i partman-lvm/confirm boolean true
d-i partman-lvm/confirm_nooverwrite boolean true
d-i partman-auto/choose_recipe select atomic
d-i partman-partitioning/confirm_write_new_label boolean true
d-i partman/choose_partition select finish
d-i partman/confirm boolean true
d-i partman/confirm_nooverwrite boolean true
d-i partman-md/confirm boolean true
tasksel tasksel/first multiselect standard, ssh-server
d-i pkgsel/include string curl sudo vim wget
popularity-contest popularity-contest/participate boolean false
d-i grub-installer/only_debian boolean true
d-i grub-installer/with_other_os boolean true
d-i grub-installer/bootdev  string /dev/vda
d-i debian-installer/add-kernel-opts string \
  console=tty0 console=ttyS0,115200 console=ttyS1,115200 panic=30 raid=noautodetect
d-i finish-install/reboot_in_progress note
d-i debian-installer/exit/poweroff boolean true
d-i preseed/late_command string echo "DOTSSH=/home/debian/.ssh; mkdir \$DOTSSH; wget -O \$DOTSSH/authorized_keys {{ ssh_keys_url }}; chmod 700 \$DOTSSH; chmod 400 \$DOTSSH/authorized_keys; chown -R debian:debian \$DOTSSH; SUDOERSD=/etc/sudoers.d/debian; echo 'debian ALL=(ALL) NOPASSWD: ALL' >> \$SUDOERSD; echo 'Defaults:debian !requiretty' >> \$SUDOERSD; chmod 0440 \$SUDOERSD" | chroot /target /bin/bash;
"""


class ArtifactProvider(BaseProvider):
    """Provider for per-machine preseed.cfg files.

    The template is parsed once in initialize and only read afterwards,
    so concurrent machines can share it.
    """

    filename = "preseed.cfg"

    def __init__(self):
        """Initialize preseed provider."""
        self.preseeds_dir: Optional[Path] = None
        self.template: Optional[Template] = None
        self.template_error: Optional[str] = None

    async def initialize(self, config, registry) -> None:
        """Initialize provider with configuration.

        An unreadable or malformed template does not stop initialization;
        each machine then fails its own artifact step with the reason.
        """
        self.preseeds_dir = config.paths.preseeds_dir
        self.template = None
        self.template_error = None

        template_str = PRESEED_TEMPLATE
        try:
            if config.artifact.template_file:
                template_file = Path(config.artifact.template_file)
                template_str = await asyncio.to_thread(template_file.read_text)
                logger.debug(f"Using preseed template {template_file}")
            self.template = compile_template(template_str)
        except (TemplateError, OSError) as e:
            logger.error(f"Unusable preseed template: {e}")
            self.template_error = f"unusable preseed template: {e}"

    def artifact_dir(self, machine: MachineSpec) -> Path:
        """Directory holding the machine's preseed."""
        return self.preseeds_dir / machine.hostname

    def render(self, machine: MachineSpec, batch: BatchConfig) -> str:
        """Render the preseed of one machine."""
        return self.template.render(
            ip_address=machine.ip_address,
            net_mask=batch.net_mask,
            gateway=batch.gateway,
            nameserver=batch.nameserver,
            hostname=machine.hostname,
            domain=batch.domain,
            password=batch.password,
            ssh_keys_url=batch.ssh_keys_url,
        )

    async def present(self, machine: MachineSpec, batch: BatchConfig) -> None:
        """Write the machine's preseed.cfg, replacing any earlier one."""
        path = self.artifact_dir(machine) / self.filename
        if self.template is None:
            raise ArtifactGenerationFailed(machine.hostname, self.template_error or "no preseed template")
        try:
            content = self.render(machine, batch)
            await asyncio.to_thread(self._write, path, content)
        except (TemplateError, OSError) as e:
            logger.error(f"Failed to write preseed for {machine.hostname}: {e}")
            raise ArtifactGenerationFailed(machine.hostname, str(e)) from e

        machine.artifact_path = path
        logger.info(f"Wrote {path}")

    async def absent(self, machine: MachineSpec) -> None:
        """Remove the machine's preseed directory, if any."""
        artifact_dir = self.artifact_dir(machine)
        if not await asyncio.to_thread(artifact_dir.exists):
            logger.debug(f"No preseed left for {machine.hostname}")
            return

        try:
            await asyncio.to_thread(shutil.rmtree, artifact_dir)
        except OSError as e:
            logger.error(f"Failed to remove preseed for {machine.hostname}: {e}")
            raise TeardownFailed(machine.hostname, f"removing preseed: {e}") from e
        logger.debug(f"Removed {artifact_dir}")

    @staticmethod
    def _write(path: Path, content: str) -> None:
        ensure_dir(path.parent)
        path.write_text(content)
        path.chmod(MODE_RW)
