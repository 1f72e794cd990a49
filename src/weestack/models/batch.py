"""Batch configuration and its validation."""

import ipaddress
import logging
from typing import List, Optional
from pydantic import BaseModel, Field, validator

from weestack.errors import EmptyAddressList, InvalidAddress


logger = logging.getLogger(__name__)


class BatchConfig(BaseModel):
    """Shared inputs for one provisioning run.

    The password is written in cleartext into every machine's preseed,
    and the SSH keys URL is fetched by each machine on its first boot.
    """
    bridge: str = Field(default="virbr0", min_length=1, description="Linux bridge the machines use for networking")
    domain: str = Field(default="example.com", min_length=1, description="DNS domain name")
    ip_addresses: List[str] = Field(..., description="One IP address per machine to be built")
    net_mask: str = Field(default="255.255.255.0", min_length=1)
    gateway: str = Field(..., min_length=1)
    nameserver: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, description="Used for both the root and debian users")
    ssh_keys_url: str = Field(..., min_length=1, description="authorized_keys source for the debian user")

    @validator("ip_addresses", pre=True)
    def split_ip_addresses(cls, v):
        """Accept the comma-separated form, e.g. '192.168.122.101,192.168.122.102'."""
        if isinstance(v, str):
            return [address.strip() for address in v.split(",")]
        return v

    class Config:
        """Pydantic config."""
        extra = "forbid"
        frozen = True


def validate_ip_address(address: str, version: Optional[int] = None) -> None:
    """Check that address looks like an IP address, optionally of one version."""
    try:
        parsed = ipaddress.ip_address(address)
    except ValueError:
        raise InvalidAddress(address) from None
    if version is not None and parsed.version != version:
        raise InvalidAddress(address, f"is not an IPv{version} address")


def validate_batch(batch: BatchConfig) -> None:
    """Validate every address in the batch before any work starts.

    Machine addresses must be IPv4, since hostnames are derived by
    replacing their dots. Mask, gateway and nameserver may be either
    version.
    """
    if not batch.ip_addresses:
        raise EmptyAddressList()

    seen = set()
    for address in batch.ip_addresses:
        if not address:
            raise InvalidAddress(
                address,
                "is empty: pass one address per machine, "
                "for example '192.168.122.101,192.168.122.102'",
            )
        if address in seen:
            raise InvalidAddress(address, "is listed more than once")
        seen.add(address)
        validate_ip_address(address, version=4)

    for address in (batch.net_mask, batch.gateway, batch.nameserver):
        if address:
            validate_ip_address(address)

    logger.debug(f"Validated batch of {len(batch.ip_addresses)} machine(s)")
