"""Errors raised while provisioning and tearing down machines."""

from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from weestack.orchestrator.batch import TaskOutcome


class WeeStackError(Exception):
    """Base class for all weestack errors."""
    pass


class ConfigValidationError(WeeStackError):
    """Configuration is malformed; nothing has been done yet."""
    pass


class InvalidAddress(ConfigValidationError):
    """A string that should be an IP address is not one."""

    def __init__(self, address: str, reason: str = "is not a valid IP address"):
        self.address = address
        super().__init__(f"{address!r} {reason}")


class EmptyAddressList(ConfigValidationError):
    """No machine addresses were given."""

    def __init__(self, message: str = "IP address list is empty"):
        super().__init__(message)


class MachineError(WeeStackError):
    """A step of one machine's sequence failed.

    The message names the machine exactly once so that it can be read on
    its own inside an aggregate batch report.
    """

    step = "machine"

    def __init__(self, hostname: str, detail: str):
        self.hostname = hostname
        self.detail = detail.strip()
        super().__init__(f"{hostname}: {self.step} failed: {self.detail}")


class ArtifactGenerationFailed(MachineError):
    step = "artifact generation"


class DiskCreationFailed(MachineError):
    step = "disk creation"


class OwnershipFailed(MachineError):
    step = "ownership"


class InstanceCreationFailed(MachineError):
    step = "instance creation"


class TeardownFailed(MachineError):
    step = "teardown"


class BatchError(WeeStackError):
    """One or more items of a batch failed.

    Every failure is listed, one per line, after the batch description.
    """

    def __init__(self, description: str, failures: List["TaskOutcome"]):
        self.description = description
        self.failures = failures
        lines = [f"error {description}:"]
        lines.extend(f"  {outcome.describe()}" for outcome in failures)
        super().__init__("\n".join(lines))
