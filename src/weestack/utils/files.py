"""Filesystem helpers."""

import os
import pwd
from pathlib import Path
from typing import Union


# libvirt needs group write on images and group traversal on directories
MODE_RW = 0o664
MODE_RWX = 0o750


def chown(path: Union[str, Path], username: str) -> None:
    """Give path to username and that user's primary group.

    Raises KeyError for an unknown user and OSError if the change fails.
    """
    entry = pwd.getpwnam(username)
    os.chown(path, entry.pw_uid, entry.pw_gid)


def ensure_dir(path: Path, mode: int = MODE_RWX) -> Path:
    """Create path and its parents if missing; an existing directory is fine."""
    path.mkdir(mode=mode, parents=True, exist_ok=True)
    return path
