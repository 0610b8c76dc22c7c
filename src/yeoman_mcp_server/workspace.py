"""Provisioning of directories that hold the runner and generator packages."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TEMP_PREFIX = "yeoman-"


@dataclass(frozen=True)
class Workspace:
    """Directory in which ``yo`` and generator packages are installed."""

    path: Path
    persistent: bool = False

    @property
    def node_modules(self) -> Path:
        """Directory npm installs packages into."""
        return self.path / "node_modules"

    @property
    def bin_dir(self) -> Path:
        """Directory holding installed package binaries."""
        return self.node_modules / ".bin"

    @property
    def manifest(self) -> Path:
        """Path of the workspace package.json."""
        return self.path / "package.json"

    def package_dir(self, package: str) -> Path:
        """Return the install location of ``package`` (scoped names included)."""
        return self.node_modules.joinpath(*package.split("/"))

    def executable(self, name: str) -> Path:
        """Return the path of an installed package binary."""
        suffix = ".cmd" if os.name == "nt" else ""
        return self.bin_dir / f"{name}{suffix}"


class WorkspaceProvisioner:
    """Hand out workspaces for installer, introspector and runner calls.

    With a persistent directory every call shares that directory and
    :meth:`release` leaves it in place. Without one, each call gets a fresh
    temporary directory that is deleted again on release.
    """

    def __init__(self, persistent_dir: Path | None = None) -> None:
        """Create a provisioner, optionally bound to a persistent directory."""
        self._persistent_dir = (
            Path(persistent_dir).expanduser().resolve() if persistent_dir else None
        )
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def acquire(self) -> Workspace:
        """Return a workspace ready for package installation."""
        if self._persistent_dir is not None:
            self._persistent_dir.mkdir(parents=True, exist_ok=True)
            return Workspace(path=self._persistent_dir, persistent=True)
        path = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
        logger.debug("Created temporary workspace %s", path)
        return Workspace(path=path, persistent=False)

    def release(self, workspace: Workspace) -> None:
        """Remove a disposable workspace; persistent workspaces are kept.

        Deletion failures are logged rather than raised so they never mask the
        outcome of the operation that used the workspace.
        """
        if workspace.persistent:
            return
        try:
            shutil.rmtree(workspace.path)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning(
                "Failed to remove temporary workspace %s: %s", workspace.path, exc
            )
        else:
            logger.debug("Removed temporary workspace %s", workspace.path)

    @contextmanager
    def workspace(self) -> Iterator[Workspace]:
        """Acquire a workspace and release it on every exit path."""
        workspace = self.acquire()
        try:
            yield workspace
        finally:
            self.release(workspace)

    def install_lock(self, workspace: Workspace) -> threading.Lock:
        """Return the lock serializing npm runs inside ``workspace``.

        npm rewrites ``package.json``, the lockfile and ``node_modules`` on every
        install, so only one install may run per directory at a time.
        """
        key = str(workspace.path)
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
        return lock
