"""Advisory liveness checks for the daemon.

The daemon records its PID in a marker file and listens on a Unix socket.
Neither is owned by the client: both are only read here. A live PID does
not prove the socket is accepting connections, so callers check both.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from agentbrowser.daemon.paths import SessionPaths

logger = logging.getLogger(__name__)


def pid_exists(pid: int) -> bool:
    """
    Check whether a process exists by sending it signal 0.

    Any failure (no such process, permission denied) counts as absent.
    """
    if pid <= 0:
        # 0 and negative values address process groups, not a process
        return False
    try:
        os.kill(pid, 0)
    except OSError:
        return False
    return True


def read_pid(marker_path: Path) -> Optional[int]:
    """Return the PID recorded in the marker file, or None if unreadable."""
    try:
        return int(marker_path.read_text().strip())
    except (OSError, ValueError):
        return None


def is_alive(
    marker_path: Path,
    process_exists: Callable[[int], bool] = pid_exists,
) -> bool:
    """
    Check if the daemon recorded in the marker file is running.

    Args:
        marker_path: Path to the PID file
        process_exists: Existence probe (replaceable in tests)

    Returns:
        False if the marker is missing, malformed or names a dead process
    """
    if not marker_path.exists():
        return False
    pid = read_pid(marker_path)
    if pid is None:
        logger.debug(f"Ignoring malformed PID file {marker_path}")
        return False
    return process_exists(pid)


class DaemonHandle:
    """
    External resource handle for a session's daemon.

    The daemon's state lives in files another process writes. This interface
    is what the launcher sees of it, so a fake can stand in for the real
    filesystem and process table.
    """

    def probe(self) -> bool:
        """Return True if the daemon process appears to be alive."""
        raise NotImplementedError

    def locate(self) -> Optional[Path]:
        """Return the control socket path if it exists, else None."""
        raise NotImplementedError


class FileDaemonHandle(DaemonHandle):
    """DaemonHandle backed by the real PID file and socket path."""

    def __init__(
        self,
        paths: SessionPaths,
        process_exists: Callable[[int], bool] = pid_exists,
    ):
        self.paths = paths
        self._process_exists = process_exists

    @property
    def session(self) -> str:
        return self.paths.session

    def probe(self) -> bool:
        return is_alive(self.paths.pid_path, self._process_exists)

    def locate(self) -> Optional[Path]:
        if os.path.exists(self.paths.socket_path):
            return self.paths.socket_path
        return None
