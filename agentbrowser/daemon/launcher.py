"""Start the browser daemon on demand.

The daemon is a separate Node.js program. The launcher finds its entry
script, starts it fully detached from this process, then waits for the
control socket to appear. There is no readiness handshake: the socket
file showing up is the only signal the client relies on.
"""

import asyncio
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from agentbrowser.daemon.errors import (
    LaunchTimeoutError,
    SpawnError,
    WorkerNotFoundError,
)
from agentbrowser.daemon.liveness import DaemonHandle
from agentbrowser.daemon.paths import SESSION_ENV

logger = logging.getLogger(__name__)

WORKER_SCRIPT = "daemon.js"
DAEMON_ENV = "AGENT_BROWSER_DAEMON"
DAEMON_PATH_ENV = "AGENT_BROWSER_DAEMON_PATH"

DEFAULT_POLL_INTERVAL = 0.1
DEFAULT_POLL_ATTEMPTS = 50  # 5 seconds max


def worker_candidates(
    script_path: Optional[str] = None,
    cwd: Optional[Path] = None,
    override: Optional[str] = None,
) -> List[Path]:
    """
    List the places the worker script may live, in search order.

    Args:
        script_path: Path of the invoking program (default: sys.argv[0])
        cwd: Working directory (default: Path.cwd())
        override: Explicit worker path (default: $AGENT_BROWSER_DAEMON_PATH)
    """
    if script_path is None:
        script_path = sys.argv[0]
    if cwd is None:
        cwd = Path.cwd()
    if override is None:
        override = os.environ.get(DAEMON_PATH_ENV)

    script_dir = Path(os.path.abspath(script_path)).parent
    candidates = []
    if override:
        candidates.append(Path(override))
    candidates.extend([
        script_dir / WORKER_SCRIPT,
        script_dir.parent / "dist" / WORKER_SCRIPT,
        cwd / "dist" / WORKER_SCRIPT,
    ])
    return candidates


def find_worker(candidates: Sequence[Path]) -> Path:
    """Return the first existing candidate or raise WorkerNotFoundError."""
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    raise WorkerNotFoundError(candidates)


def spawn_detached(command: Sequence[str], env: Dict[str, str]) -> None:
    """
    Start a process that outlives this one and shares no stdio with it.

    The Popen handle is dropped on purpose: the daemon's exit status is
    never observed.

    Raises:
        SpawnError: If the executable cannot be started
    """
    kwargs = {
        "env": env,
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
        "close_fds": True,
    }
    if sys.platform == "win32":
        kwargs["creationflags"] = (
            subprocess.CREATE_NEW_PROCESS_GROUP | subprocess.DETACHED_PROCESS
        )
    else:
        kwargs["start_new_session"] = True

    try:
        subprocess.Popen(list(command), **kwargs)
    except OSError as e:
        raise SpawnError(f"Failed to start daemon: {e}") from e


class DaemonLauncher:
    """
    Make sure a session's daemon is reachable, starting it if needed.

    Polling suspends on the event loop between attempts and stops after
    ``poll_attempts`` misses.
    """

    def __init__(
        self,
        handle: DaemonHandle,
        session: str,
        runtime: str = "node",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        poll_attempts: int = DEFAULT_POLL_ATTEMPTS,
        candidates: Optional[Sequence[Path]] = None,
        spawner: Callable[[Sequence[str], Dict[str, str]], None] = spawn_detached,
    ):
        """
        Initialize launcher.

        Args:
            handle: Liveness/socket view of the daemon
            session: Session name passed on to the daemon
            runtime: Interpreter used to run the worker script
            poll_interval: Seconds between socket checks
            poll_attempts: Socket checks before giving up
            candidates: Worker locations to search (default: worker_candidates())
            spawner: Detached-spawn function (replaceable in tests)
        """
        self.handle = handle
        self.session = session
        self.runtime = runtime
        self.poll_interval = poll_interval
        self.poll_attempts = poll_attempts
        self.candidates = candidates
        self._spawner = spawner

    def is_reachable(self) -> bool:
        """Fast path: live PID and an existing socket."""
        return self.handle.probe() and self.handle.locate() is not None

    def daemon_env(self) -> Dict[str, str]:
        env = os.environ.copy()
        env[DAEMON_ENV] = "1"
        env[SESSION_ENV] = self.session
        return env

    async def ensure_reachable(self) -> None:
        """
        Return once the daemon's control socket exists.

        Raises:
            WorkerNotFoundError: No worker script found
            SpawnError: The worker could not be started
            LaunchTimeoutError: The socket never appeared
        """
        if self.is_reachable():
            logger.debug(f"Daemon for session {self.session!r} already running")
            return

        candidates = self.candidates
        if candidates is None:
            candidates = worker_candidates()
        worker = find_worker(candidates)

        command = [self.runtime, str(worker)]
        logger.info(f"Starting daemon for session {self.session!r}: {' '.join(command)}")
        self._spawner(command, self.daemon_env())

        for attempt in range(self.poll_attempts):
            if self.handle.locate() is not None:
                logger.debug(f"Daemon socket ready after {attempt + 1} checks")
                return
            await asyncio.sleep(self.poll_interval)

        logger.warning(f"Daemon socket did not appear after {self.poll_attempts} checks")
        raise LaunchTimeoutError("Failed to start daemon")
