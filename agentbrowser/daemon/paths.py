"""Session name resolution and the per-session file locations.

The socket and PID file live in the system temp directory and are derived
only from the session name, so every CLI invocation for the same session
talks to the same daemon.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

SESSION_ENV = "AGENT_BROWSER_SESSION"
DEFAULT_SESSION = "default"
FILE_PREFIX = "agent-browser"


@dataclass(frozen=True)
class SessionPaths:
    """Session name plus the two files the daemon owns for it."""
    session: str
    socket_path: Path
    pid_path: Path


def resolve_session(environ: Optional[Mapping[str, str]] = None) -> str:
    """Return the session name from the environment, or the default."""
    env = os.environ if environ is None else environ
    return env.get(SESSION_ENV) or DEFAULT_SESSION


def get_socket_path(session: str) -> Path:
    """Get control socket path for session."""
    return Path(tempfile.gettempdir()) / f"{FILE_PREFIX}-{session}.sock"


def get_pid_path(session: str) -> Path:
    """Get PID file path for session."""
    return Path(tempfile.gettempdir()) / f"{FILE_PREFIX}-{session}.pid"


def resolve(environ: Optional[Mapping[str, str]] = None) -> SessionPaths:
    """
    Resolve the session and its socket/PID paths.

    Args:
        environ: Environment mapping to read (default: os.environ)

    Returns:
        SessionPaths for the resolved session
    """
    session = resolve_session(environ)
    return SessionPaths(
        session=session,
        socket_path=get_socket_path(session),
        pid_path=get_pid_path(session),
    )
