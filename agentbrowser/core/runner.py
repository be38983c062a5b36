"""Run one CLI request end to end: ensure the daemon, then call it once."""

import logging
from typing import Optional

from agentbrowser.core.configs import ClientSettings
from agentbrowser.daemon.client import DaemonClient
from agentbrowser.daemon.launcher import DaemonLauncher, worker_candidates
from agentbrowser.daemon.liveness import DaemonHandle, FileDaemonHandle
from agentbrowser.daemon.paths import get_pid_path, get_socket_path, SessionPaths
from agentbrowser.daemon.protocol import Request, Response

logger = logging.getLogger(__name__)


def session_paths(settings: ClientSettings) -> SessionPaths:
    return SessionPaths(
        session=settings.session,
        socket_path=get_socket_path(settings.session),
        pid_path=get_pid_path(settings.session),
    )


def build_launcher(
    settings: ClientSettings,
    handle: Optional[DaemonHandle] = None,
) -> DaemonLauncher:
    """Create a DaemonLauncher configured from settings."""
    if handle is None:
        handle = FileDaemonHandle(session_paths(settings))
    return DaemonLauncher(
        handle=handle,
        session=settings.session,
        runtime=settings.runtime,
        poll_interval=settings.poll_interval,
        poll_attempts=settings.poll_attempts,
        candidates=worker_candidates(override=settings.daemon_path),
    )


async def send_request(request: Request, settings: ClientSettings) -> Response:
    """
    Make sure the session's daemon is up and send it one request.

    Raises:
        AgentBrowserError: Any launch or RPC failure, unretried
    """
    paths = session_paths(settings)
    await build_launcher(settings, FileDaemonHandle(paths)).ensure_reachable()

    client = DaemonClient(paths.socket_path, timeout=settings.request_timeout)
    logger.debug(f"Sending {request.action} request {request.id}")
    return await client.call(request)
