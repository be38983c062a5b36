"""Daemon supervision and IPC for agent-browser.

The browser runs in a separate long-lived process so each CLI invocation
only pays for a socket round trip.

Architecture:
- paths: session name and the socket/PID file locations derived from it
- liveness: PID-file probe and the DaemonHandle abstraction
- DaemonLauncher: starts the daemon detached and waits for its socket
- DaemonClient: one JSON-lines request/response per connection
"""

from agentbrowser.daemon.client import DaemonClient
from agentbrowser.daemon.launcher import DaemonLauncher
from agentbrowser.daemon.liveness import DaemonHandle, FileDaemonHandle, is_alive
from agentbrowser.daemon.paths import SessionPaths, resolve
from agentbrowser.daemon.protocol import (
    Request,
    Response,
    serialize_request,
    deserialize_response,
)

__all__ = [
    "DaemonClient",
    "DaemonLauncher",
    "DaemonHandle",
    "FileDaemonHandle",
    "is_alive",
    "SessionPaths",
    "resolve",
    "Request",
    "Response",
    "serialize_request",
    "deserialize_response",
]
