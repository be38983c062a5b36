"""Exception hierarchy for daemon supervision and the socket protocol.

Every error carries a ``kind`` string so the CLI can report failures in a
machine-readable form without inspecting the class.
"""


class AgentBrowserError(Exception):
    """Base class for all failures surfaced to the CLI."""

    kind = "Error"


class LaunchError(AgentBrowserError):
    """The daemon could not be made reachable."""

    kind = "LaunchError"


class WorkerNotFoundError(LaunchError):
    """No candidate worker entry point exists on disk."""

    kind = "WorkerNotFound"

    def __init__(self, searched):
        self.searched = list(searched)
        locations = ", ".join(str(p) for p in self.searched)
        super().__init__(f"Daemon not found. Looked in: {locations}")


class SpawnError(LaunchError):
    kind = "SpawnFailed"


class LaunchTimeoutError(LaunchError):
    kind = "LaunchTimeout"


class RpcError(AgentBrowserError):
    """A single request/response exchange failed."""

    kind = "RpcError"


class DaemonConnectionError(RpcError):
    """Connecting to the control socket failed before any bytes moved."""

    kind = "ConnectionError"


class InvalidResponseError(RpcError):
    kind = "InvalidResponse"


class ConnectionClosedError(RpcError):
    kind = "ConnectionClosed"


class RequestTimeoutError(RpcError):
    kind = "Timeout"
