"""Lightweight client for daemon communication.

Each call opens one Unix socket connection, writes one JSON line and waits
for one reply. Waiting is driven entirely by event-loop callbacks: data
arriving, the peer closing and the call-wide timer all race to settle the
same future, and only the first one counts.

Usage:
    client = DaemonClient(socket_path, timeout=15.0)
    response = await client.call(Request("url"))
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from agentbrowser.daemon.errors import (
    ConnectionClosedError,
    DaemonConnectionError,
    InvalidResponseError,
    RequestTimeoutError,
    RpcError,
)
from agentbrowser.daemon.protocol import (
    Request,
    Response,
    deserialize_response,
    serialize_request,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class ResponseProtocol(asyncio.Protocol):
    """
    Collects exactly one framed reply for one request.

    States: connecting -> connected -> awaiting -> resolved | failed.
    Once the future is settled every later callback is a no-op.
    """

    def __init__(self, request_line: bytes, future: asyncio.Future):
        self.state = "connecting"
        self._request_line = request_line
        self._future = future
        self._buffer = bytearray()
        self._transport: Optional[asyncio.Transport] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def settled(self) -> bool:
        return self._future.done()

    def start_timer(self, delay: float) -> None:
        """Arm the call-wide timeout for whatever time is left."""
        if self.settled:
            return
        loop = self._future.get_loop()
        self._timer = loop.call_later(delay, self.expire)

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self._transport = transport
        if self.settled:
            transport.abort()
            return
        self.state = "connected"
        transport.write(self._request_line)
        self.state = "awaiting"

    def data_received(self, data: bytes) -> None:
        if self.settled:
            return
        self._buffer.extend(data)
        newline = self._buffer.find(b"\n")
        if newline == -1:
            return
        line = bytes(self._buffer[:newline])
        try:
            response = deserialize_response(line)
        except ValueError as e:
            self._fail(InvalidResponseError(f"Invalid JSON response: {e}"))
            return
        self._resolve(response)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if self.settled:
            return
        if exc is not None:
            logger.debug(f"Connection lost: {exc}")
        # Peer may write its reply and close without a trailing newline
        remainder = bytes(self._buffer).strip()
        if remainder:
            try:
                response = deserialize_response(remainder)
            except ValueError:
                self._fail(ConnectionClosedError("Connection closed"))
                return
            self._resolve(response)
            return
        self._fail(ConnectionClosedError("Connection closed"))

    def expire(self) -> None:
        """Timer callback: fail the call and tear the connection down."""
        if self.settled:
            return
        self._fail(RequestTimeoutError("Timeout"), abort=True)

    def release(self) -> None:
        """Drop the timer and the connection. Safe to call repeatedly."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._transport is not None and not self._transport.is_closing():
            self._transport.abort()

    def _resolve(self, response: Response) -> None:
        self.state = "resolved"
        self._future.set_result(response)
        self._finish(abort=False)

    def _fail(self, error: RpcError, abort: bool = False) -> None:
        self.state = "failed"
        self._future.set_exception(error)
        self._finish(abort=abort)

    def _finish(self, abort: bool) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._transport is None or self._transport.is_closing():
            return
        if abort:
            self._transport.abort()
        else:
            self._transport.close()


class DaemonClient:
    """
    Framed request/response client for the daemon's control socket.

    No connection pooling and no retries: a failed call raises and the
    caller decides what to do.
    """

    def __init__(self, socket_path: Path, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize client.

        Args:
            socket_path: Path to the daemon's Unix socket
            timeout: Seconds allowed for connect plus reply
        """
        self.socket_path = Path(socket_path)
        self.timeout = timeout

    async def call(self, request: Request) -> Response:
        """
        Send one request and wait for its reply.

        Raises:
            DaemonConnectionError: Socket missing, refused or not permitted
            InvalidResponseError: First line of the reply is not a JSON object
            ConnectionClosedError: Peer closed without a usable reply
            RequestTimeoutError: No reply within the timeout
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        protocol = ResponseProtocol(serialize_request(request), future)
        deadline = loop.time() + self.timeout

        logger.debug(f"Connecting to {self.socket_path}")
        try:
            await asyncio.wait_for(
                loop.create_unix_connection(lambda: protocol, str(self.socket_path)),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            protocol.release()
            raise RequestTimeoutError("Timeout") from None
        except OSError as e:
            protocol.release()
            raise DaemonConnectionError(
                f"Cannot connect to daemon at {self.socket_path}: {e}"
            ) from e

        protocol.start_timer(max(0.0, deadline - loop.time()))
        try:
            response = await future
        finally:
            protocol.release()

        if response.id is not None and response.id != request.id:
            logger.warning(
                f"Response id {response.id!r} does not match request id {request.id!r}"
            )
        logger.debug(f"Request {request.id} resolved (success={response.success})")
        return response
