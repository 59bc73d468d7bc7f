"""Local socket links that carry pet positions between processes."""

from __future__ import annotations

import contextlib
import os
import socket
import tempfile
import zlib
from collections.abc import Callable, Iterable

from sumikko.protocol import Point, PointReader, encode_point

_UNIX = hasattr(socket, "AF_UNIX")
_FAMILY = socket.AF_UNIX if _UNIX else socket.AF_INET
_PORT_BASE = 20000
_PORT_SPAN = 20000
_CONNECT_TIMEOUT = 0.05
_CHUNK = 4096

Provide = Callable[[], Point]
Receive = Callable[[Point], None]
OnError = Callable[[], None]


def address_for(name: str) -> str | tuple[str, int]:
    """The socket address used for the link with the given name."""
    if not name:
        raise ValueError("link name must not be empty")
    if _UNIX:
        return os.path.join(tempfile.gettempdir(), f"sumikko-{name}.sock")
    return ("127.0.0.1", _PORT_BASE + zlib.crc32(name.encode()) % _PORT_SPAN)


class _Channel:
    """One non-blocking connection exchanging encoded points."""

    def __init__(self, sock: socket.socket) -> None:
        sock.setblocking(False)
        self.sock = sock
        self.reader = PointReader()

    def send(self, point: Point) -> None:
        self.sock.sendall(encode_point(point))

    def receive(self) -> tuple[list[Point], bool]:
        """Read what is available; return the points and whether it closed."""
        data = bytearray()
        closed = False
        while True:
            try:
                chunk = self.sock.recv(_CHUNK)
            except BlockingIOError:
                break
            if not chunk:
                closed = True
                break
            data += chunk
        return self.reader.feed(bytes(data)), closed

    def close(self) -> None:
        self.sock.close()


class PositionServer:
    """Listens under a name, sends a position to each client and reads replies."""

    def __init__(
        self,
        name: str,
        provide: Provide,
        receive: Receive,
        on_error: OnError | None = None,
    ) -> None:
        self.name = name
        self.address = address_for(name)
        self._provide = provide
        self._receive = receive
        self._on_error = on_error
        self._channels: list[_Channel] = []
        if _UNIX:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(self.address)
        listener = socket.socket(_FAMILY, socket.SOCK_STREAM)
        try:
            if not _UNIX:
                listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind(self.address)
            listener.listen()
            listener.setblocking(False)
        except OSError:
            listener.close()
            raise
        self._listener: socket.socket | None = listener

    def __enter__(self) -> PositionServer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def poll(self) -> int:
        """Accept new clients, read their replies; return points received."""
        if self._listener is None:
            return 0
        self._accept()
        return self._service()

    def _accept(self) -> None:
        assert self._listener is not None
        while True:
            try:
                sock, _ = self._listener.accept()
            except BlockingIOError:
                return
            channel = _Channel(sock)
            try:
                channel.send(self._provide())
            except OSError:
                channel.close()
                self._fail()
                continue
            self._channels.append(channel)

    def _service(self) -> int:
        received = 0
        alive = []
        for channel in self._channels:
            try:
                points, closed = channel.receive()
            except OSError:
                points, closed = [], True
            for point in points:
                self._receive(point)
                received += 1
            if closed:
                channel.close()
                self._fail()
            else:
                alive.append(channel)
        self._channels = alive
        return received

    def _fail(self) -> None:
        if self._on_error is not None:
            self._on_error()

    def close(self) -> None:
        """Drop every client and stop listening."""
        for channel in self._channels:
            channel.close()
        self._channels = []
        if self._listener is not None:
            self._listener.close()
            self._listener = None
            if _UNIX:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(self.address)


class PositionClient:
    """Reconnects on every poll, answering each received position with its own.

    On a failure it moves on to the next of its names, wrapping around.
    """

    def __init__(
        self,
        names: Iterable[str],
        provide: Provide,
        receive: Receive,
        on_error: OnError | None = None,
    ) -> None:
        self.names = tuple(names)
        if not self.names:
            raise ValueError("at least one server name is needed")
        self._provide = provide
        self._receive = receive
        self._on_error = on_error
        self._target = 0
        self._channel: _Channel | None = None

    def __enter__(self) -> PositionClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def target(self) -> str:
        """The name the next connection will be made to."""
        return self.names[self._target]

    def poll(self) -> int:
        """Serve the current connection, then reconnect; return points received."""
        received = self._service()
        self._disconnect()
        self._connect()
        return received

    def _service(self) -> int:
        channel = self._channel
        if channel is None:
            return 0
        received = 0
        try:
            points, closed = channel.receive()
            for point in points:
                self._receive(point)
                received += 1
                channel.send(self._provide())
        except OSError:
            closed = True
        if closed:
            self._fail()
        return received

    def _connect(self) -> None:
        sock = socket.socket(_FAMILY, socket.SOCK_STREAM)
        sock.settimeout(_CONNECT_TIMEOUT)
        try:
            sock.connect(address_for(self.target))
        except OSError:
            sock.close()
            self._fail()
            return
        self._channel = _Channel(sock)

    def _disconnect(self) -> None:
        if self._channel is not None:
            self._channel.close()
            self._channel = None

    def _fail(self) -> None:
        self._target = (self._target + 1) % len(self.names)
        if self._on_error is not None:
            self._on_error()

    def close(self) -> None:
        """Drop the current connection."""
        self._disconnect()