"""Loopback UDP channel to the xchat daemon."""

from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Optional, Tuple

from ..protocol import fields
from .base import (
    Transport,
    TransportConnectionError,
    TransportReceiveError,
    TransportSendError,
)


logger = logging.getLogger(__name__)


def is_loopback(address: str) -> bool:
    try:
        return ipaddress.ip_address(address).is_loopback
    except ValueError:
        return False


class Channel(Transport):
    """Own the single UDP socket used to talk to the daemon.

    Datagrams are sent to *backend_address*:*backend_port*. Inbound traffic
    is only trusted if it comes from *backend_port* on a loopback address;
    see :meth:`accepts`.
    """

    def __init__(
        self,
        backend_address: str = '127.0.0.1',
        backend_port: int = fields.BACKEND_PORT,
        bind_address: str = '',
        mtu: int = fields.MTU,
    ):
        if not is_loopback(backend_address):
            raise ValueError(
                f"backend address must be a loopback address, not {backend_address!r}"
            )

        self.backend_address = backend_address
        self.backend_port = int(backend_port)
        self.bind_address = bind_address
        self.mtu = int(mtu)

        self._sock: Optional[socket.socket] = None

    def __repr__(self) -> str:
        return f"Channel(backend={self.backend!r}, local={self.local!r})"

    @property
    def backend(self) -> Tuple[str, int]:
        return (self.backend_address, self.backend_port)

    @property
    def local(self) -> Optional[Tuple[str, int]]:
        """The (address, port) the socket is bound to, once open."""
        if self._sock is None:
            return None
        return self._sock.getsockname()[:2]

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def open(self) -> "Channel":
        if self._sock is not None:
            return self

        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as e:
            raise TransportConnectionError(f"unable to open socket: {e}") from e

        try:
            sock.bind((self.bind_address, 0))
        except OSError as e:
            sock.close()
            raise TransportConnectionError(f"unable to bind socket: {e}") from e

        self._sock = sock
        logger.debug("bound %r, backend at %r", self.local, self.backend)
        return self

    def close(self) -> None:
        sock = self._sock
        self._sock = None

        if sock is None:
            return

        try:
            sock.close()
        except OSError:
            pass

    def send(self, data: bytes) -> None:
        sock = self._sock
        if sock is None:
            raise TransportSendError("channel is not open")

        try:
            sock.sendto(data, self.backend)
        except OSError as e:
            raise TransportSendError(f"send to {self.backend!r} failed: {e}") from e

    def receive(self) -> Tuple[bytes, str, int]:
        sock = self._sock
        if sock is None:
            raise TransportReceiveError("channel is not open")

        try:
            data, origin = sock.recvfrom(self.mtu)
        except OSError as e:
            raise TransportReceiveError(f"receive failed: {e}") from e

        logger.debug("received %d bytes from %r", len(data), origin)
        return data, origin[0], origin[1]

    def wake(self) -> None:
        """Send an empty datagram to our own socket, unblocking a receive."""
        sock = self._sock
        if sock is None:
            return

        address, port = sock.getsockname()[:2]
        if address in ('', '0.0.0.0'):
            address = '127.0.0.1'

        try:
            sock.sendto(b'', (address, port))
        except OSError as e:
            raise TransportSendError(f"wake failed: {e}") from e

    def accepts(self, address: str, port: int) -> bool:
        if port != self.backend_port:
            logger.warning(
                "packet from port %d, only accepting from %d", port, self.backend_port
            )
            return False

        if not is_loopback(address):
            logger.warning(
                "packet from address %s, only accepting from loopback address", address
            )
            return False

        return True
