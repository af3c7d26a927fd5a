"""Transport interface.

This is the (small) contract a datagram transport to the xchat daemon
follows. It lives outside :mod:`xchat.protocol` so the codec remains
independent of any socket.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Tuple


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError):
    """The local socket could not be created or bound."""


class TransportSendError(TransportError):
    """A datagram could not be sent to the daemon."""


class TransportReceiveError(TransportError):
    """Receiving from the socket failed."""


class Transport(ABC):
    """Minimal contract for a datagram transport."""

    @abstractmethod
    def open(self) -> None:
        """Create and bind the underlying socket."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying socket."""

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Send one datagram to the daemon."""

    @abstractmethod
    def receive(self) -> Tuple[bytes, str, int]:
        """Block for the next datagram; return (data, address, port)."""

    @abstractmethod
    def accepts(self, address: str, port: int) -> bool:
        """Whether a datagram from this origin is backend traffic."""

    def wake(self) -> None:
        """Unblock a pending :meth:`receive`, if the transport can."""

    @property
    def backend(self) -> Optional[Tuple[str, int]]:
        """The (address, port) datagrams are sent to."""
        return None

    @property
    def is_open(self) -> bool:
        """Whether the transport currently holds a socket."""
        return False
