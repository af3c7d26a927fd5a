"""Transport layer: the datagram channel to the xchat daemon."""

from .base import (
    Transport,
    TransportError,
    TransportConnectionError,
    TransportSendError,
    TransportReceiveError,
)
from .udp import Channel, is_loopback
