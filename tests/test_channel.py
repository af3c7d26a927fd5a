import logging
import pytest

from xchat.protocol import fields
from xchat.transport import (
    Channel,
    TransportConnectionError,
    TransportReceiveError,
    TransportSendError,
    is_loopback,
)


def test_defaults():

    channel = Channel()
    assert channel.backend == ('127.0.0.1', 0xa11c)
    assert channel.mtu == 12288
    assert channel.is_open == False
    assert channel.local is None


def test_loopback_backend_only():

    assert Channel('127.0.0.2').backend_address == '127.0.0.2'
    assert Channel('::1').backend_address == '::1'

    for address in ('192.0.2.10', '10.0.0.1', 'example.com'):
        with pytest.raises(ValueError):
            Channel(address)


def test_open(channel):

    assert channel.is_open == True

    address, port = channel.local
    assert address == '127.0.0.1'
    assert port != 0

    # Opening again is harmless.
    assert channel.open() is channel
    assert channel.local == (address, port)


def test_open_failure():

    # TEST-NET-1 is never assigned to a local interface.
    channel = Channel(bind_address='192.0.2.1')

    with pytest.raises(TransportConnectionError):
        channel.open()

    assert channel.is_open == False


def test_send(channel, backend):

    channel.send(b'\x00\x00\x00\x0bdatagram')
    data, origin = backend.recvfrom(4096)

    assert data == b'\x00\x00\x00\x0bdatagram'
    assert origin == channel.local


def test_receive(channel, backend):

    backend.sendto(b'reply', channel.local)
    data, address, port = channel.receive()

    assert data == b'reply'
    assert (address, port) == backend.getsockname()
    assert channel.accepts(address, port)


def test_closed(channel):

    channel.close()
    assert channel.is_open == False

    with pytest.raises(TransportSendError):
        channel.send(b'nothing')

    with pytest.raises(TransportReceiveError):
        channel.receive()

    # Closing twice, or waking a closed channel, does nothing.
    channel.close()
    channel.wake()


def test_accepts(caplog):

    channel = Channel()

    assert channel.accepts('127.0.0.1', fields.BACKEND_PORT)
    assert channel.accepts('127.1.2.3', fields.BACKEND_PORT)
    assert channel.accepts('::1', fields.BACKEND_PORT)

    with caplog.at_level(logging.WARNING, logger='xchat.transport.udp'):
        assert not channel.accepts('127.0.0.1', fields.BACKEND_PORT + 1)
        assert not channel.accepts('10.0.0.5', fields.BACKEND_PORT)

    assert 'only accepting from %d' % (fields.BACKEND_PORT) in caplog.text
    assert 'only accepting from loopback' in caplog.text


def test_is_loopback():

    assert is_loopback('127.0.0.1')
    assert is_loopback('::1')
    assert not is_loopback('192.168.1.1')
    assert not is_loopback('localhost')
    assert not is_loopback('')


def test_wake(channel):

    channel.wake()
    data, address, port = channel.receive()

    assert data == b''
    assert (address, port) == channel.local

    # The wake datagram is not from the backend.
    assert not channel.accepts(address, port)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
