import pytest
import queue
import socket

import xchat


class Recorder(xchat.Consumer):
    """ A consumer that queues everything it is handed, so that tests can
        wait for events arriving on the dispatch thread.
    """

    def __init__(self):
        self.events = queue.Queue()

    def message_received(self, peer, timestamp, text):
        self.events.put(('message', peer, timestamp, text))

    def contact_created(self, peer):
        self.events.put(('contact', peer))

    def next(self, timeout=2):
        return self.events.get(timeout=timeout)


class ScriptedChannel(xchat.transport.Channel):
    """ A channel that never touches the network: receive() hands out the
        supplied (data, address, port) tuples in order, then fails the way
        a broken socket would.
    """

    def __init__(self, datagrams=(), **kwargs):
        xchat.transport.Channel.__init__(self, **kwargs)
        self.datagrams = list(datagrams)
        self.sent = list()
        self.refuse = False

    def send(self, data):
        if self.refuse:
            raise xchat.transport.TransportSendError('refused')
        self.sent.append(data)

    def receive(self):
        if self.datagrams:
            return self.datagrams.pop(0)
        raise xchat.transport.TransportReceiveError('no more datagrams')


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def scripted():
    return ScriptedChannel


@pytest.fixture
def backend():
    """ A UDP socket standing in for the xchat daemon. """

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(('127.0.0.1', 0))
    sock.settimeout(2)

    yield sock

    sock.close()


@pytest.fixture
def channel(backend):
    port = backend.getsockname()[1]
    channel = xchat.transport.Channel('127.0.0.1', port, bind_address='127.0.0.1')
    channel.open()

    yield channel

    channel.close()


@pytest.fixture
def running(channel, backend, recorder):
    """ A started dispatcher, after its greeting has reached the backend.
        Yields the dispatcher and the address the backend should reply to.
    """

    failures = list()
    dispatcher = xchat.Dispatcher(channel, recorder, fatal=failures.append)
    dispatcher.failures = failures
    dispatcher.start()

    greeting, address = backend.recvfrom(4096)
    assert greeting == b'hello world\n'

    yield dispatcher, address

    dispatcher.stop()
    assert failures == []


@pytest.fixture
def home(tmp_path, monkeypatch):
    """ Point the configuration directory at an empty temporary directory. """

    monkeypatch.setenv('XCHAT_HOME', str(tmp_path))
    monkeypatch.delenv('XCHAT_BACKEND_ADDRESS', raising=False)
    monkeypatch.delenv('XCHAT_BACKEND_PORT', raising=False)
    return tmp_path


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
