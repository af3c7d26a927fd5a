import pytest

import xchat
from xchat.config import Settings


def test_start(backend, recorder):

    port = backend.getsockname()[1]
    settings = Settings(backend_port=port, bind_address='127.0.0.1', greeting='howdy\n')

    failures = list()
    dispatcher = xchat.start(recorder, settings, fatal=failures.append)

    try:
        greeting, address = backend.recvfrom(4096)
        assert greeting == b'howdy\n'
        assert address == dispatcher.channel.local

        backend.sendto(xchat.protocol.encode_key_frame('bob', 'xyz', None, 5), address)
        assert recorder.next() == ('contact', 'bob')
    finally:
        dispatcher.stop()

    assert failures == []


def test_start_from_configuration(home, backend, recorder):

    port = backend.getsockname()[1]
    xchat.config.save(Settings(backend_port=port, bind_address='127.0.0.1'))

    dispatcher = xchat.start(recorder, fatal=lambda message: None)

    try:
        greeting, address = backend.recvfrom(4096)
        assert greeting == b'hello world\n'
        assert dispatcher.channel.backend == ('127.0.0.1', port)
    finally:
        dispatcher.stop()


def test_start_failure(recorder):

    # TEST-NET-1 is never assigned to a local interface.
    settings = Settings(bind_address='192.0.2.1')

    with pytest.raises(SystemExit) as raised:
        xchat.start(recorder, settings)

    assert raised.value.code == 1


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
