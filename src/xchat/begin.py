""" Convenience entry point: load the settings, open the channel, and start
    a :class:`xchat.dispatch.Dispatcher` delivering to a consumer.
"""

import logging

from . import config
from .dispatch import Dispatcher
from .transport import Channel, TransportConnectionError


logger = logging.getLogger(__name__)


def start(consumer, settings=None, fatal=None):
    """ Return a running :class:`xchat.dispatch.Dispatcher` for *consumer*.
        If *settings* is None they are loaded with :func:`xchat.config.load`.
        There is nothing useful to do without the local socket, so failing to
        open it raises :class:`SystemExit` with a non-zero status.
    """

    if settings is None:
        settings = config.load()

    channel = Channel(settings.backend_address, settings.backend_port, settings.bind_address, settings.mtu)

    try:
        channel.open()
    except TransportConnectionError as e:
        logger.critical(str(e))
        raise SystemExit(1)

    dispatcher = Dispatcher(channel, consumer, settings.greeting_bytes, settings.hops, fatal)
    dispatcher.start()

    return dispatcher


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
