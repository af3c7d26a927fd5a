""" The receive loop connecting the xchat daemon to a user interface. A
    :class:`Dispatcher` owns a :class:`xchat.transport.Channel`, runs one
    background thread reading datagrams from it, and hands decoded events
    to a :class:`Consumer`. The same instance exposes the send operations
    the user interface drives: :func:`Dispatcher.send_to_peer`,
    :func:`Dispatcher.send_broadcast` and :func:`Dispatcher.send_key_request`.
"""

import logging
import os
import threading
import weakref

from abc import ABC, abstractmethod

from .protocol import fields
from .protocol import wire
from .protocol.message import IncomingMessage, KeyOffer
from .transport import TransportError


logger = logging.getLogger(__name__)

STARTING = 'Starting'
RUNNING = 'Running'
STOPPED = 'Stopped'


class Consumer(ABC):
    """ The interface a user interface implements to receive events from a
        :class:`Dispatcher`. Both methods are invoked on the dispatch thread,
        one at a time; they should return promptly, no further datagrams are
        read until they do.
    """

    @abstractmethod
    def message_received(self, peer, timestamp, text):
        """ A message from *peer* arrived; *timestamp* is the original send
            time in milliseconds since the epoch.
        """

    @abstractmethod
    def contact_created(self, peer):
        """ A key exchange with *peer* completed.
        """


# end of class Consumer



def terminate(message):
    """ The default fatal handler: log *message* and end the process with a
        non-zero status. This runs on the dispatch thread, where
        :func:`sys.exit` would only end the thread.
    """

    logger.critical(message)
    logging.shutdown()
    os._exit(1)


def _reference(thing):
    """ Return a weak reference to the supplied callable, using
        :class:`weakref.WeakMethod` for bound methods so that they do not
        immediately go out of scope.
    """

    try:
        thing.__func__
        thing.__self__
    except AttributeError:
        return weakref.ref(thing)
    else:
        return weakref.WeakMethod(thing)



class Dispatcher:
    """ Read and decode every datagram arriving on *channel*, delivering the
        results to *consumer*. The *channel* must already be open; the
        dispatcher takes ownership of it, and closes it in :func:`stop`.

        Conditions that leave the channel unusable (the greeting cannot be
        sent, a receive fails) are passed as a message to *fatal*, which
        defaults to :func:`terminate`. A replacement handler that returns
        ends the dispatch thread instead of the process.

        :ivar state: One of 'Starting', 'Running' or 'Stopped'.
        :ivar hops: The hop limit used for key requests that do not name one.
    """

    def __init__(self, channel, consumer=None, greeting=fields.GREETING, hops=fields.HOPS, fatal=None):

        if consumer is not None:
            if isinstance(consumer, Consumer):
                pass
            else:
                for method in ('message_received', 'contact_created'):
                    if callable(getattr(consumer, method, None)):
                        pass
                    else:
                        raise TypeError('consumer must implement ' + method + '()')

        if fatal is None:
            fatal = terminate

        self.channel = channel
        self.consumer = consumer
        self.greeting = greeting
        self.hops = int(hops)
        self.fatal = fatal

        self.callbacks = list()
        self.shutdown = False
        self.state = STARTING
        self.thread = None


    def start(self):
        """ Start the background thread. The greeting is sent from that thread
            before the first receive.
        """

        if self.thread is not None:
            raise RuntimeError('dispatcher already started')

        self.thread = threading.Thread(target=self.run, name='xchat-dispatch')
        self.thread.daemon = True
        self.thread.start()


    def stop(self, timeout=1):
        """ Stop the background thread and close the channel. Any further
            sends will fail.
        """

        self.shutdown = True

        try:
            self.channel.wake()
        except TransportError:
            pass

        thread = self.thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

        self.channel.close()
        self.state = STOPPED


    def register(self, callback):
        """ Register a callback that will be invoked with every decoded event,
            an :class:`xchat.protocol.IncomingMessage` or a
            :class:`xchat.protocol.KeyOffer`. Only a weak reference to the
            callback is retained; the caller is responsible for keeping it
            alive. As with the consumer, callbacks run on the dispatch thread
            and should be as lightweight as possible.
        """

        if callable(callback):
            pass
        else:
            raise TypeError('callback must be callable')

        reference = _reference(callback)
        self.callbacks.append(reference)


    def run(self):

        logger.info('running xchat dispatcher, backend at %r', self.channel.backend)

        # The greeting is the first thing the daemon sees of a running loop.
        self.state = RUNNING

        try:
            self.channel.send(self.greeting)
        except TransportError as e:
            self.state = STOPPED
            self.fatal('unable to send initial packet: ' + str(e))
            return

        while True:
            try:
                data, address, port = self.channel.receive()
            except TransportError as e:
                if self.shutdown:
                    break
                self.state = STOPPED
                self.fatal('unable to receive messages, terminating: ' + str(e))
                return

            if self.shutdown:
                break

            if self.channel.accepts(address, port):
                self.dispatch(data)

        self.state = STOPPED


    def dispatch(self, data, length=None):
        """ Decode one datagram and deliver the resulting event, if any.
        """

        event = wire.decode_frame(data, length)

        if event is None:
            return

        self.propagate(event)


    def propagate(self, event):
        """ Invoke the consumer and any/all callbacks registered via
            :func:`register` for a newly decoded event. Exceptions raised
            by a recipient are logged; they do not stop the loop.
        """

        consumer = self.consumer

        if consumer is not None:
            try:
                if isinstance(event, IncomingMessage):
                    consumer.message_received(event.peer, event.timestamp, event.text)
                elif isinstance(event, KeyOffer):
                    consumer.contact_created(event.peer)
            except Exception:
                logger.exception('consumer failed to handle %r', event)

        invalid = list()

        for reference in self.callbacks:
            callback = reference()

            if callback is None:
                invalid.append(reference)
                continue

            try:
                callback(event)
            except Exception:
                logger.exception('callback failed to handle %r', event)
                continue

        for reference in invalid:
            self.callbacks.remove(reference)


    def _send_message(self, peer, text, broadcast):

        frame, when = wire.encode_message_frame(peer, text, broadcast)

        try:
            self.channel.send(frame)
        except TransportError as e:
            logger.error('send exception: %s', e)
            return -1

        return int(when * 1000)


    def send_to_peer(self, peer, text):
        """ Send *text* to *peer* by way of the daemon. Returns the send time
            in milliseconds, which doubles as the correlation id for this
            message, or -1 if the datagram could not be sent. A *peer* or
            *text* containing a null byte raises :class:`ValueError`.
        """

        return self._send_message(peer, text, False)


    def send_broadcast(self, peer, text):
        """ The same as :func:`send_to_peer`, but flagging the message as a
            broadcast.
        """

        return self._send_message(peer, text, True)


    def send_key_request(self, peer, secret1, secret2=None, hops=None):
        """ Ask the daemon to exchange keys with *peer* using the supplied
            secret(s), relaying at most *hops* times. Returns True if the
            request was sent, False otherwise.
        """

        if hops is None:
            hops = self.hops

        frame = wire.encode_key_frame(peer, secret1, secret2, hops)

        try:
            self.channel.send(frame)
        except TransportError as e:
            logger.error('send exception: %s', e)
            return False

        return True


# end of class Dispatcher


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
