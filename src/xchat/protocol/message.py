""" Class representations of what comes off the xchat socket: the parsed
    :class:`Frame`, used internally and for diagnostics, and the two events
    delivered to a consumer, :class:`IncomingMessage` and :class:`KeyOffer`.
"""

from . import fields


class Frame:
    """ The fields of a single decoded frame, largely in the order they
        appear on the wire. Any text field that could not be found in the
        datagram (no terminating null byte) is None.

        :ivar length: The length declared in the frame header.
        :ivar received: The number of bytes actually decoded.
        :ivar time: The 48-bit time field; seconds for data and broadcast
            frames, a hop limit for key frames.
        :ivar code: The frame code, see :mod:`xchat.protocol.fields`.
        :ivar peer: The name of the remote contact.
        :ivar texts: Any null-terminated text fields following the peer.
    """

    def __init__(self, length, received, time, code, peer=None, texts=()):

        self.length = length
        self.received = received
        self.time = time
        self.code = code
        self.peer = peer
        self.texts = tuple(texts)


    def __repr__(self):
        return '%s(length=%d, received=%d, time=%d, code=%d, peer=%r, texts=%r)' % (self.__class__.__name__, self.length, self.received, self.time, self.code, self.peer, self.texts)


    @property
    def broadcast(self):
        return self.code == fields.BROADCAST


    @property
    def text(self):
        """ The first text field following the peer, if any.
        """

        try:
            return self.texts[0]
        except IndexError:
            return None


    @property
    def secrets(self):
        """ The secrets carried by a key frame; empty for any other code.
        """

        if self.code == fields.KEY:
            return self.texts
        else:
            return ()


# end of class Frame



class Event:
    """ Base class for anything the dispatch loop hands to a consumer.
        Events compare equal when their type and attributes match.
    """

    attributes = ('peer',)

    def __init__(self, peer):
        self.peer = peer


    def __eq__(self, other):

        if type(self) is not type(other):
            return NotImplemented

        return self._values() == other._values()


    def __hash__(self):
        return hash((type(self),) + self._values())


    def __repr__(self):
        pairs = list()
        for attribute in self.attributes:
            pairs.append('%s=%r' % (attribute, getattr(self, attribute)))

        return '%s(%s)' % (self.__class__.__name__, ', '.join(pairs))


    def _values(self):
        return tuple(getattr(self, attribute) for attribute in self.attributes)


# end of class Event



class IncomingMessage(Event):
    """ A data or broadcast message from *peer*. The *timestamp* is in
        milliseconds since the epoch, the resolution the consumer interface
        uses, although the wire only carries whole seconds.
    """

    attributes = ('peer', 'timestamp', 'text', 'broadcast')

    def __init__(self, peer, timestamp, text, broadcast=False):
        Event.__init__(self, peer)
        self.timestamp = timestamp
        self.text = text
        self.broadcast = broadcast


# end of class IncomingMessage



class KeyOffer(Event):
    """ The daemon completed (or received) a key exchange with *peer*; from
        the consumer's perspective a new contact exists. The secrets used
        in the exchange are not carried.
    """

    pass


# end of class KeyOffer


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
