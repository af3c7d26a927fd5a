""" The xchat socket protocol: frame layout constants, the decoded frame and
    event classes, and the codec translating between them and bytes. None of
    this touches a socket; see :mod:`xchat.transport` for that.
"""

from . import fields
from . import message
from . import secret
from . import wire

from .message import Frame, Event, IncomingMessage, KeyOffer
from .secret import normalize_secret
from .wire import decode_frame, encode_key_frame, encode_message_frame, parse_frame


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
