""" Encode and decode the binary frames exchanged with the xchat daemon.

    Layout, all integers big-endian:

        [length: 4][time or hops: 6][code: 1][peer\\0][text\\0]...

    The length includes itself. The time field holds seconds since the epoch
    for data and broadcast frames, and the hop limit for key frames. Text
    fields are UTF-8 and null-terminated; an empty string is a lone null byte.

    Every function here is pure: encoders allocate a buffer for the single
    call, decoders never read past the bound they are given.
"""

from __future__ import annotations

import logging
import time as timemodule
from typing import Optional, Tuple, Union

from . import fields
from .message import Frame, IncomingMessage, KeyOffer


logger = logging.getLogger(__name__)

Text = Union[str, bytes]


def _bound(data, bound: Optional[int]) -> int:
    if bound is None or bound > len(data):
        return len(data)
    return max(bound, 0)


def _as_bytes(text: Text) -> bytes:

    try:
        encoded = text.encode('utf-8')
    except AttributeError:
        encoded = bytes(text)

    if b'\x00' in encoded:
        raise ValueError('text fields cannot contain null bytes: ' + repr(text))

    return encoded


def _decode_uint(data, start: int, size: int, bound: Optional[int]) -> int:

    if start + size > _bound(data, bound):
        return 0

    return int.from_bytes(data[start:start + size], 'big')


def _encode_uint(buffer: bytearray, start: int, size: int, value: int) -> int:

    value = int(value)
    if value < 0 or value >= 1 << (size * 8):
        raise ValueError('%d does not fit in %d bytes' % (value, size))

    buffer[start:start + size] = value.to_bytes(size, 'big')
    return start + size


def decode_length(data, bound: Optional[int] = None, start: int = 0) -> int:
    """ Return the 32-bit length starting at *start*, or zero if fewer than
        four bytes are available before *bound*.
    """

    return _decode_uint(data, start, fields.LENGTH_SIZE, bound)


def encode_length(buffer: bytearray, start: int, value: int) -> int:
    return _encode_uint(buffer, start, fields.LENGTH_SIZE, value)


def decode_time48(data, bound: Optional[int] = None, start: int = fields.LENGTH_SIZE) -> int:
    """ Return the 48-bit time (or hop) field starting at *start*, or zero
        if fewer than six bytes are available before *bound*.
    """

    return _decode_uint(data, start, fields.TIME_SIZE, bound)


def encode_time48(buffer: bytearray, start: int, value: int) -> int:
    return _encode_uint(buffer, start, fields.TIME_SIZE, value)


def decode_string(data, start: int, bound: Optional[int] = None) -> Tuple[Optional[str], int]:
    """ Scan forward from *start* for a null byte, and return the decoded
        text in front of it along with the offset just past the null byte.
        A null byte at *start* is the empty string. If there is no null byte
        before *bound* the returned text is None, meaning the field is absent,
        and the returned offset is *bound*.
    """

    bound = _bound(data, bound)

    if start >= bound:
        return None, bound

    index = data.find(b'\x00', start, bound)

    if index == -1:
        return None, bound

    if index == start:
        return '', start + 1

    text = bytes(data[start:index])
    text = text.decode('utf-8', errors='replace')
    return text, index + 1


def encode_string(buffer: bytearray, start: int, text: Text) -> int:
    """ Write *text* and its terminating null byte into *buffer* at *start*,
        returning the offset following the null byte.
    """

    encoded = _as_bytes(text)
    end = start + len(encoded)

    if end + 1 > len(buffer):
        raise ValueError('buffer too small for %d bytes at offset %d' % (len(encoded) + 1, start))

    buffer[start:end] = encoded
    buffer[end] = 0
    return end + 1


def encode_message_frame(peer: Text, text: Text, broadcast: bool = False, when: Optional[float] = None) -> Tuple[bytes, float]:
    """ Build a data frame (or a broadcast frame, if *broadcast* is True)
        addressed to *peer*. Returns the frame and its origination time,
        in seconds since the epoch; the frame itself only carries the whole
        seconds, the returned value keeps full resolution so that callers
        can derive a millisecond correlation id.
    """

    peer = _as_bytes(peer)
    text = _as_bytes(text)

    if when is None:
        when = timemodule.time()

    size = len(peer) + len(text) + 2 + fields.HEADER_SIZE
    buffer = bytearray(size)

    encode_length(buffer, 0, size)
    encode_time48(buffer, fields.LENGTH_SIZE, int(when))

    if broadcast:
        buffer[fields.CODE_OFFSET] = fields.BROADCAST
    else:
        buffer[fields.CODE_OFFSET] = fields.DATA

    offset = encode_string(buffer, fields.HEADER_SIZE, peer)
    encode_string(buffer, offset, text)

    return bytes(buffer), when


def encode_key_frame(peer: Text, secret1: Text, secret2: Optional[Text], hops: int) -> bytes:
    """ Build a key exchange frame for *peer*. The *hops* limit occupies the
        time field. The second secret is optional; if it is None or empty it
        is left out of the frame entirely.
    """

    peer = _as_bytes(peer)
    secret1 = _as_bytes(secret1)

    if secret2:
        secret2 = _as_bytes(secret2)
    else:
        secret2 = None

    size = len(peer) + len(secret1) + 2 + fields.HEADER_SIZE
    if secret2 is not None:
        size += len(secret2) + 1

    buffer = bytearray(size)

    encode_length(buffer, 0, size)
    encode_time48(buffer, fields.LENGTH_SIZE, hops)
    buffer[fields.CODE_OFFSET] = fields.KEY

    offset = encode_string(buffer, fields.HEADER_SIZE, peer)
    offset = encode_string(buffer, offset, secret1)

    if secret2 is not None:
        encode_string(buffer, offset, secret2)

    return bytes(buffer)


def parse_frame(data, length: Optional[int] = None) -> Optional[Frame]:
    """ Break *data* into its fields, considering only the first *length*
        bytes (all of *data* if *length* is None). Returns None if there
        are not enough bytes for the fixed header. A declared length that
        disagrees with *length*, or an unknown code, is logged but does not
        stop the parse.
    """

    received = _bound(data, length)

    if received < fields.HEADER_SIZE:
        return None

    declared = decode_length(data, received)
    if declared != received:
        logger.warning('embedded length %d, received %d', declared, received)

    time = decode_time48(data, received)
    code = data[fields.CODE_OFFSET]

    if code not in fields.CODES:
        logger.warning('unknown message code %d', code)

    peer, offset = decode_string(data, fields.HEADER_SIZE, received)

    if code in (fields.DATA, fields.BROADCAST):
        limit = 1
    elif code == fields.KEY:
        limit = 2
    else:
        limit = None

    texts = list()
    while offset < received:
        if limit is not None and len(texts) >= limit:
            break

        text, offset = decode_string(data, offset, received)
        if text is None:
            break

        texts.append(text)

    return Frame(declared, received, time, code, peer, texts)


def to_event(frame: Frame):
    """ Translate a parsed :class:`Frame` into the event a consumer will see,
        or None if frames with this code are not delivered.
    """

    code = frame.code

    if code == fields.DATA or code == fields.BROADCAST:
        logger.info('message from %r', frame.peer)
        return IncomingMessage(frame.peer, frame.time * 1000, frame.text, frame.broadcast)

    if code == fields.KEY:
        logger.info('new key from %r', frame.peer)
        return KeyOffer(frame.peer)

    if code == fields.SECRET:
        logger.info('ignoring secret frame from %r', frame.peer)
    else:
        logger.warning('dropping frame with unknown code %d', code)

    return None


def decode_frame(data, length: Optional[int] = None):
    """ Decode the datagram in *data* and return the resulting event, an
        :class:`IncomingMessage` or a :class:`KeyOffer`, or None if the
        frame is too short or its code is not one that produces an event.
    """

    frame = parse_frame(data, length)

    if frame is None:
        return None

    return to_event(frame)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
