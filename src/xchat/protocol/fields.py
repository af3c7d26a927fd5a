"""Protocol constants for the xchat socket frames.

Keep these in one place to avoid magic numbers in the codec and the loop.
"""

# Frame codes, the single byte following the length and time fields.

DATA = 0
BROADCAST = 1
KEY = 2
SECRET = 3

CODES = (DATA, BROADCAST, KEY, SECRET)

# Fixed header: 4 bytes of length, 6 bytes of time (or hops), 1 byte of code.

LENGTH_SIZE = 4
TIME_SIZE = 6
CODE_OFFSET = LENGTH_SIZE + TIME_SIZE
HEADER_SIZE = CODE_OFFSET + 1

# The time field is 48 bits wide whether it holds seconds or a hop limit.

TIME_MAX = (1 << 48) - 1

# The xchat daemon listens on this port, and only datagrams from this port
# on a loopback address are accepted as backend traffic.

BACKEND_PORT = 0xA11C

# Maximum datagram size exchanged with the daemon; sizes the receive buffer.

MTU = 12288

GREETING = b'hello world\n'

# Hop limit for key requests that do not specify one.

HOPS = 6


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
