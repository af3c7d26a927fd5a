""" Python implementation of the xchat socket: the local link between a chat
    user interface and the xchat daemon. This includes the frame codec, the
    loopback UDP channel, and the dispatch loop delivering decoded messages
    and key exchanges to the user interface.
"""

# Submodules used by multiple other components.

from . import protocol
from . import transport
from . import config

# Primary public-facing interfaces.

from . import dispatch
from .dispatch import Consumer, Dispatcher

from . import begin
start = begin.start

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
