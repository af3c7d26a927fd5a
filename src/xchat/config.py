""" Settings for the connection to the xchat daemon. Defaults match the
    daemon's own; they can be overridden by a ``socket.json`` file in the
    configuration :func:`directory`, and that in turn by environment
    variables.
"""

import os

import orjson

from .protocol import fields
from .transport.udp import is_loopback


settings_filename = 'socket.json'


class Settings:
    """ A convenience class to hold the handful of values needed to open a
        channel and start a dispatcher. Keyword arguments override the
        defaults; unknown names raise :class:`ValueError`.
    """

    defaults = {
        'backend_address': '127.0.0.1',
        'backend_port': fields.BACKEND_PORT,
        'bind_address': '',
        'mtu': fields.MTU,
        'greeting': fields.GREETING.decode(),
        'hops': fields.HOPS,
    }

    integers = ('backend_port', 'mtu', 'hops')

    def __init__(self, **kwargs):

        for key in kwargs:
            if key in self.defaults:
                pass
            else:
                raise ValueError('unknown setting: ' + repr(key))

        for key,default in self.defaults.items():
            value = kwargs.get(key, default)
            setattr(self, key, self._validate(key, value))


    def __repr__(self):
        return 'Settings(' + repr(self.to_dict()) + ')'


    def __eq__(self, other):
        if isinstance(other, Settings):
            return self.to_dict() == other.to_dict()
        return NotImplemented


    def _validate(self, key, value):

        if key in self.integers:
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise ValueError('setting %s must be an integer, not %r' % (key, value))

            if value < 0:
                raise ValueError('setting %s cannot be negative: %d' % (key, value))

            if key == 'backend_port' and value > 65535:
                raise ValueError('backend_port out of range: %d' % (value))

            if key == 'hops' and value > fields.TIME_MAX:
                raise ValueError('hops out of range: %d' % (value))

            if key == 'mtu' and value < fields.HEADER_SIZE:
                raise ValueError('mtu too small to hold a frame: %d' % (value))

        else:
            value = str(value)

            if key == 'backend_address' and not is_loopback(value):
                raise ValueError('backend_address must be a loopback address, not %r' % (value))

        return value


    def copy(self, **kwargs):
        """ Return a new :class:`Settings` instance with the same values as
            this one, other than those named in *kwargs*.
        """

        values = self.to_dict()
        values.update(kwargs)
        return Settings(**values)


    @property
    def greeting_bytes(self):
        return self.greeting.encode()


    def to_dict(self):
        values = dict()
        for key in self.defaults:
            values[key] = getattr(self, key)

        return values


# end of class Settings



def directory(environ=None):
    """ Return the directory holding ``socket.json``: ``$XCHAT_HOME`` if it
        is set, otherwise ``.xchat`` in the user's home directory. *environ*
        defaults to :data:`os.environ`.
    """

    if environ is None:
        environ = os.environ

    try:
        return environ['XCHAT_HOME']
    except KeyError:
        pass

    return os.path.join(os.path.expanduser('~'), '.xchat')



def load(filename=None, environ=None):
    """ Return a :class:`Settings` instance. The defaults are updated with
        the contents of *filename*, if it exists; if no *filename* is given
        the ``socket.json`` file in the configuration :func:`directory` is
        used. Finally, the ``XCHAT_BACKEND_ADDRESS`` and ``XCHAT_BACKEND_PORT``
        environment variables, if set, take precedence. *environ* defaults
        to :data:`os.environ`.
    """

    if environ is None:
        environ = os.environ

    if filename is None:
        filename = os.path.join(directory(environ), settings_filename)

    values = dict()

    try:
        raw_json = open(filename, 'rb').read()
    except FileNotFoundError:
        pass
    else:
        try:
            loaded = orjson.loads(raw_json)
        except orjson.JSONDecodeError as e:
            raise ValueError('cannot parse %s: %s' % (filename, e))

        if isinstance(loaded, dict):
            pass
        else:
            raise ValueError('%s must contain a JSON object' % (filename))

        values.update(loaded)

    try:
        values['backend_address'] = environ['XCHAT_BACKEND_ADDRESS']
    except KeyError:
        pass

    try:
        values['backend_port'] = environ['XCHAT_BACKEND_PORT']
    except KeyError:
        pass

    return Settings(**values)


def save(settings, filename=None):
    """ Write *settings* to *filename*, defaulting to ``socket.json`` in the
        configuration :func:`directory`, creating the directory if needed.
    """

    if filename is None:
        base_directory = directory()
        filename = os.path.join(base_directory, settings_filename)

    parent = os.path.dirname(filename)

    if parent and not os.path.exists(parent):
        os.makedirs(parent, mode=0o775)

    raw_json = orjson.dumps(settings.to_dict(), option=orjson.OPT_INDENT_2)

    writer = open(filename, 'wb')
    writer.write(raw_json)
    writer.close()

    return filename


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
