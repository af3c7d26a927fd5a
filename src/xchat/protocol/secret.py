""" Helpers for the shared secrets exchanged in key frames.
"""

import string


_keep = frozenset(string.ascii_letters + string.digits)


def normalize_secret(secret):
    """ Return *secret* with everything other than ASCII letters and digits
        removed, and the letters converted to uppercase. The daemon compares
        secrets in this form, so 'abc-def' and 'A B C D E F' are the same
        secret once normalized.
    """

    kept = list()
    for character in str(secret):
        if character in _keep:
            kept.append(character.upper())

    return ''.join(kept)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
