import xchat


def test_normalize():

    normalize = xchat.protocol.normalize_secret

    assert normalize('abc-def') == 'ABCDEF'
    assert normalize('A B C D E F') == 'ABCDEF'
    assert normalize('x1 y2, z3!') == 'X1Y2Z3'
    assert normalize('') == ''
    assert normalize('---') == ''


def test_not_applied_implicitly():

    encoded = xchat.protocol.encode_key_frame('bob', 'x-y z', None, 1)
    assert b'x-y z\x00' in encoded


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
