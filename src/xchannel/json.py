''' Wrapper module providing the equivalent of :func:`json.loads` and
    :func:`json.dumps` for envelopes crossing a serializing transport.
'''

import msgspec


# The msgspec 'encode' operation returns bytes. Anything that is handed
# to a transport as encoded JSON is therefore bytes, never str.

encoder = msgspec.json.Encoder()
decoder = msgspec.json.Decoder()

# Raised for encoding and decoding failures other than unsupported types,
# which raise TypeError.

Error = msgspec.MsgspecError


def dumps(value):
    ''' Encode *value* as JSON bytes. A TypeError is raised for values
        that have no JSON representation, such as exception instances or
        dictionaries keyed by None.
    '''

    return encoder.encode(value)


def loads(encoded):
    ''' Decode JSON *encoded* as bytes or str into Python-native values.
    '''

    return decoder.decode(encoded)


def clone(value):
    ''' Return a deep copy of *value* as it would appear on the far side
        of a serializing transport: tuples become lists, non-string
        dictionary keys become strings.
    '''

    return decoder.decode(encoder.encode(value))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
