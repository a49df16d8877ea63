from .crypto import h2b, u64

DECODERS = {'hex': h2b, 'base64': u64}

def _decoder(encoding):
    try:
        return DECODERS[encoding]
    except KeyError:
        raise ValueError('unknown encoding %r, expected one of %s' % (encoding, ', '.join(DECODERS))) from None

# read a hex or base64 encoded file as one buffer, line breaks dropped
def read_bytes(path, encoding):
    decode = _decoder(encoding)
    with open(path) as fh:
        return decode(''.join(line.strip() for line in fh))

# read a hex or base64 encoded file, one buffer per non-empty line
def read_lines(path, encoding):
    decode = _decoder(encoding)
    with open(path) as fh:
        return [decode(line.strip()) for line in fh if line.strip()]
