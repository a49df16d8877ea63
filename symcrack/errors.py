# base for everything raised by symcrack
class SymcrackError(Exception):
    pass

# buffer, block or key has a length the operation can't take
class InvalidLengthError(SymcrackError, ValueError):
    pass

# wrapping xor asked to cycle an empty key
class EmptyKeyError(SymcrackError, ValueError):
    pass

# PKCS7 padding doesn't check out
class PaddingError(SymcrackError, ValueError):
    pass

# xor output isn't valid utf-8, decoded with replacement characters
class DecodeWarning(UserWarning):
    pass
