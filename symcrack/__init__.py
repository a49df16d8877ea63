from .crypto import *
from .errors import DecodeWarning, EmptyKeyError, InvalidLengthError, PaddingError, SymcrackError
from .files import read_bytes, read_lines

__version__ = '0.1.0'
