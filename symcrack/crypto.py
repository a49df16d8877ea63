import logging
import operator
import random
import warnings
import Crypto.Cipher.AES

from base64 import b64decode, b64encode
from binascii import hexlify, unhexlify
from collections import Counter, namedtuple
from functools import wraps
from itertools import combinations, cycle
from types import MappingProxyType

from .errors import DecodeWarning, EmptyKeyError, InvalidLengthError, PaddingError

__all__ = [
    'BLOCK_SIZE', 'ZERO_IV', 'KEYSIZE_MIN', 'KEYSIZE_MAX', 'KEYSIZE_BLOCKS', 'KEYSIZE_CANDIDATES',
    'freq', 'UPPER_RATIO', 'SPACE_FREQ', 'normalize_map', 'eng_freq',
    'KeysizeCandidate', 'SingleByteGuess', 'RepeatingKeyBreak',
    'b_inp', 'break_pieces', 'h2b', 'b2h', 'b64', 'u64', 'hex2base64', 'decode_text',
    'xor', 'repeating_xor', 'hamming_distance',
    'reference_frequency', 'build_frequency_map', 'frequency_error', 'score_text',
    'solve_single_byte', 'detect_single_byte', 'score_keysizes', 'rank_keysizes',
    'transpose', 'break_repeating_xor', 'crack_repeating_xor',
    'aes128_ecb_encrypt', 'aes128_ecb_decrypt', 'pad_to', 'is_padding_valid', 'unpad',
    'aes_enc_ecb', 'aes_dec_ecb', 'aes_enc_cbc', 'aes_dec_cbc',
    'count_repeated_blocks', 'detect_ecb', 'randr', 'ecb_cbc_oracle', 'is_func_ecb',
]

log = logging.getLogger(__name__)

BLOCK_SIZE = 16
ZERO_IV = bytes(BLOCK_SIZE)
KEYSIZE_MIN = 2
KEYSIZE_MAX = 40
# leading blocks compared when scoring a keysize
KEYSIZE_BLOCKS = 4
KEYSIZE_CANDIDATES = 3

# relative frequency of lowercase letters in english
freq = {'a': 0.0834, 'b': 0.0154, 'c': 0.0273, 'd': 0.0414, 'e': 0.1260, 'f': 0.0203, 'g': 0.0192, 'h': 0.0611, 'i': 0.0671, 'j': 0.0023, 'k': 0.0087, 'l': 0.0424, 'm': 0.0253, 'n': 0.0680, 'o': 0.0770, 'p': 0.0166, 'q': 0.0009, 'r': 0.0568, 's': 0.0611, 't': 0.0937, 'u': 0.0285, 'v': 0.0106, 'w': 0.0234, 'x': 0.0020, 'y': 0.0204, 'z': 0.0006}
# capitals are rare compared to their lowercase form
UPPER_RATIO = 1 / 30
# average word length 4.7, plus one for the space
SPACE_FREQ = 1 / 5.7

# scale map values so they sum to 1
def normalize_map(m):
    total = sum(m.values())
    return {k: v / total for k, v in m.items()}

def _reference_table():
    table = dict(freq)
    table.update((k.upper(), v * UPPER_RATIO) for k, v in freq.items())
    table[' '] = SPACE_FREQ
    return normalize_map(table)

# reference distribution that candidate plaintexts are scored against
eng_freq = MappingProxyType(_reference_table())

KeysizeCandidate = namedtuple('KeysizeCandidate', 'score keysize')
SingleByteGuess = namedtuple('SingleByteGuess', 'plaintext error key')
RepeatingKeyBreak = namedtuple('RepeatingKeyBreak', 'keysize key plaintext error')

def _to_bytes(x):
    if isinstance(x, str):
        return x.encode('utf-8')
    if isinstance(x, (bytearray, memoryview)):
        return bytes(x)
    return x

# decorator to translate strings and bytearrays to bytes
def b_inp(r):
    def wrapper(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            args2 = [_to_bytes(x) if i in r else x for (i, x) in enumerate(args)]
            return f(*args2, **kwargs)
        return wrapped
    return wrapper

# break a buffer into pieces of same length, the last one may be short
break_pieces = lambda s, l: [s[i:i+l] for i in range(0, len(s), l)]
# hex str to bytes
h2b = lambda x: unhexlify(x.strip())
# bytes to hex str
b2h = b_inp([0])(lambda x: hexlify(x).decode('ascii'))
# base64 encode to str
b64 = b_inp([0])(lambda x: b64encode(x).decode('ascii'))
# base64 decode to bytes
u64 = lambda x: b64decode(x)
# hex str to base64 str
hex2base64 = lambda x: b64(h2b(x))

# decode bytes as text, invalid sequences become replacement characters
def decode_text(data, warn=False):
    data = bytes(data)
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as e:
        if warn:
            warnings.warn('undecodable bytes at %d-%d' % (e.start, e.end), DecodeWarning, stacklevel=2)
        return data.decode('utf-8', errors='replace')

# xor two buffers, the result is as long as the longer one.
# without wrap the shorter one is padded with zeroes, with wrap it repeats
@b_inp([0, 1])
def xor(a, b, wrap=False):
    if len(a) < len(b):
        a, b = b, a
    if not wrap:
        return bytes(map(operator.xor, a, b)) + a[len(b):]
    if not b:
        raise EmptyKeyError('cannot repeat an empty buffer over %d bytes' % len(a))
    return bytes(map(operator.xor, a, cycle(b)))

# encrypt or decrypt msg with a repeating key, output is as long as msg
@b_inp([0, 1])
def repeating_xor(txt, key):
    if not key:
        raise EmptyKeyError('repeating xor needs a key')
    return bytes(map(operator.xor, txt, cycle(key)))

# number of differing bits. bytes past the end of the shorter buffer
# are compared against zero
hamming_distance = b_inp([0, 1])(lambda x, y: sum(bin(c).count('1') for c in xor(x, y)))

# reference weight of a character, 0 if it's not in the table
reference_frequency = lambda c: eng_freq.get(c, 0.0)

# share of the text taken by each character, unknown characters included
def build_frequency_map(text):
    if not text:
        return {}
    inc = 1 / len(text)
    return {c: n * inc for c, n in Counter(text).items()}

# distance of a frequency map from english.
# characters english doesn't have count fully against it
def frequency_error(fmap):
    error = sum(abs(v - fmap.get(k, 0.0)) for k, v in eng_freq.items())
    return error + sum(abs(v) for k, v in fmap.items() if k not in eng_freq)

# error of a candidate plaintext
score_text = lambda x: frequency_error(build_frequency_map(decode_text(x)))

# find the single byte key that makes ctxt look most like english.
# lowest key wins ties
@b_inp([0])
def solve_single_byte(ctxt):
    if not ctxt:
        raise InvalidLengthError('cannot guess a key for an empty ciphertext')
    best = None
    for k in range(256):
        ptxt = xor(ctxt, bytes([k]), wrap=True)
        error = score_text(ptxt)
        if best is None or error < best.error:
            best = SingleByteGuess(ptxt, error, k)
    log.debug('single byte key %#04x, error %.4f', best.key, best.error)
    return best

# find which of many ciphertexts was encrypted with a single byte key.
# returns its index and the guess
def detect_single_byte(ctxts):
    best = None
    for i, c in enumerate(ctxts):
        guess = solve_single_byte(c)
        if best is None or guess.error < best[1].error:
            best = (i, guess)
    if best is None:
        raise ValueError('no ciphertexts given')
    log.debug('line %d looks single byte xored (key %#04x)', best[0], best[1].key)
    return best

# normalized hamming distance of the leading blocks for every keysize, in keysize order
@b_inp([0])
def score_keysizes(ctxt, min_size=KEYSIZE_MIN, max_size=KEYSIZE_MAX):
    if min_size < 2 or max_size < min_size:
        raise ValueError('bad keysize range %d-%d' % (min_size, max_size))
    ret = []
    for l in range(min_size, max_size + 1):
        blocks = [ctxt[i*l:(i+1)*l] for i in range(KEYSIZE_BLOCKS)]
        pairs = list(combinations(blocks, 2))
        dist = 0.0
        for x, y in pairs:
            dist += hamming_distance(x, y) / len(pairs)
        ret.append(KeysizeCandidate(dist / l, l))
    return ret

# most likely keysizes first, smaller keysize wins ties
def rank_keysizes(ctxt, count=KEYSIZE_CANDIDATES, min_size=KEYSIZE_MIN, max_size=KEYSIZE_MAX):
    ranked = sorted(score_keysizes(ctxt, min_size, max_size), key=operator.attrgetter('score'))[:count]
    log.debug('best keysizes %s', [c.keysize for c in ranked])
    return ranked

# column i holds byte i of every block
@b_inp([0])
def transpose(ctxt, keysize):
    return [ctxt[i::keysize] for i in range(keysize)]

# recover a repeating xor key of known size, one column at a time
@b_inp([0])
def break_repeating_xor(ctxt, keysize):
    if keysize < 1:
        raise ValueError('keysize must be positive, got %d' % keysize)
    if len(ctxt) < keysize:
        raise InvalidLengthError('%d bytes of ciphertext is too short for keysize %d' % (len(ctxt), keysize))
    guesses = [solve_single_byte(col) for col in transpose(ctxt, keysize)]
    key = bytes(g.key for g in guesses)
    error = sum(g.error for g in guesses) / keysize
    log.debug('keysize %d: key %r, error %.4f', keysize, key, error)
    return RepeatingKeyBreak(keysize, key, xor(ctxt, key, wrap=True), error)

# crack repeating xor cipher, one attempt per likely keysize.
# the first result is usually the right one
@b_inp([0])
def crack_repeating_xor(ctxt, candidates=KEYSIZE_CANDIDATES, min_size=KEYSIZE_MIN, max_size=KEYSIZE_MAX):
    ranked = rank_keysizes(ctxt, candidates, min_size, max_size)
    return [break_repeating_xor(ctxt, c.keysize) for c in ranked if c.keysize <= len(ctxt)]

def _check_aes_input(block, key):
    if len(block) != BLOCK_SIZE:
        raise InvalidLengthError('AES block must be %d bytes, got %d' % (BLOCK_SIZE, len(block)))
    if len(key) != BLOCK_SIZE:
        raise InvalidLengthError('AES-128 key must be %d bytes, got %d' % (BLOCK_SIZE, len(key)))

# encrypt a single block with AES-128
@b_inp([0, 1])
def aes128_ecb_encrypt(block, key):
    _check_aes_input(block, key)
    return Crypto.Cipher.AES.new(key, Crypto.Cipher.AES.MODE_ECB).encrypt(block)

# decrypt a single block with AES-128
@b_inp([0, 1])
def aes128_ecb_decrypt(block, key):
    _check_aes_input(block, key)
    return Crypto.Cipher.AES.new(key, Crypto.Cipher.AES.MODE_ECB).decrypt(block)

# PKCS7 padding, always adds at least one byte
@b_inp([0])
def pad_to(x, l=BLOCK_SIZE):
    if not 0 < l < 256:
        raise ValueError('block size must be 1-255, got %d' % l)
    n = l - (len(x) % l)
    return x + bytes([n]) * n

# check PKCS7 padding
@b_inp([0])
def is_padding_valid(txt, l=BLOCK_SIZE):
    if not txt or len(txt) % l != 0:
        return False
    last = txt[-1]
    return 0 < last <= l and txt[-last:] == bytes([last]) * last

# strip PKCS7 padding
@b_inp([0])
def unpad(txt, l=BLOCK_SIZE):
    if not is_padding_valid(txt, l):
        raise PaddingError('bad PKCS7 padding')
    return txt[:-txt[-1]]

def _check_blocks(txt):
    if len(txt) % BLOCK_SIZE != 0:
        raise InvalidLengthError('ciphertext length %d is not a multiple of %d' % (len(txt), BLOCK_SIZE))

# encrypt AES ECB, padding first
@b_inp([0, 1])
def aes_enc_ecb(txt, key):
    return b''.join(aes128_ecb_encrypt(b, key) for b in break_pieces(pad_to(txt), BLOCK_SIZE))

# decrypt AES ECB, padding is left in place
@b_inp([0, 1])
def aes_dec_ecb(ctxt, key):
    _check_blocks(ctxt)
    return b''.join(aes128_ecb_decrypt(b, key) for b in break_pieces(ctxt, BLOCK_SIZE))

# encrypt AES CBC, padding first
@b_inp([0, 1, 2])
def aes_enc_cbc(txt, key, iv=ZERO_IV):
    if len(iv) != BLOCK_SIZE:
        raise InvalidLengthError('IV must be %d bytes, got %d' % (BLOCK_SIZE, len(iv)))
    res = []
    for b in break_pieces(pad_to(txt), BLOCK_SIZE):
        iv = aes128_ecb_encrypt(xor(b, iv), key)
        res.append(iv)
    return b''.join(res)

# decrypt AES CBC, padding is left in place
@b_inp([0, 1, 2])
def aes_dec_cbc(ctxt, key, iv=ZERO_IV):
    if len(iv) != BLOCK_SIZE:
        raise InvalidLengthError('IV must be %d bytes, got %d' % (BLOCK_SIZE, len(iv)))
    _check_blocks(ctxt)
    blocks = break_pieces(ctxt, BLOCK_SIZE)
    return b''.join(xor(aes128_ecb_decrypt(c, key), p) for c, p in zip(blocks, [iv] + blocks[:-1]))

# number of blocks that already appeared earlier in the buffer
@b_inp([0])
def count_repeated_blocks(ctxt, l=BLOCK_SIZE):
    blocks = break_pieces(ctxt, l)
    return len(blocks) - len(set(blocks))

# index of the ciphertext most likely to be ECB encrypted
def detect_ecb(ctxts):
    ctxts = list(ctxts)
    if not ctxts:
        raise ValueError('no ciphertexts given')
    return max(range(len(ctxts)), key=lambda i: count_repeated_blocks(ctxts[i]))

# generate random bytes
randr = lambda x, rng=random: bytes(rng.randrange(256) for _ in range(x))

# ecb or cbc oracle, encrypts txt under a random key with random junk around it.
# returns the mode used and the ciphertext
@b_inp([0])
def ecb_cbc_oracle(txt, rng=None):
    rng = rng or random.Random()
    key = randr(16, rng)
    txt = randr(rng.randint(5, 10), rng) + txt + randr(rng.randint(5, 10), rng)
    if rng.choice([True, False]):
        log.debug('oracle using ECB')
        return 'ECB', aes_enc_ecb(txt, key)
    log.debug('oracle using CBC')
    return 'CBC', aes_enc_cbc(txt, key, randr(16, rng))

# determine if oracle is ECB or CBC
def is_func_ecb(f):
    r = f(b'a' * 64)
    return r[16:32] == r[32:48]
