import logging
import os
import random
import sys

from collections import namedtuple

from .crypto import (aes_dec_cbc, aes_dec_ecb, b2h, count_repeated_blocks, crack_repeating_xor,
                     decode_text, detect_ecb, detect_single_byte, ecb_cbc_oracle, h2b, hex2base64,
                     is_func_ecb, is_padding_valid, pad_to, repeating_xor, solve_single_byte, unpad,
                     xor)
from .errors import InvalidLengthError, SymcrackError
from .files import read_bytes, read_lines

log = logging.getLogger(__name__)

Challenge = namedtuple('Challenge', 'number name func')
# ok is None when there's nothing to compare against
ChallengeResult = namedtuple('ChallengeResult', 'lines ok')

YELLOW_SUBMARINE = b'YELLOW SUBMARINE'
VANILLA_ICE = b"I'm back and I'm ringin' the bell"

# printable form of some bytes
show = lambda x: decode_text(x, warn=True)
# first line of some bytes, empty if there is none
first_line = lambda x: next(iter(show(x).splitlines()), '')

def hex_to_base64(data_dir):
    res = hex2base64('49276d206b696c6c696e6720796f757220627261696e206c696b65206120706f69736f6e6f7573206d757368726f6f6d')
    ans = 'SSdtIGtpbGxpbmcgeW91ciBicmFpbiBsaWtlIGEgcG9pc29ub3VzIG11c2hyb29t'
    return ChallengeResult(['Computed: ' + res, 'Expected: ' + ans], res == ans)

def fixed_xor(data_dir):
    res = b2h(xor(h2b('1c0111001f010100061a024b53535009181c'), h2b('686974207468652062756c6c277320657965')))
    ans = '746865206b696420646f6e277420706c6179'
    return ChallengeResult(['Computed: ' + res, 'Expected: ' + ans], res == ans)

def single_byte_xor(data_dir):
    guess = solve_single_byte(h2b('1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736'))
    return ChallengeResult(['Key byte: %#04x' % guess.key, 'Cleartext: ' + show(guess.plaintext)],
                           guess.plaintext == b"Cooking MC's like a pound of bacon")

def detect_single_byte_xor(data_dir):
    i, guess = detect_single_byte(read_lines(os.path.join(data_dir, '4.txt'), 'hex'))
    return ChallengeResult(['Line: %d' % (i + 1), 'Key byte: %#04x' % guess.key,
                            'Cleartext: ' + show(guess.plaintext).rstrip()],
                           guess.plaintext == b'Now that the party is jumping\n')

def repeating_key_xor(data_dir):
    phrase = b"Burning 'em, if you ain't quick and nimble\nI go crazy when I hear a cymbal"
    res = b2h(repeating_xor(phrase, b'ICE'))
    ans = ('0b3637272a2b2e63622c2e69692a23693a2a3c6324202d623d63343c2a26226324272765272a282b2f20'
           '430a652e2c652a3124333a653e2b2027630c692b20283165286326302e27282f')
    return ChallengeResult(['Computed: ' + res, 'Expected: ' + ans], res == ans)

def break_repeating_key_xor(data_dir):
    ctxt = read_bytes(os.path.join(data_dir, '6.txt'), 'base64')
    lines = ['(%d bytes)' % len(ctxt)]
    results = crack_repeating_xor(ctxt)
    for r in results:
        lines.append('keysize %d, error %.4f: key %r' % (r.keysize, r.error, r.key))
    if not results:
        raise InvalidLengthError('%d bytes is too short to crack' % len(ctxt))
    best = results[0]
    lines.append('Cleartext: ' + first_line(best.plaintext))
    return ChallengeResult(lines, best.key == b'Terminator X: Bring the noise')

def aes_in_ecb_mode(data_dir):
    ptxt = unpad(aes_dec_ecb(read_bytes(os.path.join(data_dir, '7.txt'), 'base64'), YELLOW_SUBMARINE))
    return ChallengeResult(['Cleartext: ' + first_line(ptxt)], ptxt.startswith(VANILLA_ICE))

def detect_aes_in_ecb_mode(data_dir):
    ctxts = read_lines(os.path.join(data_dir, '8.txt'), 'hex')
    i = detect_ecb(ctxts)
    return ChallengeResult(['Line: %d' % (i + 1), 'Repeated blocks: %d' % count_repeated_blocks(ctxts[i])],
                           None)

def pkcs7_padding(data_dir):
    lines = [' In: ' + b2h(YELLOW_SUBMARINE)]
    for l in range(17, 24):
        lines.append('Out: ' + b2h(pad_to(YELLOW_SUBMARINE, l)))
    return ChallengeResult(lines, pad_to(YELLOW_SUBMARINE, 20) == YELLOW_SUBMARINE + b'\x04' * 4)

def cbc_mode(data_dir):
    ptxt = unpad(aes_dec_cbc(read_bytes(os.path.join(data_dir, '10.txt'), 'base64'), YELLOW_SUBMARINE))
    return ChallengeResult(['Cleartext: ' + first_line(ptxt)], ptxt.startswith(VANILLA_ICE))

def ecb_cbc_detection(data_dir, trials=20):
    rng = random.Random()
    modes = []

    def oracle(txt):
        mode, ctxt = ecb_cbc_oracle(txt, rng)
        modes.append(mode)
        return ctxt

    guesses = ['ECB' if is_func_ecb(oracle) else 'CBC' for _ in range(trials)]
    right = sum(g == m for g, m in zip(guesses, modes))
    return ChallengeResult(['Guessed %d of %d modes' % (right, trials)], right == trials)

def pkcs7_padding_validation(data_dir):
    cases = [(b'ICE ICE BABY\x04\x04\x04\x04', True),
             (b'ICE ICE BABY\x05\x05\x05\x05', False),
             (b'ICE ICE BABY\x01\x02\x03\x04', False)]
    lines = ['%r: %s' % (txt, 'valid' if is_padding_valid(txt) else 'invalid') for txt, _ in cases]
    ok = all(is_padding_valid(txt) == valid for txt, valid in cases) and unpad(cases[0][0]) == b'ICE ICE BABY'
    return ChallengeResult(lines, ok)

CHALLENGES = [
    Challenge(1, 'Convert hex to base64', hex_to_base64),
    Challenge(2, 'Fixed XOR', fixed_xor),
    Challenge(3, 'Single-byte XOR cipher', single_byte_xor),
    Challenge(4, 'Detect single-character XOR', detect_single_byte_xor),
    Challenge(5, 'Implement repeating-key XOR', repeating_key_xor),
    Challenge(6, 'Break repeating-key XOR', break_repeating_key_xor),
    Challenge(7, 'AES in ECB mode', aes_in_ecb_mode),
    Challenge(8, 'Detect AES in ECB mode', detect_aes_in_ecb_mode),
    Challenge(9, 'Implement PKCS#7 padding', pkcs7_padding),
    Challenge(10, 'Implement CBC mode', cbc_mode),
    Challenge(11, 'An ECB/CBC detection oracle', ecb_cbc_detection),
    Challenge(15, 'PKCS#7 padding validation', pkcs7_padding_validation),
]

# run the given challenges (all by default) in order, returns number of failures
def run_challenges(numbers=None, data_dir='.', out=None):
    if out is None:
        out = sys.stdout
    failures = 0
    for ch in CHALLENGES:
        if numbers and ch.number not in numbers:
            continue
        print('\n---------- Challenge %d: %s ----------' % (ch.number, ch.name), file=out)
        try:
            res = ch.func(data_dir)
            for line in res.lines:
                print(line, file=out)
            if res.ok is not None:
                print('MATCH' if res.ok else 'FAIL', file=out)
                failures += not res.ok
        except (OSError, SymcrackError, ValueError):
            log.exception('challenge %d failed', ch.number)
            failures += 1
        finally:
            print('----------------------- (end) -----------------------', file=out)
    return failures
