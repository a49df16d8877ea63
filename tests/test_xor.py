import pytest

from hypothesis import given, strategies as st

from symcrack import EmptyKeyError, b2h, h2b, hamming_distance, repeating_xor, xor

same_length_pairs = st.binary().flatmap(lambda a: st.tuples(st.just(a), st.binary(min_size=len(a), max_size=len(a))))


def test_fixed_xor():
    res = xor(h2b('1c0111001f010100061a024b53535009181c'), h2b('686974207468652062756c6c277320657965'))
    assert b2h(res) == '746865206b696420646f6e277420706c6179'


def test_xor_without_wrap_passes_tail_through():
    assert xor(b'\x01\x02\x03', b'\x01') == b'\x00\x02\x03'


def test_xor_operand_order_does_not_matter():
    assert xor(b'\x01', b'\x00\x02\x03') == b'\x01\x02\x03'
    assert xor(b'\x00\x02\x03', b'\x01') == b'\x01\x02\x03'


def test_xor_with_wrap_repeats_shorter():
    assert xor(bytes(5), b'\x01\x02', wrap=True) == b'\x01\x02\x01\x02\x01'
    assert xor(b'\x01\x02', bytes(5), wrap=True) == b'\x01\x02\x01\x02\x01'


def test_xor_accepts_str_and_bytearray():
    assert xor('a', bytearray(b'a')) == b'\x00'


def test_xor_wrap_with_empty_operand():
    with pytest.raises(EmptyKeyError):
        xor(b'abc', b'', wrap=True)
    assert xor(b'abc', b'') == b'abc'


@given(same_length_pairs)
def test_xor_is_self_inverse(pair):
    a, b = pair
    assert xor(xor(a, b), b) == a


def test_repeating_xor():
    phrase = b"Burning 'em, if you ain't quick and nimble\nI go crazy when I hear a cymbal"
    assert b2h(repeating_xor(phrase, 'ICE')) == (
        '0b3637272a2b2e63622c2e69692a23693a2a3c6324202d623d63343c2a26226324272765272a282b2f20'
        '430a652e2c652a3124333a653e2b2027630c692b20283165286326302e27282f')


def test_repeating_xor_keeps_message_length():
    assert repeating_xor(b'', b'key') == b''
    assert repeating_xor(b'ab', b'longer key') == xor(b'ab', b'lo')
    with pytest.raises(EmptyKeyError):
        repeating_xor(b'abc', b'')


def test_hamming_distance():
    assert hamming_distance(b'this is a test', b'wokka wokka!!!') == 37
    assert hamming_distance('this is a test', 'wokka wokka!!!') == 37


def test_hamming_distance_counts_tail_of_longer():
    assert hamming_distance(b'\xff\x0f', b'') == 12
    assert hamming_distance(b'\x00', b'\x00\x03') == 2


@given(st.binary())
def test_hamming_distance_to_self_is_zero(a):
    assert hamming_distance(a, a) == 0


@given(st.binary(), st.binary())
def test_hamming_distance_is_symmetric(a, b):
    assert hamming_distance(a, b) == hamming_distance(b, a)
