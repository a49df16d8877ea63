import pytest

from symcrack import build_frequency_map, eng_freq, frequency_error, reference_frequency, score_text


def test_reference_table_is_normalized():
    assert sum(eng_freq.values()) == pytest.approx(1.0)
    assert len(eng_freq) == 53


def test_capitals_are_a_thirtieth_of_lowercase():
    for c in 'abcxyz':
        assert eng_freq[c.upper()] == pytest.approx(eng_freq[c] / 30)


def test_space_follows_average_word_length():
    assert eng_freq[' '] / eng_freq['e'] == pytest.approx((1 / 5.7) / 0.1260)
    assert max(eng_freq, key=eng_freq.get) == ' '


def test_reference_table_is_read_only():
    with pytest.raises(TypeError):
        eng_freq['a'] = 1.0


def test_reference_frequency():
    assert reference_frequency('e') == eng_freq['e']
    assert reference_frequency('#') == 0.0
    assert reference_frequency('�') == 0.0


def test_build_frequency_map_keeps_unknown_characters():
    fmap = build_frequency_map('aab#')
    assert fmap == {'a': pytest.approx(0.5), 'b': pytest.approx(0.25), '#': pytest.approx(0.25)}


def test_build_frequency_map_of_empty_text():
    assert build_frequency_map('') == {}


def test_frequency_error():
    assert frequency_error({}) == pytest.approx(1.0)
    # everything missed, plus a full share of junk
    assert frequency_error({'#': 1.0}) == pytest.approx(2.0)
    assert frequency_error(dict(eng_freq)) == pytest.approx(0.0)


def test_english_scores_better_than_junk(prose):
    assert score_text(prose) < score_text(bytes(b ^ 0x20 for b in prose))
    assert score_text(prose) < score_text(bytes(range(256)))
