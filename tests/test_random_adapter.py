import hashlib

import pytest

from mt64_project.oracle.RNG_mt64 import MT19937_64, MT64Random


def test_random_is_float_variant_b():
    r = MT64Random(42)
    g = MT19937_64(42)
    assert [r.random() for _ in range(50)] == [g.next_float64b() for _ in range(50)]


def test_getrandbits_draws_words_big_endian():
    r = MT64Random(5489)
    g = MT19937_64(5489)
    assert r.getrandbits(64) == g.next_uint64()
    hi, lo = g.next_uint64(), g.next_uint64()
    assert r.getrandbits(128) == (hi << 64) | lo
    assert r.getrandbits(10) == g.next_uint64() >> 54
    assert r.getrandbits(0) == 0
    assert r.getrandbits(1) == g.next_uint64() >> 63


def test_getrandbits_negative():
    with pytest.raises(ValueError):
        MT64Random(1).getrandbits(-1)


def test_list_seed_is_array_seed():
    keys = [0x12345, 0x23456, 0x34567, 0x45678]
    r = MT64Random(keys)
    assert r.getrandbits(64) == 7266447313870364031


def test_text_seed_uses_sha512_keys():
    digest = hashlib.sha512(b'mt64').digest()
    g = MT19937_64()
    g.seed_by_array([int.from_bytes(digest[k:k + 8], 'big') for k in range(0, 64, 8)])
    expected = g.next_uint64()
    assert MT64Random('mt64').getrandbits(64) == expected
    assert MT64Random(b'mt64').getrandbits(64) == expected


def test_distribution_helpers_stay_in_range():
    r = MT64Random(2024)
    for _ in range(500):
        assert 0 <= r.randrange(10) < 10
        assert 5 <= r.randint(5, 9) <= 9
    items = list(range(20))
    r.shuffle(items)
    assert sorted(items) == list(range(20))


def test_getstate_setstate():
    r = MT64Random(99)
    r.random()
    state = r.getstate()
    ahead = [r.getrandbits(64) for _ in range(5)]
    r.setstate(state)
    assert [r.getrandbits(64) for _ in range(5)] == ahead
    with pytest.raises(ValueError):
        r.setstate((0,) + state[1:])


def test_reseed_same_sequence():
    r = MT64Random(7)
    first = [r.random() for _ in range(5)]
    r.seed(7)
    assert [r.random() for _ in range(5)] == first
