import pytest

from mt64_project.attacker import recover
from mt64_project.oracle import app as oracle_app
from mt64_project.oracle import config
from mt64_project.oracle.RNG_mt64 import MT19937_64, N, temper


def test_untemper_inverts_temper():
    rng = MT19937_64(1234)
    rng.next_uint64()
    for word in rng.state[:50] + [0, 1, (1 << 64) - 1, 1 << 63]:
        assert recover.untemper(temper(word)) == word


@pytest.mark.parametrize('offset', [0, 1, 155, 311, 500])
def test_clone_predicts_from_any_offset(offset):
    victim = MT19937_64()
    victim.seed_by_array([0xdead, 0xbeef])
    for _ in range(offset):
        victim.next_uint64()
    observed = [victim.next_uint64() for _ in range(N)]
    clone = recover.recover_generator(observed)
    assert clone is not None
    assert [clone.next_uint64() for _ in range(700)] == [victim.next_uint64() for _ in range(700)]


def test_extra_outputs_are_checked():
    victim = MT19937_64(8)
    observed = [victim.next_uint64() for _ in range(N + 20)]
    clone = recover.recover_generator(observed)
    assert clone.next_uint64() == victim.next_uint64()

    tampered = observed[:]
    tampered[-1] ^= 1
    assert recover.recover_generator(tampered) is None


def test_too_few_outputs():
    victim = MT19937_64(8)
    assert recover.recover_generator([victim.next_uint64() for _ in range(N - 1)]) is None


def test_expand_and_truncate():
    assert recover.expand_output(0xAB, 8) == 0xAB << 56
    assert recover.expand_output(0x1234, 64) == 0x1234
    assert recover.truncate_prediction(0xABCDEF0123456789, 8) == 0xAB
    assert recover.truncate_prediction(0xABCDEF0123456789, 64) == 0xABCDEF0123456789


class _Resp:
    def __init__(self, resp):
        self._resp = resp

    def json(self):
        return self._resp.get_json()

    def raise_for_status(self):
        assert self._resp.status_code == 200


@pytest.fixture
def oracle(monkeypatch):
    # route the attacker's HTTP calls into the Flask test client
    victim = MT19937_64()
    victim.seed_by_array([0x12345, 0x23456, 0x34567, 0x45678])
    monkeypatch.setattr(oracle_app, 'RNG', victim)
    monkeypatch.setattr(config, 'OUTPUT_SELECT', 'high')
    client = oracle_app.app.test_client()

    def fake_get(url, params=None, timeout=None):
        return _Resp(client.get(url[len(recover.ORACLE):], query_string=params))

    def fake_post(url, json=None, timeout=None):
        return _Resp(client.post(url[len(recover.ORACLE):], json=json))

    monkeypatch.setattr(recover.requests, 'get', fake_get)
    monkeypatch.setattr(recover.requests, 'post', fake_post)
    return client


def test_attack_succeeds_on_full_outputs(oracle, monkeypatch, capsys):
    monkeypatch.setattr(config, 'OUTPUT_BITS', 64)
    for _ in range(100):
        oracle.get('/get_output')
    assert recover.run_attack(N, 64) is True
    assert recover.SUCCESS_MARKER in capsys.readouterr().out


def test_attack_needs_enough_samples(oracle, monkeypatch):
    monkeypatch.setattr(config, 'OUTPUT_BITS', 64)
    assert recover.run_attack(N - 1, 64) is False


def test_attack_fails_on_truncated_outputs(oracle, monkeypatch, capsys):
    monkeypatch.setattr(config, 'OUTPUT_BITS', 32)
    assert recover.run_attack(N + 10, 32) is False
    assert recover.SUCCESS_MARKER not in capsys.readouterr().out
