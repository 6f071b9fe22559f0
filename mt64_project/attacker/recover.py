# attacker/recover.py
# Query oracle for consecutive MT19937-64 outputs, untemper them back into raw state words,
# clone the generator, then predict the next output and validate via /validate

import argparse
import time

import requests

from ..oracle.RNG_mt64 import MASK64, N, MT19937_64

ORACLE = 'http://127.0.0.1:5000'
BATCH = 500
SUCCESS_MARKER = '[attacker] Prediction accepted by oracle'

# Tempering is x ^= (x >> 29) & D; x ^= (x << 17) & B; x ^= (x << 37) & C; x ^= x >> 43.
# Each step is invertible on its own, so untempering runs the inverses in reverse order.
D = 0x5555555555555555
B = 0x71D67FFFEDA60000
C = 0xFFF7EEE000000000


def undo_right_shift_xor(y, shift, mask=MASK64):
    # every round fixes `shift` more of the top bits
    x = y
    for _ in range(64 // shift + 1):
        x = y ^ ((x >> shift) & mask)
    return x


def undo_left_shift_xor(y, shift, mask=MASK64):
    # every round fixes `shift` more of the bottom bits
    x = y
    for _ in range(64 // shift + 1):
        x = y ^ ((x << shift) & mask)
    return x & MASK64


def untemper(y):
    y = undo_right_shift_xor(y, 43)
    y = undo_left_shift_xor(y, 37, C)
    y = undo_left_shift_xor(y, 17, B)
    y = undo_right_shift_xor(y, 29, D)
    return y


def expand_output(out, output_bits):
    # oracle keeps the high bits when truncating; unknown low bits become zero
    if output_bits >= 64:
        return out & MASK64
    return (out << (64 - output_bits)) & MASK64


def truncate_prediction(x, output_bits):
    if output_bits >= 64:
        return x & MASK64
    if output_bits <= 0:
        return 0
    return (x >> (64 - output_bits)) & ((1 << output_bits) - 1)


def recover_generator(outputs):
    """
    Clone the oracle's generator from consecutive full 64-bit outputs.

    The first N outputs are untempered into raw state words. The window does not
    have to start on a twist boundary: the raw sequence satisfies
    x[k+N] = x[k+M] ^ twist(x[k], x[k+1]) at every offset, so loading any N
    consecutive words with the cursor at N reproduces what follows.
    Extra outputs beyond N are replayed as a consistency check.
    Returns the clone positioned after the last output, or None.
    """
    if len(outputs) < N:
        return None
    clone = MT19937_64()
    clone.set_state(([untemper(o & MASK64) for o in outputs[:N]], N, True))
    for observed in outputs[N:]:
        if clone.next_uint64() != observed:
            return None
    return clone


def query_oracle(n, oracle=ORACLE):
    outs = []
    while len(outs) < n:
        count = min(BATCH, n - len(outs))
        r = requests.get(oracle + '/get_outputs', params={'count': count}, timeout=5)
        r.raise_for_status()
        outs.extend(int(o, 16) for o in r.json()['outputs'])
    return outs


def run_attack(samples, output_bits, oracle=ORACLE):
    print(f"[attacker] Querying oracle for {samples} outputs (output_bits={output_bits})...")
    obs = query_oracle(samples, oracle)
    words = [expand_output(o, output_bits) for o in obs]
    clone = recover_generator(words)
    if clone is None:
        if samples < N:
            print(f"[attacker] Need at least {N} consecutive outputs, got {samples}.")
        else:
            print("[attacker] Untempered window does not reproduce the observed outputs.")
        return False
    print(f"[attacker] Recovered generator state from {samples} outputs.")
    predicted = clone.next_uint64()
    print(f"[attacker] Predicted next output (full 64-bit hex): {predicted:016x}")
    cand_hex = format(truncate_prediction(predicted, output_bits), '0{}x'.format((output_bits + 3) // 4))
    resp = requests.post(oracle + '/validate', json={'candidate': cand_hex}, timeout=5)
    result = resp.json()
    print("[attacker] Validate response:", result)
    if result.get('ok'):
        print(SUCCESS_MARKER)
        return True
    return False


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--samples', type=int, default=N, help='number of consecutive outputs to collect')
    parser.add_argument('--output_bits', type=int, default=64, help='bits returned by oracle (<=64)')
    parser.add_argument('--oracle', default=ORACLE, help='oracle base url')
    args = parser.parse_args()

    t0 = time.time()
    run_attack(args.samples, args.output_bits, args.oracle)
    print(f"[attacker] Done in {time.time()-t0:.2f}s")
