# oracle/RNG_mt64.py
# 64-bit Mersenne Twister (MT19937-64) used by oracle/app.py and attacker/recover.py
# State: 312 words of 64 bits plus a read cursor.
# Update: the whole vector is twisted over GF(2) once the cursor runs off the end;
# each read is tempered before it leaves the generator.

import hashlib
import logging
import os
import random

MASK64 = (1 << 64) - 1

N = 312
M = 156
HI_MASK = 0xFFFFFFFF80000000  # most significant 33 bits
LO_MASK = 0x000000007FFFFFFF  # least significant 31 bits
MAG = (0, 0xB5026F5AA96619E9)

DEFAULT_SEED = 5489
ARRAY_BOOTSTRAP_SEED = 19650218

FLOAT_VARIANTS = ('a', 'b', 'c')

logger = logging.getLogger('oracle.rng')


def temper(x):
    x ^= (x >> 29) & 0x5555555555555555
    x ^= (x << 17) & 0x71D67FFFEDA60000
    x ^= (x << 37) & 0xFFF7EEE000000000
    x ^= (x >> 43)
    return x


class MT19937_64:
    def __init__(self, seed=None):
        # seed=None leaves the generator unseeded; the first draw falls back to DEFAULT_SEED
        self.state = [0] * N
        self.index = 0
        self.seeded = False
        if seed is not None:
            self.seed(seed)

    def seed(self, value):
        # only the 64-bit pattern of value matters, so negative ints are fine
        mt = self.state
        mt[0] = value & MASK64
        for i in range(1, N):
            prev = mt[i - 1]
            mt[i] = (6364136223846793005 * (prev ^ (prev >> 62)) + i) & MASK64
        self.index = 0
        self.seeded = True
        logger.debug(f"scalar seed {mt[0]:016x}")

    def seed_by_array(self, keys):
        keys = [k & MASK64 for k in keys]
        if not keys:
            raise ValueError('seed_by_array needs at least one key')
        self.seed(ARRAY_BOOTSTRAP_SEED)
        mt = self.state
        i, j = 1, 0
        for _ in range(max(N, len(keys))):
            prev = mt[i - 1]
            mt[i] = ((mt[i] ^ ((prev ^ (prev >> 62)) * 3935559000370003845)) + keys[j] + j) & MASK64
            i += 1
            if i >= N:
                mt[0] = mt[N - 1]
                i = 1
            j += 1
            if j >= len(keys):
                j = 0
        for _ in range(N - 1):
            prev = mt[i - 1]
            mt[i] = ((mt[i] ^ ((prev ^ (prev >> 62)) * 2862933555777941757)) - i) & MASK64
            i += 1
            if i >= N:
                mt[0] = mt[N - 1]
                i = 1
        mt[0] = 1 << 63
        logger.debug(f"array seed with {len(keys)} key(s)")

    def _twist(self):
        mt = self.state
        for i in range(N - M):
            x = (mt[i] & HI_MASK) | (mt[i + 1] & LO_MASK)
            mt[i] = mt[i + M] ^ (x >> 1) ^ MAG[x & 1]
        for i in range(N - M, N - 1):
            x = (mt[i] & HI_MASK) | (mt[i + 1] & LO_MASK)
            mt[i] = mt[i + (M - N)] ^ (x >> 1) ^ MAG[x & 1]
        x = (mt[N - 1] & HI_MASK) | (mt[0] & LO_MASK)
        mt[N - 1] = mt[M - 1] ^ (x >> 1) ^ MAG[x & 1]

    def next_uint64(self):
        if not self.seeded:
            self.seed(DEFAULT_SEED)
        i = self.index
        if i == 0 or i >= N:
            self._twist()
            i = 0
        self.index = i + 1
        return temper(self.state[i])

    def next_int63(self):
        return self.next_uint64() >> 1

    def next_float64a(self):
        # [0, 1]
        return (self.next_uint64() >> 11) * (1.0 / 9007199254740991.0)

    def next_float64b(self):
        # [0, 1)
        return (self.next_uint64() >> 11) * (1.0 / 9007199254740992.0)

    def next_float64c(self):
        # (0, 1)
        return ((self.next_uint64() >> 12) + 0.5) * (1.0 / 4503599627370496.0)

    def next_float64(self, variant='b'):
        v = str(variant).lower()
        if v == 'a':
            return self.next_float64a()
        if v == 'b':
            return self.next_float64b()
        if v == 'c':
            return self.next_float64c()
        raise ValueError(f"unknown float variant {variant!r}, expected one of {FLOAT_VARIANTS}")

    def get_state(self):
        return tuple(self.state), self.index, self.seeded

    def set_state(self, state):
        words, index, seeded = state
        if len(words) != N:
            raise ValueError(f"state needs exactly {N} words, got {len(words)}")
        if not 0 <= index <= N:
            raise ValueError(f"index {index} outside [0, {N}]")
        self.state[:] = [w & MASK64 for w in words]
        self.index = index
        self.seeded = bool(seeded)


class MT64Random(random.Random):
    """
    random.Random driven by MT19937_64 instead of CPython's 32-bit twister.

    Everything built on random() and getrandbits() (randrange, choice, shuffle,
    gauss, ...) draws from the 64-bit sequence.
    Seeds:
      - None          -> 8 bytes from os.urandom
      - int           -> scalar seed (64-bit pattern)
      - str / bytes   -> SHA-512 digest split into eight 64-bit keys
      - other iterable of ints -> array seed
    """

    VERSION = 1

    def __new__(cls, *args, **kwargs):
        # _random.Random.__new__ would try to hash list seeds itself
        return super().__new__(cls)

    def __init__(self, x=None):
        self._mt = MT19937_64()
        super().__init__(x)

    def seed(self, a=None, version=2):
        if a is None:
            a = int.from_bytes(os.urandom(8), 'big')
        if isinstance(a, str):
            a = a.encode('utf-8')
        if isinstance(a, (bytes, bytearray)):
            digest = hashlib.sha512(a).digest()
            a = [int.from_bytes(digest[k:k + 8], 'big') for k in range(0, len(digest), 8)]
        if isinstance(a, int):
            self._mt.seed(a)
        else:
            self._mt.seed_by_array(list(a))
        self.gauss_next = None

    def random(self):
        return self._mt.next_float64b()

    def getrandbits(self, k):
        if k < 0:
            raise ValueError('number of bits must be non-negative')
        words, rem = divmod(k, 64)
        x = 0
        for _ in range(words):
            x = (x << 64) | self._mt.next_uint64()
        if rem:
            x = (x << rem) | (self._mt.next_uint64() >> (64 - rem))
        return x

    def getstate(self):
        return self.VERSION, self._mt.get_state(), self.gauss_next

    def setstate(self, state):
        version = state[0]
        if version != self.VERSION:
            raise ValueError(f"state with version {version} passed to MT64Random version {self.VERSION}")
        _, mt_state, self.gauss_next = state
        self._mt.set_state(mt_state)
