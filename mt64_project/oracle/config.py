# oracle/config.py
# Configuration for the oracle (MT19937-64 service)

# Network config
HOST = '127.0.0.1'
PORT = 5000

# Seed configuration:
# - SEED_MODE:
#     'fixed'  : scalar seed from SEED (if SEED is None, the generator default 5489 is used)
#     'array'  : array seed from SEED_KEYS (must be non-empty)
#     'random' : os.urandom(8) at startup (non-deterministic each run)
#     'time'   : current unix time as scalar seed - low entropy (for demo)
SEED_MODE = 'fixed'   # 'fixed' | 'array' | 'random' | 'time'

# Scalar seed for 'fixed'. Any int; only its 64-bit pattern is used.
SEED = 0x1234567890ABCDEF  # or None

# Key array for 'array' (each key reduced to 64 bits).
SEED_KEYS = [0x12345, 0x23456, 0x34567, 0x45678]

# If SEED_MODE == 'time': 's' -> int(time.time()), 'ms' -> int(time.time() * 1000)
TIME_GRANULARITY = 's'  # 's' or 'ms'

# How many bits the oracle reveals per uint64 output (1..64)
OUTPUT_BITS = 64
OUTPUT_SELECT = 'high'   # 'high' or 'low'

# Upper bound for /get_outputs?count=
MAX_BATCH = 1000

# Logging level
LOG_LEVEL = 'INFO'
