# oracle/app.py
# Flask oracle exposing MT19937-64 draws: /get_output, /get_outputs, /get_int63, /get_float/<variant>, /validate
# Supports SEED_MODE = 'fixed' | 'array' | 'random' | 'time'

import logging
import os
import threading
import time

from flask import Flask, jsonify, request

from . import config
from .RNG_mt64 import DEFAULT_SEED, FLOAT_VARIANTS, MASK64, MT19937_64

app = Flask(__name__)

# Setup logging
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger('oracle')


def derive_seed():
    """
    Derive the seed according to config.SEED_MODE.
    Returns an int for scalar seeding or a list of keys for array seeding.
      - 'fixed'  -> config.SEED, or the generator default when SEED is None
      - 'array'  -> config.SEED_KEYS (ValueError when empty)
      - 'random' -> os.urandom(8)
      - 'time'   -> current time in seconds or ms (TIME_GRANULARITY)
    """
    mode = (config.SEED_MODE or 'fixed').lower()
    if mode == 'fixed':
        if config.SEED is not None:
            seed = int(config.SEED) & MASK64
            logger.info(f"Using fixed SEED from config: {seed:016x}")
            return seed
        logger.info(f"Using default fixed SEED: {DEFAULT_SEED}")
        return DEFAULT_SEED
    elif mode == 'array':
        keys = [int(k) & MASK64 for k in (config.SEED_KEYS or [])]
        if not keys:
            raise ValueError("SEED_MODE 'array' needs a non-empty SEED_KEYS")
        logger.info(f"Using array SEED_KEYS: {', '.join(f'{k:x}' for k in keys)}")
        return keys
    elif mode == 'random':
        seed = int.from_bytes(os.urandom(8), 'big')
        logger.info(f"Using random SEED (os.urandom): {seed:016x}")
        return seed
    elif mode == 'time':
        if config.TIME_GRANULARITY == 'ms':
            seed = int(time.time() * 1000)
        else:
            seed = int(time.time())
        # intentionally guessable (demo of weak seed)
        logger.info(f"Using time-derived SEED (granu={config.TIME_GRANULARITY}): {seed}")
        return seed & MASK64
    else:
        logger.warning(f"Unknown SEED_MODE '{config.SEED_MODE}', falling back to default SEED: {DEFAULT_SEED}")
        return DEFAULT_SEED


def build_rng():
    seed = derive_seed()
    rng = MT19937_64()
    if isinstance(seed, list):
        rng.seed_by_array(seed)
    else:
        rng.seed(seed)
    return rng


RNG = build_rng()
# a single MT19937_64 is not safe for concurrent callers; the dev server is threaded
RNG_LOCK = threading.Lock()


def mask_output(x, bits=None, select=None):
    bits = config.OUTPUT_BITS if bits is None else bits
    select = config.OUTPUT_SELECT if select is None else select
    if bits >= 64:
        return x & MASK64
    if select == 'high':
        return (x >> (64 - bits)) & ((1 << bits) - 1)
    return x & ((1 << bits) - 1)


def format_output(out):
    return format(out, '0{}x'.format((config.OUTPUT_BITS + 3) // 4))


def bad_request(reason):
    return jsonify({'ok': False, 'reason': reason}), 400


@app.route('/get_output', methods=['GET'])
def get_output():
    with RNG_LOCK:
        val = RNG.next_uint64()
    return jsonify({'output': format_output(mask_output(val))})


@app.route('/get_outputs', methods=['GET'])
def get_outputs():
    try:
        count = int(request.args.get('count', '1'))
    except ValueError:
        return bad_request('count must be an integer')
    if not 1 <= count <= config.MAX_BATCH:
        return bad_request(f'count must be in [1, {config.MAX_BATCH}]')
    with RNG_LOCK:
        vals = [RNG.next_uint64() for _ in range(count)]
    return jsonify({'outputs': [format_output(mask_output(v)) for v in vals]})


@app.route('/get_int63', methods=['GET'])
def get_int63():
    with RNG_LOCK:
        val = RNG.next_int63()
    return jsonify({'output': val})


@app.route('/get_float/<variant>', methods=['GET'])
def get_float(variant):
    if variant.lower() not in FLOAT_VARIANTS:
        return bad_request(f"variant must be one of {', '.join(FLOAT_VARIANTS)}")
    with RNG_LOCK:
        val = RNG.next_float64(variant)
    return jsonify({'output': val})


@app.route('/validate', methods=['POST'])
def validate():
    data = request.get_json(silent=True)
    if not data or 'candidate' not in data:
        return bad_request('need candidate')
    try:
        candidate = int(data['candidate'], 16)
    except (TypeError, ValueError):
        return bad_request('bad hex')
    with RNG_LOCK:
        true = RNG.next_uint64()
    expected = mask_output(true)
    ok = (candidate & ((1 << config.OUTPUT_BITS) - 1)) == expected
    logger.info(f"validate: candidate={data['candidate']} ok={ok}")
    return jsonify({'ok': ok, 'expected': format_output(expected)})


if __name__ == '__main__':
    logger.info(f"Starting oracle at http://{config.HOST}:{config.PORT} with SEED_MODE={config.SEED_MODE}")
    app.run(host=config.HOST, port=config.PORT, debug=False)
