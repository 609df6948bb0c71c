"""Deterministic pseudo-random stream derived from a string seed.

Every operation works on 32-bit unsigned words and is masked after each
multiply, add and left shift, so any implementation that follows the same
steps reproduces the same draws.
"""
from __future__ import annotations

from typing import Callable, Tuple

MASK32 = 0xFFFFFFFF
TWO_POW_32 = 4294967296.0

_H1_INIT = 0xDEADBEEF
_H2_INIT = 0x41C6CE57
_MIX_A = 2654435761
_MIX_B = 1597334677
_FINAL_A = 2246822507
_FINAL_B = 3266489909
_ZERO_STATE_FILL = 0x9E3779B9


def _mul32(a: int, b: int) -> int:
    return (a * b) & MASK32


def hash_seed(seed: str) -> Tuple[int, int]:
    """Hash ``seed`` (as UTF-8 bytes) into two 32-bit words."""
    h1, h2 = _H1_INIT, _H2_INIT
    for byte in seed.encode("utf-8"):
        h1 = _mul32(h1 ^ byte, _MIX_A)
        h2 = _mul32(h2 ^ byte, _MIX_B)
    h1 = _mul32(h1 ^ (h1 >> 16), _FINAL_A) ^ _mul32(h2 ^ (h2 >> 13), _FINAL_B)
    h2 = _mul32(h2 ^ (h2 >> 16), _FINAL_A) ^ _mul32(h1 ^ (h1 >> 13), _FINAL_B)
    return h1, h2


def create_seeded_random(seed: str) -> Callable[[], float]:
    """Return a generator function producing floats in [0, 1) for ``seed``.

    Same seed, same sequence. The state lives in the returned closure only.
    """
    a, b = hash_seed(seed)
    if a == 0 and b == 0:
        a = _ZERO_STATE_FILL
    state = [a, b]

    def next_random() -> float:
        x, y = state
        t = x ^ ((x << 10) & MASK32)
        x = y
        y = (y ^ (y >> 10)) ^ (t ^ (t >> 13))
        state[0], state[1] = x, y
        return ((x + y) & MASK32) / TWO_POW_32

    return next_random
