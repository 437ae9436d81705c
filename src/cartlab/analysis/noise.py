"""Seeded pseudorandom noise for synthetic sensor signals.

The generator keeps a single 32-bit unsigned integer of state and uses only
integer arithmetic, so a seed always produces the same sequence regardless
of platform or interpreter.
"""

from __future__ import annotations

import math
from typing import Callable

UINT32_MASK = 0xFFFFFFFF
_GOLDEN_STEP = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0

Rng = Callable[[], float]
NoiseSampler = Callable[[float], float]


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply (result kept unsigned)."""
    return (a * b) & UINT32_MASK


def create_rng(seed: int) -> Rng:
    """
    Return a uniform ``[0, 1)`` generator seeded by ``seed``.

    Parameters
    ----------
    seed:
        Any integer; only its low 32 bits are used.
    """
    state = int(seed) & UINT32_MASK

    def rng() -> float:
        nonlocal state
        state = (state + _GOLDEN_STEP) & UINT32_MASK
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & UINT32_MASK
        return ((t ^ (t >> 14)) & UINT32_MASK) / _TWO_POW_32

    return rng


def gaussian(rng: Rng) -> float:
    """Draw one standard-normal sample from two uniforms (Box-Muller)."""
    u1 = min(1.0 - 1e-8, max(1e-8, rng()))
    u2 = rng()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def _silent(scale: float) -> float:
    return 0.0


def build_noise_sampler(seed: int, enabled: bool) -> NoiseSampler:
    """
    Return ``sampler(scale) -> float`` producing Gaussian noise of std ``scale``.

    When ``enabled`` is false the sampler always returns ``0.0`` and the seed
    is never consumed, so callers need no branching of their own.
    """
    if not enabled:
        return _silent

    rng = create_rng(seed)

    def sampler(scale: float) -> float:
        return gaussian(rng) * scale

    return sampler
