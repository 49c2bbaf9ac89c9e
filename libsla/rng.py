"""
Pseudo-random numbers for libsla.

Generators are caller-owned objects backed by numpy's Generator (PCG64).
Each instance carries its own state, so independent streams never
interfere and a seeded generator always reproduces the same sequence.

Classes:
- UniformGenerator: uniform deviates in [0, 1)
- GaussianGenerator: normal deviates (polar Box-Muller)

Functions random() and gresid() are thin wrappers that draw from a
generator supplied by the caller.
"""

import math
from typing import Optional

import numpy as np

from .utils import nint

# Default seed for Gaussian residuals
GRESID_SEED = 123456789


def _mangle_seed(seed: float) -> int:
    """
    Turn a floating-point seed into an odd integer with about seven
    significant digits, so that nearby seeds give unrelated streams.
    """
    aseed = abs(seed) + 1.0
    iseed = nint(aseed / 10.0 ** (nint(math.log10(aseed)) - 6))
    if iseed % 2 == 0:
        iseed += 1
    return iseed


class UniformGenerator:
    """
    Uniform pseudo-random numbers.

    Args:
        seed: Any number; generators built from the same seed produce the
            same sequence
    """

    def __init__(self, seed: float = 0.0):
        self.seed = seed
        self._rng = np.random.default_rng(_mangle_seed(seed))

    def random(self) -> float:
        """Next deviate in the interval [0, 1)."""
        return float(self._rng.random())


class GaussianGenerator:
    """
    Gaussian pseudo-random residuals with zero mean.

    Deviates are produced in pairs by the polar form of the Box-Muller
    transformation; the second of each pair is kept for the next call.

    Args:
        seed: Integer seed for the underlying uniform stream
    """

    def __init__(self, seed: int = GRESID_SEED):
        self.seed = seed
        self._rng = np.random.default_rng(seed)
        self._next: Optional[float] = None

    def _uniform(self) -> float:
        return float(self._rng.random())

    def gresid(self, stdev: float) -> float:
        """
        Next residual.

        Args:
            stdev: Standard deviation of the distribution

        Returns:
            float: Gaussian deviate scaled by stdev
        """
        if self._next is not None:
            g = self._next
            self._next = None
            return g * stdev

        # Random point inside the unit circle
        while True:
            x = 2.0 * self._uniform() - 1.0
            y = 2.0 * self._uniform() - 1.0
            r = x * x + y * y
            if 0.0 < r < 1.0:
                break

        w = math.sqrt(-2.0 * math.log(r) / max(r, 1.0e-20))
        self._next = x * w
        return y * w * stdev


def random(generator: UniformGenerator) -> float:
    """
    Uniform pseudo-random number in [0, 1).

    Args:
        generator: Caller-owned generator, e.g. UniformGenerator(seed)

    Returns:
        float: The next deviate
    """
    return generator.random()


def gresid(stdev: float, generator: GaussianGenerator) -> float:
    """
    Gaussian residual with zero mean and the given standard deviation.

    Args:
        stdev: Standard deviation
        generator: Caller-owned generator, e.g. GaussianGenerator()

    Returns:
        float: The next residual
    """
    return generator.gresid(stdev)
