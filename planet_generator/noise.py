# planet_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides seeded 2D value noise and fractal (multi-octave) noise.
It is designed to be a pure, stateless utility: the lattice hash is an integer
mixing function with no tables or global state, so the same (x, y, seed)
always reproduces bit-identical output.

Data Contract:
---------------
- Inputs:
    - x, y: scalar coordinates or NumPy arrays of coordinates.
    - seed: a 32-bit integer seed (see `noise_seed`).
    - base_period, octaves: fractal noise parameters.
- Outputs:
    - value noise in [0, 1]; fractal noise as a signed, zero-centered grid.
- Side Effects: None.
- Invariants: The shape of the output array matches the shape of input x and y.
================================================================================
"""

import numpy as np
from numba import njit

from . import config as DEFAULTS

# Lattice hash multipliers and the 32-bit mask used to emulate int32 overflow.
_HASH_X = 374761393
_HASH_Y = 668265263
_HASH_SEED = 1442695041
_HASH_MIX = 1274126177
_MASK32 = 0xFFFFFFFF
_MAX_HASH = 2147483647.0

# Per-octave seed stride for fractal noise.
OCTAVE_SEED_STRIDE = 999


def noise_seed(world_seed: int, salt: int = 0) -> int:
    """Derives a 32-bit noise seed from a world seed and a per-layer salt."""
    return (int(world_seed) ^ int(salt)) & DEFAULTS.NOISE_SEED_MASK


def make_rng(world_seed: int, salt: int = 0) -> np.random.Generator:
    """Creates the seeded numpy generator a layer draws its random choices from."""
    return np.random.default_rng((int(world_seed) ^ int(salt)) & DEFAULTS.RNG_SEED_MASK)


@njit
def _lerp(a, b, t):
    "Linear interpolation."
    return a + (b - a) * t


@njit
def _smooth(t):
    "3t^2 - 2t^3"
    return t * t * (3.0 - 2.0 * t)


@njit
def _hash01(xi, yi, seed):
    """Hashes an integer lattice point to [0, 1]."""
    n = (xi * _HASH_X + yi * _HASH_Y + seed * _HASH_SEED) & _MASK32
    n = ((n ^ (n >> 13)) * _HASH_MIX) & _MASK32
    n = n ^ (n >> 16)
    return (n >> 1) / _MAX_HASH


@njit
def value_noise(x, y, seed):
    """
    Continuous value noise in [0, 1] at a single point.
    The four surrounding lattice corners are hashed and blended with
    smoothstep-weighted bilinear interpolation.
    """
    s = seed & _MASK32
    x0 = np.floor(x)
    y0 = np.floor(y)
    xi = np.int64(x0)
    yi = np.int64(y0)
    u = _smooth(x - x0)
    v = _smooth(y - y0)

    v00 = _hash01(xi, yi, s)
    v10 = _hash01(xi + 1, yi, s)
    v01 = _hash01(xi, yi + 1, s)
    v11 = _hash01(xi + 1, yi + 1, s)

    x1 = _lerp(v00, v10, u)
    x2 = _lerp(v01, v11, u)
    return _lerp(x1, x2, v)


@njit
def value_noise_2d(x, y, seed):
    """
    Evaluates value noise over 2D coordinate arrays.
    This function is JIT-compiled with Numba; explicit loops compile to
    efficient machine code.
    """
    rows, cols = x.shape
    out = np.zeros((rows, cols))
    for i in range(rows):
        for j in range(cols):
            out[i, j] = value_noise(x[i, j], y[i, j], seed)
    return out


@njit
def value_noise_points(x, y, seeds):
    """Evaluates value noise at 1D point lists where every point carries its own seed."""
    n = x.shape[0]
    out = np.zeros(n)
    for k in range(n):
        out[k] = value_noise(x[k], y[k], seeds[k])
    return out


@njit
def _fractal_noise_kernel(width, height, seed, frequency, octaves):
    total_noise = np.zeros((height, width))
    amplitude = 1.0
    for o in range(octaves):
        octave_seed = (seed + o * OCTAVE_SEED_STRIDE) & _MASK32
        for j in range(height):
            for i in range(width):
                n = value_noise(i * frequency, j * frequency, octave_seed)
                total_noise[j, i] += (n - 0.5) * 2.0 * amplitude
        amplitude *= 0.5
        frequency *= 2.0
    return total_noise


def fractal_noise(width: int, height: int, seed: int, base_period: float, octaves: int) -> np.ndarray:
    """
    Generates signed fractal noise of shape (height, width).

    Each octave halves the amplitude and doubles the frequency (persistence 0.5,
    lacunarity 2.0). Contributions are signed, so the result is naturally
    zero-centered before any normalization.
    """
    if base_period <= 0:
        raise ValueError(f"base_period must be positive, got {base_period}")
    return _fractal_noise_kernel(
        int(width), int(height), int(seed) & _MASK32, 1.0 / float(base_period), max(0, int(octaves))
    )


def signed_noise_2d(x: np.ndarray, y: np.ndarray, seed: int) -> np.ndarray:
    """Value noise remapped from [0, 1] to [-1, 1]."""
    return (value_noise_2d(x, y, int(seed) & _MASK32) - 0.5) * 2.0
