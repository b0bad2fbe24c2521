# planet_generator/fields.py

"""
================================================================================
FIELD UTILITIES
================================================================================
Grid allocation, normalization, smoothing and blending helpers shared by every
generator. A field is a float NumPy array of shape (height, width) indexed
[y, x].

Every function returns a new array and leaves its inputs untouched, so a field
has exactly one writer (its producing generator) and can be shared with any
number of readers once `freeze` has been applied.
================================================================================
"""

import math

import numpy as np
from scipy.ndimage import uniform_filter

from . import config as DEFAULTS


def zeros(width: int, height: int) -> np.ndarray:
    return np.zeros((height, width), dtype=np.float64)


def clamp01(values):
    return np.clip(values, 0.0, 1.0)


def lerp(a, b, t):
    return a + (b - a) * t


def smoothstep(edge0: float, edge1: float, x):
    """Hermite smoothstep; a zero-width edge uses a tiny denominator instead of dividing by 0."""
    denom = edge1 - edge0
    if abs(denom) < DEFAULTS.MIN_DENOMINATOR:
        denom = DEFAULTS.MIN_DENOMINATOR
    t = np.clip((np.asarray(x, dtype=np.float64) - edge0) / denom, 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize01(grid: np.ndarray) -> np.ndarray:
    """
    Min-max normalizes a grid into [0, 1].
    A (near-)constant grid has no meaningful range and becomes all zeros, which
    also makes the operation idempotent.
    """
    grid = np.asarray(grid, dtype=np.float64)
    if grid.size == 0:
        return grid.copy()
    mn = float(grid.min())
    mx = float(grid.max())
    value_range = mx - mn
    if value_range < DEFAULTS.NORMALIZE_EPSILON:
        return np.zeros_like(grid)
    return (grid - mn) / value_range


def normalize_signed(grid: np.ndarray) -> np.ndarray:
    """Scales a grid into [-1, 1] by its maximum absolute value. All-zero grids stay zero."""
    grid = np.asarray(grid, dtype=np.float64)
    if grid.size == 0:
        return grid.copy()
    max_abs = float(np.abs(grid).max())
    if max_abs < DEFAULTS.NORMALIZE_EPSILON:
        return grid.copy()
    return grid / max_abs


def normalize_vector_pair(x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Normalizes two component grids together so vector direction is preserved.
    Both are scaled by the single largest absolute component seen across both.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.size == 0:
        return x.copy(), y.copy()
    max_abs = max(float(np.abs(x).max()), float(np.abs(y).max()))
    if max_abs < DEFAULTS.NORMALIZE_EPSILON:
        return x.copy(), y.copy()
    return x / max_abs, y / max_abs


def signed_to01(grid: np.ndarray) -> np.ndarray:
    return np.clip(grid * 0.5 + 0.5, 0.0, 1.0)


def mean_center(grid: np.ndarray) -> np.ndarray:
    return grid - grid.mean()


def smooth_union(a, b):
    "Probabilistic OR: 1 - (1 - a)(1 - b)."
    return 1.0 - (1.0 - a) * (1.0 - b)


def local_mean(grid: np.ndarray, radius: int) -> np.ndarray:
    """
    Mean over a (2r+1) x (2r+1) window, counting only in-bounds cells.
    Edge cells therefore average fewer samples instead of seeing padded values.
    """
    grid = np.asarray(grid, dtype=np.float64)
    radius = max(0, int(radius))
    if radius == 0:
        return grid.copy()
    size = 2 * radius + 1
    sums = uniform_filter(grid, size=size, mode='constant', cval=0.0)
    counts = uniform_filter(np.ones_like(grid), size=size, mode='constant', cval=0.0)
    return sums / counts


def box_blur(grid: np.ndarray, passes: int = 1) -> np.ndarray:
    """Applies `passes` 3x3 box blurs (edge-truncated) and returns the result as a new grid."""
    out = np.array(grid, dtype=np.float64, copy=True)
    for _ in range(max(0, int(passes))):
        out = local_mean(out, 1)
    return out


def weighted_sum(layers, shape: tuple) -> np.ndarray:
    """Accumulates (field, weight) pairs into a fresh grid of the given shape."""
    acc = np.zeros(shape, dtype=np.float64)
    for field, weight in layers:
        acc = acc + np.asarray(field, dtype=np.float64) * weight
    return acc


def clamped_central_difference(grid: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Half central differences along x and y. Samples beyond the border are
    clamped to the edge row/column rather than wrapped.
    """
    padded = np.pad(np.asarray(grid, dtype=np.float64), 1, mode='edge')
    dx = (padded[1:-1, 2:] - padded[1:-1, :-2]) * 0.5
    dy = (padded[2:, 1:-1] - padded[:-2, 1:-1]) * 0.5
    return dx, dy


def freeze(array: np.ndarray) -> np.ndarray:
    """Marks an array read-only; finished fields are never written again."""
    array.setflags(write=False)
    return array
