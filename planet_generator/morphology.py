# planet_generator/morphology.py

"""
================================================================================
TERRAIN MORPHOLOGY
================================================================================
Derives local landform descriptors from the elevation field.

Data Contract:
---------------
- Inputs:
    - TerrainElevationFields, HydrosphereFields, MorphologyParams and the sea
      level used to build the hydrosphere.
- Outputs:
    - MorphologyFields:
        - peak01 / basin01: land cells above / below their local mean.
        - peak_below_sea01 / basin_below_sea01: the same for the sea floor.
        - roughness01: mean absolute deviation from the local mean.
        - steepness01: slope angle mapped from [0, 90] degrees to [0, 1].
        - grad_x_signed / grad_y_signed: the jointly normalized gradient.
        - normal_x_signed / normal_y_signed: unit uphill direction, 0 if flat.
- Invariants: Peak and basin are never both non-zero on the same cell.
================================================================================
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import fields as F
from .elevation import TerrainElevationFields
from .hydrosphere import HydrosphereFields
from .params import MorphologyParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MorphologyFields:
    peak01: np.ndarray
    basin01: np.ndarray
    peak_below_sea01: np.ndarray
    basin_below_sea01: np.ndarray
    roughness01: np.ndarray
    steepness01: np.ndarray
    grad_x_signed: np.ndarray
    grad_y_signed: np.ndarray
    normal_x_signed: np.ndarray
    normal_y_signed: np.ndarray


def peak_basin(elevation: np.ndarray, radius: int) -> tuple[np.ndarray, np.ndarray]:
    """Splits the deviation from the local mean into (peak01, basin01)."""
    deviation = elevation - F.local_mean(elevation, radius)
    peak = np.where(deviation >= 0.0, deviation, 0.0)
    basin = np.where(deviation < 0.0, -deviation, 0.0)
    return F.normalize01(peak), F.normalize01(basin)


def roughness(elevation: np.ndarray, radius: int) -> np.ndarray:
    """
    Mean absolute deviation of each in-bounds window cell from the window's own
    mean, normalized to [0, 1].
    """
    elevation = np.asarray(elevation, dtype=np.float64)
    radius = max(0, int(radius))
    height, width = elevation.shape
    mean = F.local_mean(elevation, radius)

    total = np.zeros_like(elevation)
    count = np.zeros_like(elevation)
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            # Destination cells whose (x + dx, y + dy) neighbour is in bounds.
            dst_y = slice(max(0, -dy), max(0, height - max(0, dy)))
            dst_x = slice(max(0, -dx), max(0, width - max(0, dx)))
            src_y = slice(max(0, dy), max(0, height + min(0, dy)))
            src_x = slice(max(0, dx), max(0, width + min(0, dx)))
            total[dst_y, dst_x] += np.abs(elevation[src_y, src_x] - mean[dst_y, dst_x])
            count[dst_y, dst_x] += 1.0
    return F.normalize01(total / np.maximum(count, 1.0))


def build_morphology(
    width: int, height: int,
    terrain: TerrainElevationFields,
    hydrosphere: HydrosphereFields,
    sea_level01: float,
    params: MorphologyParams = MorphologyParams()
) -> MorphologyFields:
    elevation01 = np.asarray(terrain.elevation01, dtype=np.float64)
    water = F.clamp01(hydrosphere.is_water01)
    land = 1.0 - water

    # Above sea: the sea floor is flattened to sea level so it cannot form basins.
    peak_all, basin_all = peak_basin(np.maximum(elevation01, sea_level01), params.peak_basin_radius_tiles)
    peak01 = F.normalize01(peak_all * land)
    basin01 = F.normalize01(basin_all * land)

    peak_below_all, basin_below_all = peak_basin(np.minimum(elevation01, sea_level01), params.peak_basin_radius_tiles)
    peak_below_sea01 = F.normalize01(peak_below_all * water)
    basin_below_sea01 = F.normalize01(basin_below_all * water)

    roughness01 = roughness(elevation01, params.roughness_radius_tiles)

    dx, dy = F.clamped_central_difference(elevation01)
    grad_x, grad_y = F.normalize_vector_pair(dx, dy)

    scale = max(DEFAULTS.MIN_DENOMINATOR, params.steepness_scale)
    steepness = F.clamp01(np.arctan(np.hypot(dx, dy) * scale) / (math.pi * 0.5))
    if params.normalize_steepness:
        steepness = F.normalize01(steepness)

    magnitude = np.hypot(grad_x, grad_y)
    flat = magnitude < DEFAULTS.NORMALIZE_EPSILON
    safe = np.where(flat, 1.0, magnitude)
    normal_x = np.where(flat, 0.0, grad_x / safe)
    normal_y = np.where(flat, 0.0, grad_y / safe)

    logger.debug(f"Morphology: {int(np.count_nonzero(peak01 > 0.5))} strong peak cells.")
    return MorphologyFields(
        peak01=F.freeze(peak01),
        basin01=F.freeze(basin01),
        peak_below_sea01=F.freeze(peak_below_sea01),
        basin_below_sea01=F.freeze(basin_below_sea01),
        roughness01=F.freeze(roughness01),
        steepness01=F.freeze(steepness),
        grad_x_signed=F.freeze(grad_x),
        grad_y_signed=F.freeze(grad_y),
        normal_x_signed=F.freeze(normal_x),
        normal_y_signed=F.freeze(normal_y),
    )
