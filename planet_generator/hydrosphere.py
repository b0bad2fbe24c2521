# planet_generator/hydrosphere.py

"""
================================================================================
HYDROSPHERE
================================================================================
Sea-level classification of the elevation field: water/land, altitude above
(or below) the sea, thin air at high altitude and a soft coastline mask.

Data Contract:
---------------
- Inputs:
    - TerrainElevationFields and HydrosphereParams.
- Outputs:
    - HydrosphereFields: is_water01 (1 water, 0 land), alt_from_sea_signed,
      alt_above_sea01, thin_air_mask01 and coast_mask01.
- Side Effects: Logs messages using the module logger.
- Invariants: A cell is water exactly when its elevation is at or below
  sea_level01; land-only fields are zero over water.
================================================================================
"""


import logging
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import fields as F
from .elevation import TerrainElevationFields
from .params import HydrosphereParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HydrosphereFields:
    is_water01: np.ndarray          # 1 water, 0 land
    alt_from_sea_signed: np.ndarray  # elevation - sea level
    alt_above_sea01: np.ndarray
    thin_air_mask01: np.ndarray
    coast_mask01: np.ndarray


def coast_lines(is_water01: np.ndarray) -> np.ndarray:
    """1.0 where the clamped 4-neighbourhood mixes water and land, else 0.0."""
    padded = np.pad(is_water01, 1, mode='edge')
    center = padded[1:-1, 1:-1]
    diff = (
        np.abs(center - padded[1:-1, 2:]) + np.abs(center - padded[1:-1, :-2])
        + np.abs(center - padded[2:, 1:-1]) + np.abs(center - padded[:-2, 1:-1])
    )
    return (diff > 0.0).astype(np.float64)


def build_hydrosphere(
    width: int, height: int,
    terrain: TerrainElevationFields,
    params: HydrosphereParams = HydrosphereParams()
) -> HydrosphereFields:
    elevation01 = np.asarray(terrain.elevation01, dtype=np.float64)

    alt_from_sea = elevation01 - params.sea_level01
    is_water01 = (alt_from_sea <= 0.0).astype(np.float64)

    above = np.maximum(alt_from_sea, 0.0)
    max_above = float(above.max()) if above.size else 0.0
    if max_above > DEFAULTS.NORMALIZE_EPSILON:
        alt_above_sea01 = F.clamp01(above / max_above)
    else:
        alt_above_sea01 = np.zeros_like(above)

    start = min(1.0, max(0.0, params.thin_air_level))
    ramp = max(DEFAULTS.MIN_DENOMINATOR, params.thin_air_ramp)
    thin_air_mask01 = F.smoothstep(start, start + ramp, alt_above_sea01)

    coast_mask01 = F.normalize01(F.box_blur(coast_lines(is_water01), params.coast_blur_passes))

    logger.debug(f"Sea level {params.sea_level01:.2f}: {float(is_water01.mean()) * 100:.1f}% water.")
    return HydrosphereFields(
        is_water01=F.freeze(is_water01),
        alt_from_sea_signed=F.freeze(alt_from_sea),
        alt_above_sea01=F.freeze(alt_above_sea01),
        thin_air_mask01=F.freeze(thin_air_mask01),
        coast_mask01=F.freeze(coast_mask01),
    )
