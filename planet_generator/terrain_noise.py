# planet_generator/terrain_noise.py

"""
================================================================================
TERRAIN NOISE
================================================================================
Natural terrain noise as a signed field in [-1, 1]: a fractal main band plus
an optional finer detail band.

Feature size is kept roughly stable in tiles, but the base period adapts to
the map size so small maps do not look flat and large maps not uniform.

Data Contract:
---------------
- Inputs:
    - World dimensions, seed and NoiseParams.
- Outputs:
    - NoiseFields: noise_signed in [-1, 1] and the base period actually used.
- Side Effects: Logs messages using the module logger.
- Invariants: The output is mean-centred before normalization.
================================================================================
"""


import logging
from dataclasses import dataclass

import numpy as np

from . import fields as F
from .noise import fractal_noise, noise_seed
from .params import NoiseParams

logger = logging.getLogger(__name__)

DETAIL_SEED_XOR = 0x9E37
MIN_DETAIL_PERIOD_TILES = 3.0
MIN_DETAIL_OCTAVES = 2


@dataclass(frozen=True)
class NoiseFields:
    noise_signed: np.ndarray
    base_period_used: float


def base_period_for(width: int, height: int, params: NoiseParams) -> float:
    if params.auto_scale_base_period:
        computed = min(width, height) / params.features_across_min_dim
        return float(np.clip(computed, params.min_base_period_tiles, params.max_base_period_tiles))
    return float(np.clip(params.base_period_tiles, 1.0, 10_000.0))


def build_noise_fields(width: int, height: int, seed: int, params: NoiseParams = NoiseParams()) -> NoiseFields:
    layer_seed = noise_seed(seed, params.seed_salt)
    base_period = base_period_for(width, height, params)

    noise = fractal_noise(width, height, layer_seed, base_period, params.octaves)

    # The detail band breaks up the smooth main band at a smaller period.
    if params.enable_detail_band:
        detail_period = max(MIN_DETAIL_PERIOD_TILES, base_period * params.detail_band_period_mul)
        detail = fractal_noise(
            width, height,
            layer_seed ^ DETAIL_SEED_XOR,
            detail_period,
            max(MIN_DETAIL_OCTAVES, params.octaves - 1),
        )
        noise = noise + detail * params.detail_band_strength

    logger.debug(f"Terrain noise base period: {base_period:.2f} tiles.")
    return NoiseFields(
        noise_signed=F.freeze(F.normalize_signed(F.mean_center(noise))),
        base_period_used=base_period,
    )
