# planet_generator/continents.py

"""
================================================================================
CONTINENT GENERATION
================================================================================
This module builds the continent layer: a signed "macro landmass pressure"
field in [-1, 1]. Positive values push toward land, negative values toward
ocean.

The field is centred by subtracting 0.5 from the blob mask rather than by
mean-centring, so the share of ocean versus land stays under the control of
the blob and edge parameters.

Data Contract:
---------------
- Inputs:
    - World dimensions, seed and ContinentParams.
- Outputs:
    - ContinentFields: continent_signed in [-1, 1], the blob centres and the
      blob radius in tiles.
- Side Effects: Logs messages using the module logger.
- Invariants: Grid edges are depressed toward ocean by edge_depress_mul.
================================================================================
"""


import logging
from dataclasses import dataclass

import numpy as np

from . import fields as F
from .noise import make_rng, noise_seed, value_noise_2d
from .params import ContinentParams

logger = logging.getLogger(__name__)

MAX_CONTINENT_CENTERS = 16


@dataclass(frozen=True)
class ContinentFields:
    continent_signed: np.ndarray
    centers: tuple
    blob_radius: float


def _edge_falloff(width: int, height: int, params: ContinentParams) -> np.ndarray:
    """1.0 at the grid edges, falling to 0.0 toward the centre."""
    xs = np.arange(width, dtype=np.float64)
    ys = np.arange(height, dtype=np.float64)
    fx = np.minimum(xs, width - 1 - xs) / (width * 0.5)
    fy = np.minimum(ys, height - 1 - ys) / (height * 0.5)
    d = np.minimum(fx[None, :], fy[:, None])
    return 1.0 - F.smoothstep(params.edge_falloff_inner, params.edge_falloff_outer, d)


def build_continent_fields(width: int, height: int, seed: int, params: ContinentParams = ContinentParams()) -> ContinentFields:
    rng = make_rng(seed, params.seed_salt)

    spread = max(1, params.max_centers - params.min_centers + 1)
    count = int(np.clip(params.min_centers + rng.integers(spread), 1, MAX_CONTINENT_CENTERS))
    centers = tuple((float(rng.random() * (width - 1)), float(rng.random() * (height - 1))) for _ in range(count))

    min_dim = float(min(width, height))
    blob_radius = min_dim * (params.radius_min_mul + rng.random() * (params.radius_max_mul - params.radius_min_mul))

    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)

    # Stable per-tile warp keeps coastlines from being perfect circles.
    if params.enable_warp:
        warp_freq = 1.0 / params.warp_period_tiles
        warp_seed = noise_seed(seed, params.warp_seed_salt)
        warp = (value_noise_2d(xs * warp_freq, ys * warp_freq, warp_seed) - 0.5) * 2.0 * params.warp_strength
    else:
        warp = np.zeros_like(xs)

    mask = F.zeros(width, height)
    for cx, cy in centers:
        d = np.hypot(xs - cx, ys - cy) * (1.0 + warp)
        mask = np.maximum(mask, F.smoothstep(0.0, 1.0, 1.0 - d / blob_radius))

    edge = _edge_falloff(width, height, params)
    landmass = mask * (1.0 - params.edge_depress_mul * edge)

    logger.debug(f"Continents: {count} blob(s), radius {blob_radius:.2f} tiles.")
    return ContinentFields(
        continent_signed=F.freeze(F.normalize_signed(landmass - 0.5)),
        centers=centers,
        blob_radius=float(blob_radius),
    )
