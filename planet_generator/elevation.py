# planet_generator/elevation.py

"""
================================================================================
TERRAIN ELEVATION COMPOSITOR
================================================================================
Mixes the signed macro-shape layers into one elevation field.

Data Contract:
---------------
- Inputs:
    - ContinentFields, PlateBiasFields, BoundaryFields, NoiseFields,
      CraterFields, VolcanoFields and TerrainElevationParams.
- Outputs:
    - TerrainElevationFields: elevation01 in [0, 1].
- Invariants: Part of the crater layer and all of the volcano layer are added
  after smoothing, so crater rims and volcanic cones stay crisp.
================================================================================
"""

import logging
from dataclasses import dataclass

import numpy as np

from . import fields as F
from .continents import ContinentFields
from .craters import CraterFields
from .params import TerrainElevationParams
from .tectonics import BoundaryFields, PlateBiasFields
from .terrain_noise import NoiseFields
from .volcanoes import VolcanoFields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TerrainElevationFields:
    elevation01: np.ndarray


def build_terrain_elevation(
    width: int, height: int,
    continent: ContinentFields,
    plate_bias: PlateBiasFields,
    boundary: BoundaryFields,
    noise: NoiseFields,
    crater: CraterFields,
    volcano: VolcanoFields,
    params: TerrainElevationParams = TerrainElevationParams()
) -> TerrainElevationFields:
    shape = (height, width)
    crater_pre = params.crater_strength * params.crater_pre_blur_fraction
    crater_post = params.crater_strength - crater_pre

    raw = F.weighted_sum([
        (continent.continent_signed, params.continent_strength),
        (plate_bias.plate_bias_signed, params.plate_bias_strength),
        (boundary.boundary_signed, params.boundary_strength),
        (noise.noise_signed, params.noise_strength),
        (crater.crater_signed, crater_pre),
    ], shape)

    raw = F.box_blur(raw, params.smooth_passes)

    raw = raw + F.weighted_sum([
        (crater.crater_signed, crater_post),
        (volcano.volcano_signed, params.volcano_strength),
    ], shape)

    elevation01 = F.normalize01(raw)
    logger.debug(f"Elevation composed: mean {float(elevation01.mean()):.3f}.")
    return TerrainElevationFields(elevation01=F.freeze(elevation01))
