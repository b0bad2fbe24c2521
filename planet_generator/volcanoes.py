# planet_generator/volcanoes.py

"""
================================================================================
VOLCANOES
================================================================================
Places volcanoes preferentially along plate boundaries and stamps them into a
signed height field, a volcano influence mask and an ash blanket mask.

Data Contract:
---------------
- Inputs:
    - World dimensions, seed, VolcanoParams.
    - BoundaryFields: fault proximity guides placement; the positive
      (convergent) part of boundary stress raises the stratovolcano chance.
- Outputs:
    - VolcanoFields: volcano_signed [-1, 1], volcano_mask01 [0, 1],
      ash_mask01 [0, 1] and the placed Volcano records.
- Side Effects: Logs messages using the module logger.
- Invariants: Ash never alters height; it only feeds derived fields.
================================================================================
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from . import fields as F
from .noise import make_rng, noise_seed, signed_noise_2d
from .params import VolcanoParams
from .tectonics import BoundaryFields

logger = logging.getLogger(__name__)

PLACEMENT_SEED_XOR = 0x51ED
TYPE_SEED_XOR = 0xA11CE
ROUGH_SEED_XOR = 0x1234
ASH_SEED_XOR = 0xBEEF
VOLCANO_NOISE_SEED_STRIDE = 4099

SHIELD = "shield"
STRATO = "strato"


@dataclass(frozen=True)
class VolcanoShape:
    radius_mul: float
    height_mul: float
    falloff_power: float
    ash_mul: float
    rough_mul: float
    caldera_mul: float
    caldera_radius_mul: float


VOLCANO_SHAPES = {
    # Wide, low, gentle slopes.
    SHIELD: VolcanoShape(radius_mul=1.55, height_mul=0.72, falloff_power=1.15,
                         ash_mul=0.70, rough_mul=0.70, caldera_mul=0.70, caldera_radius_mul=0.18),
    # Narrow, tall, steep cone.
    STRATO: VolcanoShape(radius_mul=0.78, height_mul=1.25, falloff_power=3.00,
                         ash_mul=1.35, rough_mul=1.15, caldera_mul=1.10, caldera_radius_mul=0.26),
}


@dataclass(frozen=True)
class Volcano:
    center: tuple[float, float]
    kind: str
    radius: float
    cone_height: float
    caldera_depth: float
    warp: float


@dataclass(frozen=True)
class VolcanoFields:
    volcano_signed: np.ndarray
    volcano_mask01: np.ndarray
    ash_mask01: np.ndarray
    volcanoes: tuple

    @property
    def count(self) -> int:
        return len(self.volcanoes)


def volcano_count(width: int, height: int, params: VolcanoParams = VolcanoParams()) -> int:
    raw = (width * height) // params.tiles_per_volcano
    return int(np.clip(raw, params.min_volcanoes, params.max_volcanoes))


def pick_volcano_centers(width: int, height: int, fault_mask01: np.ndarray, layer_seed: int, count: int,
                         params: VolcanoParams = VolcanoParams()) -> list:
    """
    Rejection-samples centres weighted by fault^power while keeping a minimum
    spacing; tops up with uniform picks if sampling undershoots the target.
    """
    rng = make_rng(layer_seed, PLACEMENT_SEED_XOR)
    chosen = []
    min_spacing2 = float(max(0, params.min_spacing_tiles)) ** 2

    for _ in range(max(1, count * params.attempts_per_volcano)):
        if len(chosen) >= count:
            break
        x = int(rng.integers(width))
        y = int(rng.integers(height))
        weight = float(fault_mask01[y, x]) ** params.fault_power
        if rng.random() > weight:
            continue
        if all((x - cx) ** 2 + (y - cy) ** 2 >= min_spacing2 for cx, cy in chosen):
            chosen.append((float(x), float(y)))

    sampled = len(chosen)
    while len(chosen) < count:
        chosen.append((float(rng.integers(width)), float(rng.integers(height))))
    if sampled < count:
        logger.debug(f"Volcano placement: {sampled}/{count} fault-guided, rest uniform.")
    return chosen


def strato_chance(fault: float, convergence: float, params: VolcanoParams = VolcanoParams()) -> float:
    """Stratovolcanoes favour active faults and convergent (positive) boundary stress."""
    return float(np.clip(
        params.strato_base
        + params.strato_fault_weight * max(0.0, fault) ** params.strato_fault_power
        + params.strato_convergence_weight * min(1.0, max(0.0, convergence)),
        0.0, 1.0,
    ))


def _stamp_volcano(height_field, volcano_mask, ash_mask, volcano: Volcano, volcano_seed: int, params: VolcanoParams):
    grid_h, grid_w = height_field.shape
    shape = VOLCANO_SHAPES[volcano.kind]
    cx, cy = volcano.center
    r = volcano.radius
    h = volcano.cone_height
    caldera_depth = volcano.caldera_depth
    r_ash = r * params.ash_radius_mul

    min_x = int(np.clip(math.floor(cx - r_ash), 0, grid_w - 1))
    max_x = int(np.clip(math.ceil(cx + r_ash), 0, grid_w - 1))
    min_y = int(np.clip(math.floor(cy - r_ash), 0, grid_h - 1))
    max_y = int(np.clip(math.ceil(cy + r_ash), 0, grid_h - 1))
    rows, cols = slice(min_y, max_y + 1), slice(min_x, max_x + 1)

    ys, xs = np.mgrid[rows, cols].astype(np.float64)
    d = np.hypot(xs - cx, ys - cy)
    inside = d <= r_ash

    # Noise frequencies scale with volcano size so small cones still get detail.
    warp_freq = float(np.clip(1.0 / (r * 0.55), 0.08, 0.45))
    rough_freq = float(np.clip(1.0 / (r * 0.30), 0.10, 0.70))
    ash_freq = float(np.clip(1.0 / (r * 1.10), 0.03, 0.20))

    wd = d * (1.0 + volcano.warp * signed_noise_2d(xs * warp_freq, ys * warp_freq, volcano_seed))

    # ---- Cone ----
    in_cone = inside & (wd < r)
    cone = np.clip(1.0 - np.clip(wd / r, 0.0, 1.0), 0.0, 1.0) ** shape.falloff_power
    cone = np.where(in_cone, cone, 0.0)
    rough = signed_noise_2d(xs * rough_freq, ys * rough_freq, volcano_seed ^ ROUGH_SEED_XOR)
    delta = cone * h + rough * params.roughness * shape.rough_mul * cone

    # ---- Caldera ----
    if caldera_depth > 0.0:
        r_caldera = r * shape.caldera_radius_mul
        in_caldera = inside & (wd < r_caldera)
        u = np.clip(wd / r_caldera, 0.0, 1.0)
        delta = np.where(in_caldera, delta - (1.0 - u * u) * caldera_depth, delta)

    # ---- Ash blanket (mask only) ----
    ash_core = np.clip(1.0 - np.clip(wd / r_ash, 0.0, 1.0), 0.0, 1.0)
    ash_base = ash_core * ash_core * params.ash_strength * shape.ash_mul
    ash_tex = 0.78 + 0.22 * signed_noise_2d(xs * ash_freq, ys * ash_freq, volcano_seed ^ ASH_SEED_XOR)
    ash_value = np.clip(ash_base * ash_tex, 0.0, 1.0)

    height_field[rows, cols] = np.where(inside, height_field[rows, cols] + delta, height_field[rows, cols])
    volcano_mask[rows, cols] = np.where(in_cone, F.smooth_union(volcano_mask[rows, cols], cone), volcano_mask[rows, cols])
    ash_mask[rows, cols] = np.where(inside, F.smooth_union(ash_mask[rows, cols], ash_value), ash_mask[rows, cols])


def build_volcano_fields(
    width: int, height: int,
    boundary_fields: BoundaryFields,
    seed: int,
    params: VolcanoParams = VolcanoParams()
) -> VolcanoFields:
    fault_mask01 = boundary_fields.fault_mask01
    boundary_signed = boundary_fields.boundary_signed

    layer_seed = noise_seed(seed, params.seed_salt)
    rng = make_rng(layer_seed)

    height_field = F.zeros(width, height)
    volcano_mask = F.zeros(width, height)
    ash_mask = F.zeros(width, height)

    count = volcano_count(width, height, params)
    centers = pick_volcano_centers(width, height, fault_mask01, layer_seed, count, params)

    volcanoes = []
    for i, (cx, cy) in enumerate(centers):
        base_radius = F.lerp(params.radius_min_tiles, params.radius_max_tiles, rng.random())
        cone_height = F.lerp(params.cone_height_min, params.cone_height_max, rng.random())
        warp = params.warp * (0.6 + rng.random() * 0.8)
        has_caldera = rng.random() < params.caldera_chance
        caldera_depth = F.lerp(params.caldera_depth_min, params.caldera_depth_max, rng.random()) if has_caldera else 0.0

        volcano_seed = (layer_seed + i * VOLCANO_NOISE_SEED_STRIDE) & 0xFFFFFFFF
        ix = int(np.clip(int(cx), 0, width - 1))
        iy = int(np.clip(int(cy), 0, height - 1))
        chance = strato_chance(float(fault_mask01[iy, ix]), float(boundary_signed[iy, ix]), params)
        kind = STRATO if make_rng(volcano_seed, TYPE_SEED_XOR).random() < chance else SHIELD
        shape = VOLCANO_SHAPES[kind]

        volcano = Volcano(
            center=(cx, cy),
            kind=kind,
            radius=max(params.min_radius_tiles, base_radius * shape.radius_mul),
            cone_height=cone_height * shape.height_mul,
            caldera_depth=caldera_depth * shape.caldera_mul,
            warp=warp,
        )
        _stamp_volcano(height_field, volcano_mask, ash_mask, volcano, volcano_seed, params)
        volcanoes.append(volcano)

    strato = sum(1 for v in volcanoes if v.kind == STRATO)
    logger.debug(f"Placed {len(volcanoes)} volcanoes ({strato} strato, {len(volcanoes) - strato} shield).")
    return VolcanoFields(
        volcano_signed=F.freeze(F.normalize_signed(height_field)),
        volcano_mask01=F.freeze(F.normalize01(volcano_mask)),
        ash_mask01=F.freeze(F.normalize01(ash_mask)),
        volcanoes=tuple(volcanoes),
    )
