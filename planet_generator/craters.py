# planet_generator/craters.py

"""
================================================================================
IMPACT CRATERS
================================================================================
Places impact craters and stamps them into a signed height field plus a
[0, 1] influence mask.

Each crater stamps, within its ejecta radius:
    - a power-curved bowl (negative) inside the inner radius,
    - a sine-bell rim ring (positive) in a band around the radius,
    - a noise-textured ejecta deposit (positive) that fades outward.
Distances are warped by stable per-crater noise so craters are not perfect
circles. Positive additions are attenuated on already-high terrain so
overlapping craters cannot stack into huge peaks, and masks merge through a
smooth union.
================================================================================
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from . import fields as F
from .noise import make_rng, noise_seed, signed_noise_2d
from .params import CraterParams

logger = logging.getLogger(__name__)

CRATER_NOISE_SEED_STRIDE = 1337
EJECTA_SEED_XOR = 0x5A5A
# Positive deltas are scaled by 1 - clamp01(current * this).
STACKING_ATTENUATION = 0.9
EJECTA_RIPPLE_PERIOD_MUL = 0.18


@dataclass(frozen=True)
class Crater:
    center: tuple[float, float]
    radius: float
    depth: float
    rim: float
    ejecta: float
    warp: float


@dataclass(frozen=True)
class CraterFields:
    crater_signed: np.ndarray  # [-1, 1]
    crater_mask01: np.ndarray  # [0, 1]
    craters: tuple

    @property
    def count(self) -> int:
        return len(self.craters)


def crater_count(width: int, height: int, params: CraterParams = CraterParams()) -> int:
    """Area-scaled crater count clamped into [min_craters, max_craters]."""
    raw = (width * height) // params.tiles_per_crater
    return int(np.clip(raw, params.min_craters, params.max_craters))


def _window(cx: float, cy: float, reach: float, width: int, height: int):
    min_x = int(np.clip(math.floor(cx - reach), 0, width - 1))
    max_x = int(np.clip(math.ceil(cx + reach), 0, width - 1))
    min_y = int(np.clip(math.floor(cy - reach), 0, height - 1))
    max_y = int(np.clip(math.ceil(cy + reach), 0, height - 1))
    return slice(min_y, max_y + 1), slice(min_x, max_x + 1)


def _stamp_crater(height_field: np.ndarray, mask_field: np.ndarray, crater: Crater, crater_seed: int, params: CraterParams):
    """Stamps one crater into the working height and mask grids."""
    grid_h, grid_w = height_field.shape
    cx, cy = crater.center
    radius = crater.radius
    r_inner = radius * params.inner_radius_mul
    r_rim_start = radius * params.rim_start_mul
    r_rim_end = radius * params.rim_end_mul
    r_ejecta_end = radius * params.ejecta_end_mul

    rows, cols = _window(cx, cy, r_ejecta_end, grid_w, grid_h)
    ys, xs = np.mgrid[rows, cols].astype(np.float64)
    d = np.hypot(xs - cx, ys - cy)
    inside = d <= r_ejecta_end

    warp_noise = signed_noise_2d(xs * params.warp_noise_freq, ys * params.warp_noise_freq, crater_seed)
    wd = d * (1.0 + crater.warp * warp_noise)

    delta = np.zeros_like(d)
    mask = np.zeros_like(d)

    # 1) Bowl (negative)
    in_bowl = inside & (wd < r_inner)
    bowl = F.smoothstep(0.0, 1.0, 1.0 - wd / r_inner) ** params.bowl_power
    delta = np.where(in_bowl, delta - bowl * crater.depth, delta)
    mask = np.where(in_bowl, np.maximum(mask, bowl), mask)

    # 2) Rim ring (positive bell)
    in_rim = inside & (wd >= r_rim_start) & (wd <= r_rim_end)
    bell = np.sin((wd - r_rim_start) / (r_rim_end - r_rim_start) * math.pi)
    delta = np.where(in_rim, delta + bell * crater.rim, delta)
    mask = np.where(in_rim, np.maximum(mask, bell), mask)

    # 3) Ejecta (mostly positive, textured and rippled)
    in_ejecta = inside & (wd > radius) & (wd < r_ejecta_end)
    falloff = 1.0 - (wd - radius) / (r_ejecta_end - radius)
    n = signed_noise_2d(xs * params.ejecta_noise_freq, ys * params.ejecta_noise_freq, crater_seed ^ EJECTA_SEED_XOR)
    biased = F.lerp(n, F.signed_to01(n), params.ejecta_bias)
    ripple = 0.70 + 0.30 * np.cos(wd / (radius * EJECTA_RIPPLE_PERIOD_MUL))
    deposit = falloff * crater.ejecta * (0.75 * biased + 0.25 * ripple)
    delta = np.where(in_ejecta, delta + deposit, delta)
    mask = np.where(in_ejecta, np.maximum(mask, falloff), mask)

    current = height_field[rows, cols]
    attenuation = np.where(delta > 0.0, 1.0 - F.clamp01(current * STACKING_ATTENUATION), 1.0)
    height_field[rows, cols] = np.where(inside, current + delta * attenuation, current)
    mask_field[rows, cols] = np.where(inside, F.smooth_union(mask_field[rows, cols], mask), mask_field[rows, cols])


def build_crater_fields(width: int, height: int, seed: int, params: CraterParams = CraterParams()) -> CraterFields:
    layer_seed = noise_seed(seed, params.seed_salt)
    rng = make_rng(layer_seed)

    height_field = F.zeros(width, height)
    mask_field = F.zeros(width, height)

    craters = []
    for i in range(crater_count(width, height, params)):
        cx = rng.random() * (width - 1)
        cy = rng.random() * (height - 1)
        radius = F.lerp(params.radius_min_tiles, params.radius_max_tiles, rng.random())
        crater = Crater(
            center=(float(cx), float(cy)),
            radius=float(radius),
            depth=params.depth * (0.75 + rng.random() * 0.5),
            rim=params.rim * (0.75 + rng.random() * 0.5),
            ejecta=params.ejecta * (0.75 + rng.random() * 0.5),
            warp=params.warp * (0.6 + rng.random() * 0.8),
        )
        _stamp_crater(height_field, mask_field, crater, layer_seed + i * CRATER_NOISE_SEED_STRIDE, params)
        craters.append(crater)

    logger.debug(f"Placed {len(craters)} craters.")
    return CraterFields(
        crater_signed=F.freeze(F.normalize_signed(height_field)),
        crater_mask01=F.freeze(F.normalize01(mask_field)),
        craters=tuple(craters),
    )
