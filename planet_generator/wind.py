# planet_generator/wind.py

"""
================================================================================
WIND
================================================================================
Two stages:
    1. Circulation: a prevailing direction and speed multiplier per latitude
       band (Hadley, Ferrel, Polar), turned by a Coriolis deflection.
    2. Final wind: speed shaped by terrain exposure, topographic acceleration
       and shelter, scaled by the band multiplier.

Coordinates follow the grid: +x to the right, +y downward (southward).
================================================================================
"""

import logging
import math
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import fields as F
from .climate import LatitudeFields, distance_from_equator
from .hydrosphere import HydrosphereFields
from .morphology import MorphologyFields
from .noise import fractal_noise, noise_seed
from .params import WindCirculationParams, WindParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindCirculationFields:
    wind_dir_x_signed: np.ndarray
    wind_dir_y_signed: np.ndarray
    band_speed_mul01: np.ndarray


@dataclass(frozen=True)
class WindFields:
    wind_speed01: np.ndarray
    wind_dir_x_signed: np.ndarray
    wind_dir_y_signed: np.ndarray
    exposure01: np.ndarray
    shelter01: np.ndarray
    topo_accel01: np.ndarray
    band_speed_mul_abs01: np.ndarray


def _unit(x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    length = np.hypot(x, y)
    short = length < DEFAULTS.NORMALIZE_EPSILON
    safe = np.where(short, 1.0, length)
    return np.where(short, 0.0, x / safe), np.where(short, 0.0, y / safe)


def build_wind_circulation(
    width: int, height: int,
    latitude: LatitudeFields,
    params: WindCirculationParams = WindCirculationParams()
) -> WindCirculationFields:
    lat = np.clip(np.asarray(latitude.latitude_signed, dtype=np.float64), -1.0, 1.0)
    dist_eq = distance_from_equator(lat)

    transition = max(DEFAULTS.MIN_DENOMINATOR, params.band_transition)
    hadley_to_ferrel = F.smoothstep(0.0, 1.0, (dist_eq - params.hadley_max) / transition)
    ferrel_to_polar = F.smoothstep(0.0, 1.0, (dist_eq - params.ferrel_max) / transition)
    in_low_bands = dist_eq <= params.ferrel_max

    # Zonal component: easterlies, westerlies, polar easterlies.
    band_x = np.where(in_low_bands, F.lerp(-1.0, 1.0, hadley_to_ferrel), F.lerp(1.0, -1.0, ferrel_to_polar))

    # Meridional tilt: equatorward in the Hadley and Polar cells, poleward in Ferrel.
    equatorward = np.where(lat < 0.0, 1.0, -1.0)
    in_ferrel = (dist_eq > params.hadley_max) & in_low_bands
    band_y = np.where(in_ferrel, -equatorward, equatorward) * params.meridional_strength

    dir_x, dir_y = _unit(band_x, band_y)

    # Coriolis turns right in the north; with +y down that is a negative angle.
    max_turn = math.radians(params.coriolis_max_degrees)
    turn_sign = np.where(lat < 0.0, -1.0, 1.0)
    turn = turn_sign * max_turn * np.abs(lat) ** params.coriolis_curve_power * params.coriolis_strength
    c, s = np.cos(turn), np.sin(turn)
    dir_x, dir_y = _unit(dir_x * c - dir_y * s, dir_x * s + dir_y * c)

    speed_mul = np.where(
        in_low_bands,
        F.lerp(params.hadley_speed_mul, params.ferrel_speed_mul, hadley_to_ferrel),
        F.lerp(params.ferrel_speed_mul, params.polar_speed_mul, ferrel_to_polar),
    )
    if params.jet_strength > 0.0:
        z = (dist_eq - params.jet_center_dist_eq) / max(DEFAULTS.MIN_DENOMINATOR, params.jet_sigma)
        speed_mul = speed_mul * (1.0 + params.jet_strength * np.exp(-0.5 * z * z))
    speed_mul = np.clip(speed_mul, params.speed_mul_min, params.speed_mul_max)
    speed_mul01 = F.clamp01((speed_mul - params.speed_mul_min) / (params.speed_mul_max - params.speed_mul_min))

    return WindCirculationFields(
        wind_dir_x_signed=F.freeze(dir_x),
        wind_dir_y_signed=F.freeze(dir_y),
        band_speed_mul01=F.freeze(speed_mul01),
    )


def build_wind(
    width: int, height: int,
    seed: int,
    hydrosphere: HydrosphereFields,
    morphology: MorphologyFields,
    circulation: WindCirculationFields,
    params: WindParams = WindParams()
) -> WindFields:
    noise = F.normalize_signed(
        fractal_noise(width, height, noise_seed(seed, params.seed_salt), params.base_period_tiles, params.octaves)
    )

    water = F.clamp01(hydrosphere.is_water01)
    land = 1.0 - water
    coast = F.clamp01(hydrosphere.coast_mask01)
    alt = F.clamp01(hydrosphere.alt_above_sea01) ** params.alt_power

    # Topographic terms only apply on land.
    peak = F.clamp01(morphology.peak01) ** params.peak_power * land
    slope = F.clamp01(morphology.steepness01) ** params.slope_power * land
    basin = F.clamp01(morphology.basin01) ** params.basin_power * land
    rough = F.clamp01(morphology.roughness01) ** params.roughness_power * land

    exposure01 = F.clamp01(F.smooth_union(coast, alt))
    topo_accel01 = F.clamp01(F.smooth_union(peak, slope))
    shelter01 = F.clamp01(basin * 0.75 + rough * 0.25)

    mul_range = params.band_speed_mul_max - params.band_speed_mul_min
    band_mul_abs = F.lerp(params.band_speed_mul_min, params.band_speed_mul_max, F.clamp01(circulation.band_speed_mul01))
    band_speed_mul_abs01 = F.clamp01((band_mul_abs - params.band_speed_mul_min) / mul_range)

    speed = (
        params.base_wind
        + coast * params.coast_boost
        + alt * params.high_alt_boost
        + peak * params.peak_boost
        + slope * params.slope_boost
        - basin * params.basin_shelter
        - rough * params.roughness_drag
        + water * params.water_speed_boost
        + noise * params.noise_strength
    )
    speed = speed * F.lerp(1.0, band_mul_abs, min(1.0, max(0.0, params.band_speed_influence)))
    wind_speed01 = F.normalize01(speed)

    logger.debug(f"Wind: mean speed {float(wind_speed01.mean()):.3f}.")
    return WindFields(
        wind_speed01=F.freeze(wind_speed01),
        # Copies, so the final wind never shares arrays with the circulation group.
        wind_dir_x_signed=F.freeze(np.array(circulation.wind_dir_x_signed, copy=True)),
        wind_dir_y_signed=F.freeze(np.array(circulation.wind_dir_y_signed, copy=True)),
        exposure01=F.freeze(exposure01),
        shelter01=F.freeze(shelter01),
        topo_accel01=F.freeze(topo_accel01),
        band_speed_mul_abs01=F.freeze(band_speed_mul_abs01),
    )
