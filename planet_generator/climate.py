# planet_generator/climate.py

"""
================================================================================
CLIMATE FIELDS
================================================================================
Latitude, geothermal heat, temperature and air pressure.

Data Contract:
---------------
- Inputs:
    - World dimensions and seed.
    - Terrain results: HydrosphereFields, BoundaryFields, VolcanoFields.
    - LatitudeParams, GeothermalParams, TemperatureParams, AirPressureParams.
- Outputs:
    - LatitudeFields: latitude_signed, -1 north pole, 0 equator, +1 south pole.
    - GeothermalFields: geothermal_heat01 and the undamped geothermal_raw01.
    - TemperatureFields: temperature01 plus its non-geothermal base and the
      latitude heat / altitude cooling components.
    - AirPressureFields: air_pressure01.
- Side Effects: Logs messages using the module logger.
- Invariants: Every output is a UnitField except latitude, which is signed.
================================================================================
"""

import logging
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import fields as F
from .hydrosphere import HydrosphereFields
from .noise import fractal_noise, noise_seed
from .params import AirPressureParams, GeothermalParams, LatitudeParams, TemperatureParams
from .tectonics import BoundaryFields
from .volcanoes import VolcanoFields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LatitudeFields:
    latitude_signed: np.ndarray


@dataclass(frozen=True)
class GeothermalFields:
    geothermal_heat01: np.ndarray
    geothermal_raw01: np.ndarray


@dataclass(frozen=True)
class TemperatureFields:
    temperature01: np.ndarray
    temperature_base01: np.ndarray
    temp_lat01: np.ndarray
    temp_alt_cool01: np.ndarray


@dataclass(frozen=True)
class AirPressureFields:
    air_pressure01: np.ndarray


# ==============================================================================
# Latitude
# ==============================================================================

def _guarded(denominator: float) -> float:
    return DEFAULTS.MIN_DENOMINATOR if abs(denominator) < DEFAULTS.MIN_DENOMINATOR else denominator


def latitude_from_percent(percent, params: LatitudeParams = LatitudeParams()):
    """
    Maps a row percentage (0 = top edge, 1 = bottom edge) piecewise-linearly to
    a signed latitude: north pole -1, equator 0, south pole +1.
    """
    percent = np.asarray(percent, dtype=np.float64)
    equator = params.equator_lat_percent
    north = (percent - equator) / _guarded(equator - params.pole_north_lat_percent)
    south = (percent - equator) / _guarded(params.pole_south_lat_percent - equator)
    return np.where(percent <= equator, np.clip(north, -1.0, 0.0), np.clip(south, 0.0, 1.0))


def build_latitude(width: int, height: int, params: LatitudeParams = LatitudeParams()) -> LatitudeFields:
    if params.mono_lat_percent is not None:
        row_lat = np.full(height, float(latitude_from_percent(params.mono_lat_percent, params)))
    else:
        rows = np.arange(height, dtype=np.float64)
        percent = rows / (height - 1) if height > 1 else np.zeros(height)
        row_lat = latitude_from_percent(percent, params)
    latitude = np.repeat(row_lat[:, None], width, axis=1)
    return LatitudeFields(latitude_signed=F.freeze(latitude))


def distance_from_equator(latitude_signed: np.ndarray) -> np.ndarray:
    """0 on the equator, 1 at either pole."""
    return np.abs(np.clip(latitude_signed, -1.0, 1.0))


# ==============================================================================
# Geothermal
# ==============================================================================

def build_geothermal(
    width: int, height: int,
    volcano: VolcanoFields,
    boundary: BoundaryFields,
    hydrosphere: HydrosphereFields,
    params: GeothermalParams = GeothermalParams()
) -> GeothermalFields:
    raw = F.weighted_sum([
        (F.clamp01(volcano.volcano_mask01), params.volcano_heat_strength),
        (F.clamp01(boundary.fault_mask01), params.fault_heat_strength),
        (F.clamp01(volcano.ash_mask01), params.ash_heat_strength),
    ], (height, width))
    raw01 = F.normalize01(raw)

    # Heat under water and in thin air is felt less as air temperature.
    water_mul = F.lerp(1.0, params.water_dampen_mul, F.clamp01(hydrosphere.is_water01))
    thin_mul = F.lerp(1.0, params.thin_air_dampen_mul, F.clamp01(hydrosphere.thin_air_mask01))
    heat = F.box_blur(raw01 * water_mul * thin_mul, params.spread_blur_passes)

    return GeothermalFields(
        geothermal_heat01=F.freeze(F.normalize01(heat)),
        geothermal_raw01=F.freeze(raw01),
    )


# ==============================================================================
# Temperature
# ==============================================================================

def build_temperature(
    width: int, height: int,
    seed: int,
    latitude: LatitudeFields,
    hydrosphere: HydrosphereFields,
    geothermal: GeothermalFields,
    params: TemperatureParams = TemperatureParams()
) -> TemperatureFields:
    """
    Builds temperature from latitude heat, altitude cooling and a little noise,
    moderated on coasts, then mixes in geothermal heat.
    """
    temp_lat01 = np.clip(1.0 - distance_from_equator(latitude.latitude_signed), 0.0, 1.0) ** params.latitude_curve_power
    temp_alt_cool01 = F.clamp01(hydrosphere.alt_above_sea01) ** params.altitude_curve_power
    noise = F.normalize_signed(
        fractal_noise(width, height, noise_seed(seed, params.seed_salt), params.base_period_tiles, params.octaves)
    )

    t = (
        temp_lat01 * params.latitude_strength
        - temp_alt_cool01 * params.altitude_strength
        + noise * params.noise_strength
    )
    k = F.clamp01(F.clamp01(hydrosphere.coast_mask01) * params.coast_moderation_strength)
    t = F.lerp(t, params.mild_temp01, k)
    base01 = F.normalize01(t)

    mixed = base01 + F.clamp01(geothermal.geothermal_heat01) ** params.geothermal_power * params.geothermal_strength
    temperature01 = F.clamp01(mixed) if params.geothermal_clamp else F.normalize01(mixed)

    logger.debug(f"Temperature: mean {float(temperature01.mean()):.3f}.")
    return TemperatureFields(
        temperature01=F.freeze(temperature01),
        temperature_base01=F.freeze(base01),
        temp_lat01=F.freeze(temp_lat01),
        temp_alt_cool01=F.freeze(temp_alt_cool01),
    )


# ==============================================================================
# Air pressure
# ==============================================================================

def build_air_pressure(
    width: int, height: int,
    seed: int,
    hydrosphere: HydrosphereFields,
    temperature: TemperatureFields,
    params: AirPressureParams = AirPressureParams()
) -> AirPressureFields:
    """Mountains and warm air lower the pressure; noise adds weather systems."""
    noise = F.normalize_signed(
        fractal_noise(width, height, noise_seed(seed, params.seed_salt), params.base_period_tiles, params.octaves)
    )
    alt = F.clamp01(hydrosphere.alt_above_sea01)
    temp_anomaly = F.clamp01(temperature.temperature01) - params.mid_temp01

    pressure = (
        0.5
        - alt * params.altitude_strength
        - temp_anomaly * params.temperature_strength
        + noise * params.noise_strength
    )
    return AirPressureFields(air_pressure01=F.freeze(F.normalize01(pressure)))
