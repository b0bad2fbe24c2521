# planet_generator/generator.py

"""
================================================================================
CORE WORLD GENERATOR
================================================================================
This module contains the WorldGenerator class, which runs every field
generator in a fixed dependency order and returns one immutable WorldFields
aggregate.

Data Contract:
---------------
- Inputs (on initialization):
    - params: a WorldParams, a nested dict of overrides (see
      WorldParams.from_config) or None for the defaults.
    - logger: an optional configured logging.Logger for runtime messages.
- Inputs (build):
    - width, height: positive integer grid dimensions.
    - seed: the world seed.
- Outputs:
    - WorldFields: every generator's field group; all arrays are read-only
      NumPy grids of shape (height, width).
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same dimensions, seed and parameters, the output is
  deterministic.
================================================================================
"""

import logging
import time
from dataclasses import dataclass, fields
from typing import Optional, Union

import numpy as np

from . import config as DEFAULTS
from .climate import (AirPressureFields, GeothermalFields, LatitudeFields, TemperatureFields,
                      build_air_pressure, build_geothermal, build_latitude, build_temperature)
from .continents import ContinentFields, build_continent_fields
from .craters import CraterFields, build_crater_fields
from .elevation import TerrainElevationFields, build_terrain_elevation
from .hydrosphere import HydrosphereFields, build_hydrosphere
from .morphology import MorphologyFields, build_morphology
from .params import WorldParams
from .tectonics import (BoundaryFields, PlateBiasFields, PlateFields,
                        build_boundary_fields, build_plate_bias, build_tectonic_plates)
from .terrain_noise import NoiseFields, build_noise_fields
from .volcanoes import VolcanoFields, build_volcano_fields
from .wind import WindCirculationFields, WindFields, build_wind, build_wind_circulation


@dataclass(frozen=True)
class WorldFields:
    """All field groups of one generated world, keyed by generator name."""
    width: int
    height: int
    seed: int
    tectonic_plates: PlateFields
    plate_boundary: BoundaryFields
    plate_bias: PlateBiasFields
    continent: ContinentFields
    noise: NoiseFields
    crater: CraterFields
    volcano: VolcanoFields
    terrain_elevation: TerrainElevationFields
    hydrosphere: HydrosphereFields
    morphology: MorphologyFields
    latitude: LatitudeFields
    wind_circulation: WindCirculationFields
    geothermal: GeothermalFields
    temperature: TemperatureFields
    air_pressure: AirPressureFields
    wind: WindFields

    def named_fields(self) -> dict:
        """Every grid as a flat {"group.field": array} mapping."""
        out = {}
        for group_field in fields(self):
            group = getattr(self, group_field.name)
            if not hasattr(group, "__dataclass_fields__"):
                continue
            for f in fields(group):
                value = getattr(group, f.name)
                if isinstance(value, np.ndarray):
                    out[f"{group_field.name}.{f.name}"] = value
        return out

    def __getitem__(self, key: str) -> np.ndarray:
        try:
            group_name, field_name = key.split(".", 1)
        except ValueError:
            raise KeyError(key) from None
        group = getattr(self, group_name, None)
        value = getattr(group, field_name, None) if hasattr(group, "__dataclass_fields__") else None
        if not isinstance(value, np.ndarray):
            raise KeyError(key)
        return value


def _validate_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return int(value)


class WorldGenerator:
    """
    Builds complete worlds from a fixed set of parameters.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, params: Optional[Union[WorldParams, dict]] = None, logger: Optional[logging.Logger] = None):
        """
        Initializes the world generator.

        Args:
            params (WorldParams | dict, optional): Generator parameters, or a
                nested dict of overrides merged over the defaults.
            logger (logging.Logger, optional): The logger instance for all output.
        """
        self.logger = logger or logging.getLogger(__name__)
        if params is None:
            params = WorldParams()
        elif isinstance(params, dict):
            params = WorldParams.from_config(params)
        elif not isinstance(params, WorldParams):
            raise ValueError(f"params must be a WorldParams or dict, got {type(params).__name__}")
        self.params = params
        self.logger.debug("WorldGenerator initialized.")

    def _stage(self, name: str, builder, *args, **kwargs):
        start_time = time.perf_counter()
        result = builder(*args, **kwargs)
        self.logger.debug(f"  {name} built in {time.perf_counter() - start_time:.3f}s.")
        return result

    def build(self, width: int = DEFAULTS.DEFAULT_WORLD_WIDTH, height: int = DEFAULTS.DEFAULT_WORLD_HEIGHT,
              seed: int = DEFAULTS.DEFAULT_SEED) -> WorldFields:
        """
        Generates every field of a width x height world from the seed.

        Raises:
            ValueError: If width or height is not a positive integer.
        """
        width = _validate_dimension("width", width)
        height = _validate_dimension("height", height)
        seed = int(seed)
        p = self.params

        self.logger.info(f"Generating {width}x{height} world with seed {seed}...")
        start_time = time.perf_counter()

        # 1. Independent layers
        continent = self._stage("continent", build_continent_fields, width, height, seed, p.continent)
        noise = self._stage("noise", build_noise_fields, width, height, seed, p.noise)
        plates = self._stage("tectonic_plates", build_tectonic_plates, width, height, seed, p.tectonic_plates)
        crater = self._stage("crater", build_crater_fields, width, height, seed, p.crater)
        latitude = self._stage("latitude", build_latitude, width, height, p.latitude)

        # 2. Circulation
        wind_circulation = self._stage("wind_circulation", build_wind_circulation, width, height, latitude,
                                       p.wind_circulation)

        # 3. Plate-derived layers
        plate_bias = self._stage("plate_bias", build_plate_bias, width, height, plates, p.plate_bias)
        boundary = self._stage("plate_boundary", build_boundary_fields, width, height, plates, p.plate_boundary)
        volcano = self._stage("volcano", build_volcano_fields, width, height, boundary, seed, p.volcano)

        # 4-6. Terrain
        terrain = self._stage("terrain_elevation", build_terrain_elevation, width, height,
                              continent, plate_bias, boundary, noise, crater, volcano, p.terrain_elevation)
        hydrosphere = self._stage("hydrosphere", build_hydrosphere, width, height, terrain, p.hydrosphere)
        morphology = self._stage("morphology", build_morphology, width, height, terrain, hydrosphere,
                                 p.hydrosphere.sea_level01, p.morphology)

        # 7. Climate
        geothermal = self._stage("geothermal", build_geothermal, width, height, volcano, boundary, hydrosphere,
                                 p.geothermal)
        temperature = self._stage("temperature", build_temperature, width, height, seed, latitude, hydrosphere,
                                  geothermal, p.temperature)
        air_pressure = self._stage("air_pressure", build_air_pressure, width, height, seed, hydrosphere,
                                   temperature, p.air_pressure)
        wind = self._stage("wind", build_wind, width, height, seed, hydrosphere, morphology, wind_circulation,
                           p.wind)

        world = WorldFields(
            width=width, height=height, seed=seed,
            tectonic_plates=plates,
            plate_boundary=boundary,
            plate_bias=plate_bias,
            continent=continent,
            noise=noise,
            crater=crater,
            volcano=volcano,
            terrain_elevation=terrain,
            hydrosphere=hydrosphere,
            morphology=morphology,
            latitude=latitude,
            wind_circulation=wind_circulation,
            geothermal=geothermal,
            temperature=temperature,
            air_pressure=air_pressure,
            wind=wind,
        )

        duration = time.perf_counter() - start_time
        water_pct = float(hydrosphere.is_water01.mean()) * 100.0
        self.logger.info(
            f"World generated in {duration:.2f}s: {len(plates.plates)} plates, {crater.count} craters, "
            f"{volcano.count} volcanoes, {water_pct:.1f}% water."
        )
        return world


def build_world_fields(width: int, height: int, seed: int,
                       params: Optional[Union[WorldParams, dict]] = None,
                       logger: Optional[logging.Logger] = None) -> WorldFields:
    """Functional entry point: builds one world with a throwaway WorldGenerator."""
    return WorldGenerator(params, logger).build(width, height, seed)
