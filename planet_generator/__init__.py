from .generator import WorldFields, WorldGenerator, build_world_fields
from .params import (AirPressureParams, ContinentParams, CraterParams, GeothermalParams, HydrosphereParams,
                     LatitudeParams, MorphologyParams, NoiseParams, PlateBiasParams, PlateBoundaryParams,
                     TectonicPlateParams, TemperatureParams, TerrainElevationParams, VolcanoParams,
                     WindCirculationParams, WindParams, WorldParams)

__all__ = [
    "WorldFields",
    "WorldGenerator",
    "build_world_fields",
    "WorldParams",
    "TectonicPlateParams",
    "PlateBoundaryParams",
    "PlateBiasParams",
    "ContinentParams",
    "NoiseParams",
    "CraterParams",
    "VolcanoParams",
    "TerrainElevationParams",
    "HydrosphereParams",
    "MorphologyParams",
    "LatitudeParams",
    "WindCirculationParams",
    "GeothermalParams",
    "TemperatureParams",
    "AirPressureParams",
    "WindParams",
]
