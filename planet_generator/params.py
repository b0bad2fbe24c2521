# planet_generator/params.py

"""
================================================================================
GENERATOR PARAMETERS
================================================================================
One frozen parameter class per generator, each with documented defaults, and
`WorldParams`, which composes them into the single configuration value passed
to the orchestrator.

A plain dictionary of overrides can be turned into a WorldParams with
`WorldParams.from_config`; any key it omits keeps its default.
================================================================================
"""

from dataclasses import dataclass, field, fields, replace
from typing import Optional

OWNERSHIP_METHODS = ("exhaustive", "kdtree")


def _require(condition: bool, message: str):
    if not condition:
        raise ValueError(message)


@dataclass(frozen=True)
class TectonicPlateParams:
    plate_count: int = 14
    min_plate_count: int = 1
    max_plate_count: int = 64

    # Velocity magnitude range
    velocity_min: float = 0.2
    velocity_max: float = 1.0

    # Probability a plate is continental-leaning rather than oceanic-leaning.
    continental_chance: float = 0.55
    continental_bias_min: float = 0.6
    continental_bias_max: float = 1.0
    oceanic_bias_min: float = 0.0
    oceanic_bias_max: float = 0.4

    # 'exhaustive' scans every plate per cell; 'kdtree' uses scipy's cKDTree.
    ownership_method: str = "exhaustive"
    seed_salt: int = 0x504C41544553

    def __post_init__(self):
        _require(1 <= self.min_plate_count <= self.max_plate_count,
                 f"plate count bounds must satisfy 1 <= min <= max, got "
                 f"[{self.min_plate_count}, {self.max_plate_count}]")
        _require(self.velocity_min <= self.velocity_max, "velocity_min must not exceed velocity_max")
        _require(self.ownership_method in OWNERSHIP_METHODS,
                 f"ownership_method must be one of {OWNERSHIP_METHODS}, got {self.ownership_method!r}")


@dataclass(frozen=True)
class PlateBoundaryParams:
    # How strongly ridges/rifts contribute before normalization.
    ridge_strength: float = 0.9
    rift_strength: float = 0.6
    # Weight of the plate-stable jitter applied along transform boundaries.
    transform_roughness: float = 0.25
    # Spread distance of boundary effects; blur passes = round(falloff / 2).
    boundary_falloff: float = 8.0
    # Small positive mark so blurring turns boundary lines into ranges.
    boundary_mark_strength: float = 0.05
    rough_noise_freq: float = 1.8
    approach_scale: float = 1.2
    # Shear dampens how much of an oblique collision/separation counts as ridge/rift.
    shear_ridge_damping: float = 0.5
    shear_rift_damping: float = 0.3
    blur_fault_mask: bool = True
    fault_blur_mul: float = 0.5
    rough_seed_salt: int = 1337

    def __post_init__(self):
        _require(self.boundary_falloff >= 0, "boundary_falloff must be non-negative")


@dataclass(frozen=True)
class PlateBiasParams:
    # Plate continental bias of 0.5 maps to 0; 1.0 to +0.5; 0.0 to -0.5.
    bias_center: float = 0.5
    # Smoothing so plate interiors blend instead of forming hard cells.
    blur_passes: int = 0
    normalize_signed: bool = True

    def __post_init__(self):
        _require(0.0 <= self.bias_center <= 1.0, "bias_center must lie in [0, 1]")
        _require(self.blur_passes >= 0, "blur_passes must be non-negative")


@dataclass(frozen=True)
class ContinentParams:
    min_centers: int = 1
    max_centers: int = 3
    # Blob radius is min(width, height) * uniform(radius_min_mul, radius_max_mul).
    radius_min_mul: float = 0.35
    radius_max_mul: float = 0.50
    # How much the grid edges are depressed toward ocean (0..1).
    edge_depress_mul: float = 0.60
    edge_falloff_inner: float = 0.10
    edge_falloff_outer: float = 0.90
    enable_warp: bool = True
    warp_strength: float = 0.18
    warp_period_tiles: float = 28.0
    warp_seed_salt: int = 0xC07771
    seed_salt: int = 0x51A7E5

    def __post_init__(self):
        _require(0 <= self.min_centers <= self.max_centers, "continent center bounds must satisfy 0 <= min <= max")
        _require(self.warp_period_tiles > 0, "warp_period_tiles must be positive")


@dataclass(frozen=True)
class NoiseParams:
    octaves: int = 4
    # Base period in tiles of the lowest-frequency octave when auto-scaling is off.
    base_period_tiles: float = 24.0
    # basePeriod = clip(min_dim / features_across_min_dim, min, max)
    auto_scale_base_period: bool = True
    features_across_min_dim: float = 6.0
    min_base_period_tiles: float = 6.0
    max_base_period_tiles: float = 32.0
    enable_detail_band: bool = True
    detail_band_strength: float = 0.45
    detail_band_period_mul: float = 0.45
    seed_salt: int = 0xBEEFCAFE

    def __post_init__(self):
        _require(self.octaves >= 1, "octaves must be at least 1")
        _require(self.base_period_tiles > 0, "base_period_tiles must be positive")
        _require(self.features_across_min_dim > 0, "features_across_min_dim must be positive")


@dataclass(frozen=True)
class CraterParams:
    # ---- Density ----
    tiles_per_crater: int = 3200
    min_craters: int = 1
    max_craters: int = 40
    # ---- Radius in tiles ----
    radius_min_tiles: float = 6.0
    radius_max_tiles: float = 14.0
    # ---- Shape (multiples of the crater radius) ----
    inner_radius_mul: float = 0.55
    rim_start_mul: float = 0.85
    rim_end_mul: float = 1.10
    ejecta_end_mul: float = 1.85
    depth: float = 0.22
    rim: float = 0.18
    ejecta: float = 0.16
    warp: float = 0.18
    bowl_power: float = 0.8
    ejecta_bias: float = 0.65
    warp_noise_freq: float = 0.9
    ejecta_noise_freq: float = 2.3
    seed_salt: int = 0xC4A8734

    def __post_init__(self):
        _require(self.tiles_per_crater >= 1, "tiles_per_crater must be at least 1")
        _require(0 <= self.min_craters <= self.max_craters, "crater count bounds must satisfy 0 <= min <= max")
        _require(self.radius_min_tiles > 0, "radius_min_tiles must be positive")
        _require(self.ejecta_end_mul > 1.0, "ejecta_end_mul must exceed 1")


@dataclass(frozen=True)
class VolcanoParams:
    # ---- Placement ----
    tiles_per_volcano: int = 2400
    min_volcanoes: int = 1
    max_volcanoes: int = 24
    min_spacing_tiles: int = 10
    fault_power: float = 2.2
    attempts_per_volcano: int = 80
    # ---- Size (before type multipliers) ----
    radius_min_tiles: float = 6.0
    radius_max_tiles: float = 22.0
    cone_height_min: float = 0.18
    cone_height_max: float = 0.42
    # ---- Shape / surface ----
    warp: float = 0.20
    roughness: float = 0.06
    caldera_chance: float = 0.35
    caldera_depth_min: float = 0.05
    caldera_depth_max: float = 0.18
    # Ash is a mask only; it never changes elevation.
    ash_strength: float = 0.55
    ash_radius_mul: float = 2.2
    min_radius_tiles: float = 3.0
    # ---- Type selection ----
    strato_base: float = 0.15
    strato_fault_weight: float = 0.75
    strato_convergence_weight: float = 0.85
    strato_fault_power: float = 1.2
    seed_salt: int = 0x407C490

    def __post_init__(self):
        _require(self.tiles_per_volcano >= 1, "tiles_per_volcano must be at least 1")
        _require(0 <= self.min_volcanoes <= self.max_volcanoes, "volcano count bounds must satisfy 0 <= min <= max")
        _require(self.min_spacing_tiles >= 0, "min_spacing_tiles must be non-negative")


@dataclass(frozen=True)
class TerrainElevationParams:
    continent_strength: float = 0.9
    plate_bias_strength: float = 0.35
    boundary_strength: float = 0.9
    noise_strength: float = 0.5
    crater_strength: float = 0.66
    volcano_strength: float = 1.0
    # Share of crater_strength mixed before smoothing; the rest is stamped after.
    crater_pre_blur_fraction: float = 0.5
    smooth_passes: int = 1

    def __post_init__(self):
        _require(0.0 <= self.crater_pre_blur_fraction <= 1.0, "crater_pre_blur_fraction must lie in [0, 1]")
        _require(self.smooth_passes >= 0, "smooth_passes must be non-negative")


@dataclass(frozen=True)
class HydrosphereParams:
    sea_level01: float = 0.42
    thin_air_level: float = 0.80
    thin_air_ramp: float = 0.10
    coast_blur_passes: int = 3

    def __post_init__(self):
        _require(0.0 <= self.sea_level01 <= 1.0, "sea_level01 must lie in [0, 1]")
        _require(self.thin_air_ramp >= 0, "thin_air_ramp must be non-negative")
        _require(self.coast_blur_passes >= 0, "coast_blur_passes must be non-negative")


@dataclass(frozen=True)
class MorphologyParams:
    peak_basin_radius_tiles: int = 4
    roughness_radius_tiles: int = 2
    # How quickly raw slope (elevation units per tile) approaches 90 degrees.
    steepness_scale: float = 6.0
    normalize_steepness: bool = True


@dataclass(frozen=True)
class LatitudeParams:
    # Row percentages: 0 = top edge, 1 = bottom edge; values may lie off-map.
    pole_north_lat_percent: float = 0.0
    equator_lat_percent: float = 1.0
    pole_south_lat_percent: float = 2.0
    # Puts the whole map at one latitude when set.
    mono_lat_percent: Optional[float] = None


@dataclass(frozen=True)
class WindCirculationParams:
    hadley_max: float = 0.33
    ferrel_max: float = 0.72
    band_transition: float = 0.06
    meridional_strength: float = 0.18
    hadley_speed_mul: float = 0.85
    ferrel_speed_mul: float = 1.20
    polar_speed_mul: float = 0.80
    jet_strength: float = 0.20
    jet_center_dist_eq: float = 0.55
    jet_sigma: float = 0.12
    coriolis_strength: float = 0.55
    coriolis_max_degrees: float = 35.0
    coriolis_curve_power: float = 1.25
    speed_mul_min: float = 0.4
    speed_mul_max: float = 2.0

    def __post_init__(self):
        _require(self.speed_mul_min < self.speed_mul_max, "speed_mul_min must be below speed_mul_max")


@dataclass(frozen=True)
class GeothermalParams:
    volcano_heat_strength: float = 1.0
    fault_heat_strength: float = 0.35
    ash_heat_strength: float = 0.06
    # Fraction of heat that remains under water / in very thin air.
    water_dampen_mul: float = 0.45
    thin_air_dampen_mul: float = 0.65
    spread_blur_passes: int = 2


@dataclass(frozen=True)
class TemperatureParams:
    latitude_strength: float = 1.0
    altitude_strength: float = 0.65
    noise_strength: float = 0.06
    latitude_curve_power: float = 1.15
    altitude_curve_power: float = 1.10
    coast_moderation_strength: float = 0.20
    mild_temp01: float = 0.55
    base_period_tiles: float = 28.0
    octaves: int = 4
    geothermal_strength: float = 0.12
    geothermal_power: float = 1.15
    # Clamp after mixing geothermal heat; otherwise renormalize to [0, 1].
    geothermal_clamp: bool = True
    seed_salt: int = 0x13579BDF

    def __post_init__(self):
        _require(self.base_period_tiles > 0, "base_period_tiles must be positive")


@dataclass(frozen=True)
class AirPressureParams:
    altitude_strength: float = 0.75
    temperature_strength: float = 0.35
    noise_strength: float = 0.10
    base_period_tiles: float = 60.0
    octaves: int = 3
    # Neutral temperature; warmer cells get lower pressure.
    mid_temp01: float = 0.55
    seed_salt: int = 0xCAFEBABE

    def __post_init__(self):
        _require(self.base_period_tiles > 0, "base_period_tiles must be positive")


@dataclass(frozen=True)
class WindParams:
    base_wind: float = 0.20
    # --- Exposure / acceleration boosts ---
    coast_boost: float = 0.20
    high_alt_boost: float = 0.25
    peak_boost: float = 0.25
    slope_boost: float = 0.18
    water_speed_boost: float = 0.15
    # --- Dampening ---
    basin_shelter: float = 0.35
    roughness_drag: float = 0.12
    # --- Curve shaping ---
    alt_power: float = 1.20
    peak_power: float = 1.10
    slope_power: float = 1.30
    basin_power: float = 1.25
    roughness_power: float = 1.00
    # --- Synoptic noise ---
    noise_strength: float = 0.12
    base_period_tiles: float = 42.0
    octaves: int = 3
    # Absolute range the circulation band multiplier (stored in [0, 1]) maps back to.
    band_speed_mul_min: float = 0.4
    band_speed_mul_max: float = 2.0
    # 0 ignores the circulation bands, 1 applies their multiplier fully.
    band_speed_influence: float = 1.0
    seed_salt: int = 0x9E3779B7F4A71

    def __post_init__(self):
        _require(self.base_period_tiles > 0, "base_period_tiles must be positive")
        _require(self.band_speed_mul_min < self.band_speed_mul_max, "band_speed_mul_min must be below band_speed_mul_max")


@dataclass(frozen=True)
class WorldParams:
    """Every generator's parameters, keyed by generator name."""
    tectonic_plates: TectonicPlateParams = field(default_factory=TectonicPlateParams)
    plate_boundary: PlateBoundaryParams = field(default_factory=PlateBoundaryParams)
    plate_bias: PlateBiasParams = field(default_factory=PlateBiasParams)
    continent: ContinentParams = field(default_factory=ContinentParams)
    noise: NoiseParams = field(default_factory=NoiseParams)
    crater: CraterParams = field(default_factory=CraterParams)
    volcano: VolcanoParams = field(default_factory=VolcanoParams)
    terrain_elevation: TerrainElevationParams = field(default_factory=TerrainElevationParams)
    hydrosphere: HydrosphereParams = field(default_factory=HydrosphereParams)
    morphology: MorphologyParams = field(default_factory=MorphologyParams)
    latitude: LatitudeParams = field(default_factory=LatitudeParams)
    wind_circulation: WindCirculationParams = field(default_factory=WindCirculationParams)
    geothermal: GeothermalParams = field(default_factory=GeothermalParams)
    temperature: TemperatureParams = field(default_factory=TemperatureParams)
    air_pressure: AirPressureParams = field(default_factory=AirPressureParams)
    wind: WindParams = field(default_factory=WindParams)

    @classmethod
    def from_config(cls, config: dict) -> "WorldParams":
        """
        Builds parameters from a nested dictionary of overrides, e.g.
        {"hydrosphere": {"sea_level01": 0.5}}. Unknown names raise ValueError.
        """
        defaults = cls()
        overrides = {}
        for group_name, group_config in (config or {}).items():
            if group_name not in cls.__dataclass_fields__:
                raise ValueError(f"Unknown generator in config: {group_name!r}")
            group_defaults = getattr(defaults, group_name)
            known = {f.name for f in fields(group_defaults)}
            unknown = set(group_config) - known
            if unknown:
                raise ValueError(f"Unknown parameters for {group_name!r}: {sorted(unknown)}")
            overrides[group_name] = replace(group_defaults, **group_config)
        return replace(defaults, **overrides)

    def to_config(self) -> dict:
        """The inverse of `from_config`: every parameter of every generator as plain values."""
        return {
            group.name: {f.name: getattr(getattr(self, group.name), f.name) for f in fields(getattr(self, group.name))}
            for group in fields(self)
        }
