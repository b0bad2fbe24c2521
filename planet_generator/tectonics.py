# planet_generator/tectonics.py

"""
================================================================================
TECTONIC PLATE GENERATION
================================================================================
This module simulates tectonic plates on the world grid: it places plates with
a seed position, velocity and continental bias, assigns every cell to its
nearest plate seed (a Voronoi partition), and classifies the boundaries
between plates into ridges, rifts and transform faults.

Data Contract:
---------------
- Inputs:
    - World dimensions, seed, TectonicPlateParams / PlateBoundaryParams.
- Outputs:
    - PlateFields: the plate list and an integer ownership grid.
    - BoundaryFields: a signed boundary stress field [-1, 1] (ridges positive,
      rifts negative) and a fault proximity field [0, 1].
    - PlateBiasFields: each cell's plate continental bias as a signed field.
- Side Effects: Logs messages using the module logger.
================================================================================
"""

import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy.spatial import cKDTree

from . import config as DEFAULTS
from . import fields as F
from .noise import make_rng, value_noise_points
from .params import PlateBiasParams, PlateBoundaryParams, TectonicPlateParams

logger = logging.getLogger(__name__)

# Per-plate multiplier for the transform-jitter noise seed.
PLATE_JITTER_SEED_STRIDE = 92821

# The four neighbour offsets (dx, dy) examined for boundaries.
_NEIGHBOUR_OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


@dataclass(frozen=True)
class Plate:
    id: int
    position: tuple[float, float]
    velocity: tuple[float, float]
    continental_bias: float  # 0..1, higher tends toward land


@dataclass(frozen=True)
class PlateFields:
    plates: tuple
    plate_id: np.ndarray  # (height, width) owning plate id per cell

    @property
    def positions(self) -> np.ndarray:
        return np.array([p.position for p in self.plates], dtype=np.float64).reshape(-1, 2)

    @property
    def velocities(self) -> np.ndarray:
        return np.array([p.velocity for p in self.plates], dtype=np.float64).reshape(-1, 2)


@dataclass(frozen=True)
class BoundaryFields:
    boundary_signed: np.ndarray  # [-1, 1]
    fault_mask01: np.ndarray     # [0, 1]


@dataclass(frozen=True)
class PlateBiasFields:
    plate_bias_signed: np.ndarray


def build_plates(width: int, height: int, seed: int, params: TectonicPlateParams = TectonicPlateParams()) -> list:
    """Draws the plates deterministically from the world seed."""
    rng = make_rng(seed, params.seed_salt)
    count = int(np.clip(params.plate_count, params.min_plate_count, params.max_plate_count))

    plates = []
    for i in range(count):
        sx = rng.random() * (width - 1)
        sy = rng.random() * (height - 1)

        # Velocity: random direction + magnitude
        angle = rng.random() * 2.0 * math.pi
        speed = max(0.0, params.velocity_min + rng.random() * (params.velocity_max - params.velocity_min))

        # Continental bias: some plates lean continental, others oceanic.
        if rng.random() < params.continental_chance:
            bias = params.continental_bias_min + rng.random() * (params.continental_bias_max - params.continental_bias_min)
        else:
            bias = params.oceanic_bias_min + rng.random() * (params.oceanic_bias_max - params.oceanic_bias_min)

        plates.append(Plate(
            id=i,
            position=(float(sx), float(sy)),
            velocity=(math.cos(angle) * speed, math.sin(angle) * speed),
            continental_bias=float(min(1.0, max(0.0, bias))),
        ))
    return plates


def assign_ownership(width: int, height: int, plates: list, method: str = "exhaustive") -> np.ndarray:
    """
    Assigns every cell to the plate whose seed is nearest by squared Euclidean
    distance.

    The exhaustive path is O(width * height * plates) and breaks exact ties in
    favour of the plate listed first. The 'kdtree' path queries a cKDTree,
    which scales to large grids but may resolve exact ties differently.
    """
    points = np.array([p.position for p in plates], dtype=np.float64).reshape(-1, 2)
    if len(points) == 0:
        raise ValueError("At least one plate is required to assign ownership")

    if method == "kdtree":
        ys, xs = np.mgrid[0:height, 0:width]
        query_points = np.column_stack((xs.ravel().astype(np.float64), ys.ravel().astype(np.float64)))
        _, indices = cKDTree(points).query(query_points, k=1)
        return np.asarray(indices, dtype=np.int64).reshape(height, width)
    if method != "exhaustive":
        raise ValueError(f"Unknown ownership method: {method!r}")

    plate_id = np.empty((height, width), dtype=np.int64)
    xs = np.arange(width, dtype=np.float64)
    rows_per_block = max(1, DEFAULTS.OWNERSHIP_BLOCK_ELEMENTS // max(1, width * len(points)))
    for y0 in range(0, height, rows_per_block):
        ys = np.arange(y0, min(height, y0 + rows_per_block), dtype=np.float64)
        dx = xs[None, :, None] - points[None, None, :, 0]
        dy = ys[:, None, None] - points[None, None, :, 1]
        d2 = dx * dx + dy * dy
        # argmin returns the first minimum, i.e. the lowest plate id on ties.
        plate_id[y0:y0 + len(ys)] = np.argmin(d2, axis=2)
    return plate_id


def build_tectonic_plates(width: int, height: int, seed: int, params: TectonicPlateParams = TectonicPlateParams()) -> PlateFields:
    plates = build_plates(width, height, seed, params)
    plate_id = assign_ownership(width, height, plates, params.ownership_method)
    logger.debug(f"Assigned {width}x{height} cells to {len(plates)} plates ({params.ownership_method}).")
    return PlateFields(plates=tuple(plates), plate_id=F.freeze(plate_id))


def classify_boundary(rel_x, rel_y, normal_x, normal_y, approach_scale: float = 1.2):
    """
    Splits relative plate motion across a boundary into its three regimes.

    approach = rel . n is negative when plates collide and positive when they
    separate; shear = |rel x n| is the sideways component. Returns
    (convergent, divergent, transform), each clamped to [0, 1]. Negating the
    relative velocity swaps convergent and divergent and leaves transform alone.
    """
    approach = rel_x * normal_x + rel_y * normal_y
    shear = np.abs(rel_x * normal_y - rel_y * normal_x)
    convergent = F.clamp01(-approach * approach_scale)
    divergent = F.clamp01(approach * approach_scale)
    transform = F.clamp01(shear)
    return convergent, divergent, transform


def _shifted_neighbour(plate_id: np.ndarray, dx: int, dy: int):
    """Returns the neighbour id grid for offset (dx, dy) and a mask of in-bounds cells."""
    height, width = plate_id.shape
    neighbour = np.full_like(plate_id, -1)
    valid = np.zeros(plate_id.shape, dtype=bool)

    src_x = slice(max(0, dx), width + min(0, dx))
    dst_x = slice(max(0, -dx), width + min(0, -dx))
    src_y = slice(max(0, dy), height + min(0, dy))
    dst_y = slice(max(0, -dy), height + min(0, -dy))

    neighbour[dst_y, dst_x] = plate_id[src_y, src_x]
    valid[dst_y, dst_x] = True
    return neighbour, valid


def build_boundary_fields(
    width: int, height: int,
    plates_fields: PlateFields,
    params: PlateBoundaryParams = PlateBoundaryParams()
) -> BoundaryFields:
    """
    Computes plate boundary stress. Each cell looks at its 4 neighbours; every
    neighbour on a different plate contributes ridge/rift/transform intensity
    derived from the relative plate velocity projected on the boundary normal.
    The line contributions are then blurred outward into ranges.
    """
    plate_id = np.asarray(plates_fields.plate_id)
    positions = plates_fields.positions
    velocities = plates_fields.velocities

    ridge = F.zeros(width, height)
    rift = F.zeros(width, height)
    rough = F.zeros(width, height)

    # 1. Local boundary contributions (no spreading yet)
    for dx, dy in _NEIGHBOUR_OFFSETS:
        neighbour, valid = _shifted_neighbour(plate_id, dx, dy)
        differs = valid & (neighbour != plate_id)
        if not differs.any():
            continue
        a = plate_id[differs]
        b = neighbour[differs]

        rel = velocities[b] - velocities[a]
        seed_delta = positions[b] - positions[a]
        length = np.hypot(seed_delta[:, 0], seed_delta[:, 1])
        safe_length = np.where(length < DEFAULTS.NORMALIZE_EPSILON, 1.0, length)
        normal = np.where((length < DEFAULTS.NORMALIZE_EPSILON)[:, None], 0.0, seed_delta / safe_length[:, None])

        convergent, divergent, transform = classify_boundary(
            rel[:, 0], rel[:, 1], normal[:, 0], normal[:, 1], params.approach_scale
        )
        ridge[differs] += convergent * (1.0 - params.shear_ridge_damping * transform)
        rift[differs] += divergent * (1.0 - params.shear_rift_damping * transform)
        rough[differs] += transform

    fault = F.clamp01(np.maximum(ridge, np.maximum(rift, rough)))

    # 2. Signed height pressure with plate-stable transform jitter
    signed = ridge * params.ridge_strength - rift * params.rift_strength
    boundary_cells = np.nonzero(rough > 0.0)
    if boundary_cells[0].size:
        ys, xs = boundary_cells
        seeds = (plate_id[ys, xs] * PLATE_JITTER_SEED_STRIDE + params.rough_seed_salt) & DEFAULTS.NOISE_SEED_MASK
        jitter01 = value_noise_points(
            xs.astype(np.float64) * params.rough_noise_freq,
            ys.astype(np.float64) * params.rough_noise_freq,
            seeds.astype(np.int64),
        )
        signed[ys, xs] += rough[ys, xs] * params.transform_roughness * (jitter01 - 0.5) * 2.0
    signed = signed + fault * params.boundary_mark_strength

    # 3. Spread boundary lines outward into mountain/rift ranges
    passes = max(1, F.round_half_up(params.boundary_falloff / 2.0))
    signed = F.box_blur(signed, passes)
    if params.blur_fault_mask:
        fault = F.box_blur(fault, max(1, F.round_half_up(passes * params.fault_blur_mul)))

    boundary_count = int(np.count_nonzero(ridge + rift + rough))
    logger.debug(f"Boundary stress: {boundary_count} boundary cells, {passes} spread passes.")

    return BoundaryFields(
        boundary_signed=F.freeze(F.normalize_signed(signed)),
        fault_mask01=F.freeze(F.normalize01(fault)),
    )


def build_plate_bias(
    width: int, height: int,
    plates_fields: PlateFields,
    params: PlateBiasParams = PlateBiasParams()
) -> PlateBiasFields:
    """Re-expresses each cell's plate continental bias (0..1) as a signed value around 0."""
    biases = np.array([p.continental_bias for p in plates_fields.plates], dtype=np.float64)
    bias = biases[np.asarray(plates_fields.plate_id)] - params.bias_center
    bias = F.box_blur(bias, params.blur_passes)
    if params.normalize_signed:
        bias = F.normalize_signed(bias)
    return PlateBiasFields(plate_bias_signed=F.freeze(bias))
