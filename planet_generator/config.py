# planet_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the package-wide fallback constants for the planet
generator. Per-generator tunables live in `params.py`; the values here are the
ones shared by every generator or used by the orchestrator itself.

DO NOT MODIFY THIS FILE FOR A SPECIFIC WORLD.
Instead, pass a WorldParams (or a config dictionary) to the WorldGenerator.
================================================================================
"""

# --- World Defaults ---
DEFAULT_SEED = 1337
DEFAULT_WORLD_WIDTH = 96
DEFAULT_WORLD_HEIGHT = 96

# --- Numeric Guards ---
# Smallest range/magnitude treated as non-degenerate by the normalizers.
# Fields whose spread is below this collapse to zero instead of dividing by ~0.
NORMALIZE_EPSILON = 1e-6

# Smallest denominator allowed in piecewise mappings (e.g. equator == pole).
MIN_DENOMINATOR = 1e-6

# --- Seed Derivation ---
# Every generator xors the world seed with its own salt. Noise kernels work on
# 32-bit seeds; numpy generators accept the full 64-bit value.
NOISE_SEED_MASK = 0xFFFFFFFF
RNG_SEED_MASK = 0xFFFFFFFFFFFFFFFF

# --- Plate Ownership ---
# Cells are processed in blocks of rows so the exhaustive nearest-seed search
# never materialises more than this many (cell, plate) distances at once.
OWNERSHIP_BLOCK_ELEMENTS = 4_000_000
