"""End-to-end tests for the world orchestrator."""

import itertools
import logging

import numpy as np
import pytest

from planet_generator import WorldFields, WorldGenerator, WorldParams, build_world_fields
from planet_generator.params import HydrosphereParams, TectonicPlateParams


def _assert_ranges(world: WorldFields):
    for name, grid in world.named_fields().items():
        assert grid.shape == (world.height, world.width), name
        assert np.isfinite(grid).all(), name
        if name.endswith("01"):
            assert grid.min() >= 0.0, name
            assert grid.max() <= 1.0, name
        elif name.endswith("_signed"):
            assert grid.min() >= -1.0, name
            assert grid.max() <= 1.0, name


class TestWorldGenerator:
    """Building whole worlds."""

    def test_determinism(self):
        a = build_world_fields(40, 24, 1234)
        b = build_world_fields(40, 24, 1234)
        a_fields = a.named_fields()
        b_fields = b.named_fields()
        assert a_fields.keys() == b_fields.keys()
        for name in a_fields:
            np.testing.assert_array_equal(a_fields[name], b_fields[name], err_msg=name)

    def test_seed_changes_world(self):
        a = build_world_fields(40, 24, 1)
        b = build_world_fields(40, 24, 2)
        assert not np.array_equal(a.terrain_elevation.elevation01, b.terrain_elevation.elevation01)

    def test_ranges(self, small_world, square_world):
        _assert_ranges(small_world)
        _assert_ranges(square_world)

    @pytest.mark.parametrize("width, height", [(1, 1), (5, 1), (1, 5), (2, 3)])
    def test_tiny_worlds(self, width, height):
        world = build_world_fields(width, height, 99)
        _assert_ranges(world)

    def test_mixed_land_and_water(self, small_world):
        water = small_world.hydrosphere.is_water01
        assert (water == 1.0).any()
        assert (water == 0.0).any()

    def test_expected_feature_counts(self):
        world = build_world_fields(96, 96, 5)
        assert world.crater.count == 2
        assert world.volcano.count == 3
        assert len(world.tectonic_plates.plates) == 14

    def test_single_plate_world_has_no_boundary_stress(self):
        world = build_world_fields(32, 32, 8, {"tectonic_plates": {"plate_count": 1}})
        assert not world.plate_boundary.boundary_signed.any()
        assert not world.plate_boundary.fault_mask01.any()

    def test_kdtree_ownership(self):
        world = build_world_fields(30, 20, 3, {"tectonic_plates": {"ownership_method": "kdtree"}})
        exhaustive = build_world_fields(30, 20, 3)
        assert world.tectonic_plates.plates == exhaustive.tectonic_plates.plates
        _assert_ranges(world)


class TestWorldFields:
    """The immutable aggregate."""

    def test_named_fields_and_indexing(self, small_world):
        named = small_world.named_fields()
        assert "terrain_elevation.elevation01" in named
        assert "tectonic_plates.plate_id" in named
        assert "wind.wind_speed01" in named
        assert small_world["terrain_elevation.elevation01"] is small_world.terrain_elevation.elevation01

    @pytest.mark.parametrize("key", ["bogus", "terrain_elevation.nope", "width.value", "crater.craters"])
    def test_unknown_keys(self, small_world, key):
        with pytest.raises(KeyError):
            small_world[key]

    def test_arrays_are_read_only(self, small_world):
        for name, grid in small_world.named_fields().items():
            assert not grid.flags.writeable, name
        with pytest.raises(ValueError):
            small_world.terrain_elevation.elevation01[0, 0] = 0.5

    def test_no_aliasing(self, small_world):
        named = small_world.named_fields()
        for (name_a, a), (name_b, b) in itertools.combinations(named.items(), 2):
            assert not np.may_share_memory(a, b), (name_a, name_b)

    def test_aggregate_is_frozen(self, small_world):
        with pytest.raises(AttributeError):
            small_world.seed = 3


class TestConfiguration:
    """Parameters, overrides and validation."""

    @pytest.mark.parametrize("width, height", [(0, 10), (10, -1), (2.5, 4), (4, "8"), (True, 4)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(ValueError):
            WorldGenerator().build(width, height, 1)

    def test_sea_level_override(self):
        world = build_world_fields(24, 16, 4, {"hydrosphere": {"sea_level01": 1.0}})
        assert world.hydrosphere.is_water01.all()

    def test_params_instance(self):
        params = WorldParams(hydrosphere=HydrosphereParams(sea_level01=1.0))
        world = WorldGenerator(params).build(12, 12, 4)
        assert world.hydrosphere.is_water01.all()

    def test_from_config_merges_over_defaults(self):
        params = WorldParams.from_config({"tectonic_plates": {"plate_count": 3}})
        assert params.tectonic_plates == TectonicPlateParams(plate_count=3)
        assert params.hydrosphere == HydrosphereParams()

    def test_config_round_trip(self):
        params = WorldParams.from_config({"crater": {"depth": 0.3}, "wind": {"base_wind": 0.1}})
        assert WorldParams.from_config(params.to_config()) == params

    @pytest.mark.parametrize("config", [
        {"oceans": {"depth": 1}},
        {"hydrosphere": {"sea_level": 0.5}},
    ])
    def test_unknown_config_names(self, config):
        with pytest.raises(ValueError):
            WorldParams.from_config(config)

    @pytest.mark.parametrize("config", [
        {"hydrosphere": {"sea_level01": 1.5}},
        {"plate_bias": {"normalize_signed": False, "bias_center": -0.8}},
    ])
    def test_out_of_range_config_rejected(self, config):
        with pytest.raises(ValueError):
            build_world_fields(16, 16, 1, config)

    def test_invalid_params_type(self):
        with pytest.raises(ValueError):
            WorldGenerator(params=42)

    def test_logging(self, caplog):
        logger = logging.getLogger("test.world")
        with caplog.at_level(logging.DEBUG):
            WorldGenerator(logger=logger).build(16, 12, 1)
        messages = [record.getMessage() for record in caplog.records]
        assert any("World generated" in message for message in messages)
        assert any("terrain_elevation built" in message for message in messages)
