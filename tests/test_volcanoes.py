"""Tests for volcano placement, typing and stamping."""

import numpy as np
import pytest

from planet_generator.params import VolcanoParams
from planet_generator.tectonics import build_boundary_fields, build_tectonic_plates
from planet_generator.volcanoes import (SHIELD, STRATO, VOLCANO_SHAPES, build_volcano_fields,
                                        pick_volcano_centers, strato_chance, volcano_count)


@pytest.fixture(scope="module")
def boundary():
    plates = build_tectonic_plates(96, 96, 42)
    return build_boundary_fields(96, 96, plates)


class TestPlacement:
    """Counts and centre picking."""

    @pytest.mark.parametrize("width, height, expected", [
        (96, 96, 3),
        (1, 1, 1),
        (1000, 1000, 24),
    ])
    def test_count(self, width, height, expected):
        assert volcano_count(width, height) == expected

    def test_uniform_fallback_on_quiet_map(self):
        quiet = np.zeros((20, 30))
        centers = pick_volcano_centers(30, 20, quiet, 1234, 4)
        assert len(centers) == 4
        for x, y in centers:
            assert 0 <= x < 30
            assert 0 <= y < 20

    def test_fault_guided_picks_respect_spacing(self):
        fault = np.ones((60, 60))
        params = VolcanoParams(min_spacing_tiles=10)
        centers = pick_volcano_centers(60, 60, fault, 99, 5, params)
        assert len(centers) == 5
        for i, (ax, ay) in enumerate(centers):
            for bx, by in centers[i + 1:]:
                assert (ax - bx) ** 2 + (ay - by) ** 2 >= 100

    def test_picks_follow_faults(self):
        fault = np.zeros((60, 60))
        fault[:, 40:] = 1.0
        params = VolcanoParams(min_spacing_tiles=4)
        centers = pick_volcano_centers(60, 60, fault, 2024, 4, params)
        assert len(centers) == 4
        for x, _ in centers:
            assert x >= 40

    def test_strato_chance(self):
        assert strato_chance(0.0, 0.0) == pytest.approx(0.15)
        assert strato_chance(1.0, 1.0) == 1.0
        # Divergent (negative) stress adds nothing.
        assert strato_chance(0.0, -1.0) == pytest.approx(0.15)


class TestVolcanoFields:
    """Volcano height, mask and ash grids."""

    def test_ranges_and_records(self, boundary):
        fields = build_volcano_fields(96, 96, boundary, 42)
        assert fields.count == 3
        assert fields.volcano_signed.min() >= -1.0
        assert fields.volcano_signed.max() <= 1.0
        assert np.abs(fields.volcano_signed).max() == pytest.approx(1.0)
        for grid in (fields.volcano_mask01, fields.ash_mask01):
            assert grid.min() >= 0.0
            assert grid.max() <= 1.0
        for volcano in fields.volcanoes:
            assert volcano.kind in (SHIELD, STRATO)
            assert volcano.radius >= VolcanoParams().min_radius_tiles
            assert volcano.cone_height > 0.0

    def test_ash_does_not_change_height(self, boundary):
        with_ash = build_volcano_fields(96, 96, boundary, 7)
        no_ash = build_volcano_fields(96, 96, boundary, 7, VolcanoParams(ash_strength=0.0))
        np.testing.assert_array_equal(with_ash.volcano_signed, no_ash.volcano_signed)
        assert not no_ash.ash_mask01.any()
        assert with_ash.ash_mask01.max() == pytest.approx(1.0)

    def test_deterministic(self, boundary):
        a = build_volcano_fields(96, 96, boundary, 3)
        b = build_volcano_fields(96, 96, boundary, 3)
        np.testing.assert_array_equal(a.volcano_signed, b.volcano_signed)
        np.testing.assert_array_equal(a.ash_mask01, b.ash_mask01)
        assert a.volcanoes == b.volcanoes

    def test_shapes_differ(self):
        shield = VOLCANO_SHAPES[SHIELD]
        strato = VOLCANO_SHAPES[STRATO]
        assert shield.radius_mul > strato.radius_mul
        assert strato.height_mul > shield.height_mul
        assert strato.falloff_power > shield.falloff_power
