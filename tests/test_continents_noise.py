"""Tests for the continent and terrain-noise layers."""

import numpy as np
import pytest

from planet_generator.continents import build_continent_fields
from planet_generator.params import ContinentParams, NoiseParams
from planet_generator.terrain_noise import base_period_for, build_noise_fields


class TestContinents:
    """Continent landmass pressure."""

    def test_range_and_shape(self):
        fields = build_continent_fields(50, 30, 8)
        assert fields.continent_signed.shape == (30, 50)
        assert fields.continent_signed.min() >= -1.0
        assert fields.continent_signed.max() <= 1.0

    def test_centers_and_radius(self):
        fields = build_continent_fields(60, 40, 21)
        assert 1 <= len(fields.centers) <= 3
        for x, y in fields.centers:
            assert 0.0 <= x <= 59.0
            assert 0.0 <= y <= 39.0
        assert 40 * 0.35 <= fields.blob_radius <= 40 * 0.50

    def test_deterministic(self):
        a = build_continent_fields(32, 32, 3)
        b = build_continent_fields(32, 32, 3)
        np.testing.assert_array_equal(a.continent_signed, b.continent_signed)
        assert a.centers == b.centers

    def test_seed_changes_layout(self):
        a = build_continent_fields(32, 32, 3)
        b = build_continent_fields(32, 32, 4)
        assert not np.array_equal(a.continent_signed, b.continent_signed)

    def test_warp_can_be_disabled(self):
        fields = build_continent_fields(24, 24, 1, ContinentParams(enable_warp=False))
        assert np.isfinite(fields.continent_signed).all()

    def test_single_cell(self):
        fields = build_continent_fields(1, 1, 5)
        assert fields.continent_signed.shape == (1, 1)
        assert -1.0 <= fields.continent_signed[0, 0] <= 1.0


class TestTerrainNoise:
    """Signed multi-band terrain noise."""

    def test_range_and_centering(self):
        fields = build_noise_fields(48, 40, 17)
        noise = fields.noise_signed
        assert noise.shape == (40, 48)
        assert np.abs(noise).max() == pytest.approx(1.0)
        assert abs(float(noise.mean())) < 1e-9

    @pytest.mark.parametrize("width, height, expected", [
        (64, 32, 6.0),     # 32 / 6 clamps up to the minimum period
        (120, 120, 20.0),
        (600, 400, 32.0),  # clamps down to the maximum period
    ])
    def test_auto_scaled_base_period(self, width, height, expected):
        assert base_period_for(width, height, NoiseParams()) == pytest.approx(expected)

    def test_fixed_base_period(self):
        params = NoiseParams(auto_scale_base_period=False, base_period_tiles=24.0)
        assert build_noise_fields(20, 20, 1, params).base_period_used == 24.0

    def test_detail_band_changes_field(self):
        with_detail = build_noise_fields(40, 40, 9)
        without = build_noise_fields(40, 40, 9, NoiseParams(enable_detail_band=False))
        assert not np.array_equal(with_detail.noise_signed, without.noise_signed)

    def test_deterministic(self):
        a = build_noise_fields(30, 20, 2)
        b = build_noise_fields(30, 20, 2)
        np.testing.assert_array_equal(a.noise_signed, b.noise_signed)
