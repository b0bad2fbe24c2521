"""Tests for wind circulation and final wind."""

import numpy as np
import pytest

from planet_generator.climate import build_latitude
from planet_generator.params import LatitudeParams, WindCirculationParams, WindParams
from planet_generator.wind import build_wind, build_wind_circulation


def _circulation_at(lat_percent, params=WindCirculationParams()):
    latitude = build_latitude(4, 3, LatitudeParams(mono_lat_percent=lat_percent))
    return build_wind_circulation(4, 3, latitude, params)


class TestCirculation:
    """Latitude bands and Coriolis deflection."""

    def test_directions_are_unit_vectors(self):
        latitude = build_latitude(5, 40)
        circ = build_wind_circulation(5, 40, latitude)
        length = np.hypot(circ.wind_dir_x_signed, circ.wind_dir_y_signed)
        np.testing.assert_allclose(length, 1.0)

    def test_equatorial_easterlies(self):
        circ = _circulation_at(1.0)  # equator
        assert (circ.wind_dir_x_signed < 0.0).all()
        # Equator has no Coriolis turn: direction is the raw band vector.
        expected_x = -1.0 / np.hypot(1.0, 0.18)
        np.testing.assert_allclose(circ.wind_dir_x_signed, expected_x)

    def test_mid_latitude_westerlies(self):
        circ = _circulation_at(0.5)  # latitude -0.5, inside the Ferrel band
        assert (circ.wind_dir_x_signed > 0.0).all()

    def test_polar_easterlies(self):
        circ = _circulation_at(0.0)  # north pole
        assert (circ.wind_dir_x_signed < 0.0).all()

    def test_band_speed_range(self):
        latitude = build_latitude(3, 50)
        circ = build_wind_circulation(3, 50, latitude)
        assert circ.band_speed_mul01.min() >= 0.0
        assert circ.band_speed_mul01.max() <= 1.0

    def test_jet_boosts_speed(self):
        with_jet = _circulation_at(0.45)
        without = _circulation_at(0.45, WindCirculationParams(jet_strength=0.0))
        assert with_jet.band_speed_mul01[0, 0] > without.band_speed_mul01[0, 0]

    def test_speed_bounds_validated(self):
        with pytest.raises(ValueError):
            WindCirculationParams(speed_mul_min=2.0, speed_mul_max=1.0)


class TestWind:
    """Final wind speed and diagnostics."""

    def test_ranges(self, small_world):
        wind = small_world.wind
        for name in ("wind_speed01", "exposure01", "shelter01", "topo_accel01", "band_speed_mul_abs01"):
            grid = getattr(wind, name)
            assert grid.min() >= 0.0, name
            assert grid.max() <= 1.0, name

    def test_direction_copies_circulation(self, small_world):
        wind = small_world.wind
        circ = small_world.wind_circulation
        np.testing.assert_array_equal(wind.wind_dir_x_signed, circ.wind_dir_x_signed)
        np.testing.assert_array_equal(wind.wind_dir_y_signed, circ.wind_dir_y_signed)
        assert not np.shares_memory(wind.wind_dir_x_signed, circ.wind_dir_x_signed)
        assert not np.shares_memory(wind.wind_dir_y_signed, circ.wind_dir_y_signed)

    def test_band_multiplier_round_trip(self, small_world):
        np.testing.assert_allclose(
            small_world.wind.band_speed_mul_abs01, small_world.wind_circulation.band_speed_mul01, atol=1e-12
        )

    def test_topography_only_on_land(self, small_world):
        water = small_world.hydrosphere.is_water01 == 1.0
        assert not small_world.wind.topo_accel01[water].any()
        assert not small_world.wind.shelter01[water].any()

    def test_band_influence_off(self, small_world):
        w = small_world
        params = WindParams(band_speed_influence=0.0)
        wind = build_wind(64, 32, w.seed, w.hydrosphere, w.morphology, w.wind_circulation, params)
        assert wind.wind_speed01.min() == 0.0
        assert wind.wind_speed01.max() == pytest.approx(1.0)
        assert not np.array_equal(wind.wind_speed01, w.wind.wind_speed01)
