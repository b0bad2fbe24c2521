"""Tests for plate simulation, ownership and boundary stress."""

import numpy as np
import pytest

from planet_generator.params import PlateBiasParams, PlateBoundaryParams, TectonicPlateParams
from planet_generator.tectonics import (Plate, PlateFields, assign_ownership, build_boundary_fields,
                                        build_plate_bias, build_plates, build_tectonic_plates, classify_boundary)


def _two_plate_world(velocity_a, velocity_b, width=10, height=10):
    plates = [
        Plate(id=0, position=(2.0, 5.0), velocity=velocity_a, continental_bias=0.8),
        Plate(id=1, position=(7.0, 5.0), velocity=velocity_b, continental_bias=0.2),
    ]
    return PlateFields(plates=tuple(plates), plate_id=assign_ownership(width, height, plates))


class TestPlates:
    """Plate placement and ownership."""

    def test_plate_count_and_positions(self):
        plates = build_plates(40, 20, 9)
        assert len(plates) == 14
        for plate in plates:
            x, y = plate.position
            assert 0.0 <= x <= 39.0
            assert 0.0 <= y <= 19.0
            assert 0.0 <= plate.continental_bias <= 1.0
            speed = float(np.hypot(*plate.velocity))
            assert 0.2 - 1e-9 <= speed <= 1.0 + 1e-9

    def test_plate_count_is_clamped(self):
        params = TectonicPlateParams(plate_count=500)
        assert len(build_plates(10, 10, 1, params)) == 64

    def test_deterministic(self):
        a = build_tectonic_plates(30, 20, 5)
        b = build_tectonic_plates(30, 20, 5)
        assert a.plates == b.plates
        np.testing.assert_array_equal(a.plate_id, b.plate_id)

    def test_ownership_is_total_and_nearest(self):
        fields = build_tectonic_plates(33, 21, 77)
        plate_id = fields.plate_id
        positions = fields.positions
        assert plate_id.shape == (21, 33)
        assert plate_id.min() >= 0
        assert plate_id.max() < len(fields.plates)

        ys, xs = np.mgrid[0:21, 0:33]
        d2 = (xs[..., None] - positions[:, 0]) ** 2 + (ys[..., None] - positions[:, 1]) ** 2
        owner_d2 = np.take_along_axis(d2, plate_id[..., None], axis=2)[..., 0]
        np.testing.assert_allclose(owner_d2, d2.min(axis=2))

    def test_kdtree_matches_exhaustive_distances(self):
        plates = build_plates(25, 25, 3)
        positions = np.array([p.position for p in plates])
        exhaustive = assign_ownership(25, 25, plates, "exhaustive")
        kdtree = assign_ownership(25, 25, plates, "kdtree")
        ys, xs = np.mgrid[0:25, 0:25]

        def owner_d2(ids):
            p = positions[ids]
            return (xs - p[..., 0]) ** 2 + (ys - p[..., 1]) ** 2

        np.testing.assert_allclose(owner_d2(exhaustive), owner_d2(kdtree))

    def test_ties_go_to_lowest_id(self):
        plates = [
            Plate(id=0, position=(1.0, 1.0), velocity=(0.0, 0.0), continental_bias=0.5),
            Plate(id=1, position=(1.0, 1.0), velocity=(0.0, 0.0), continental_bias=0.5),
        ]
        np.testing.assert_array_equal(assign_ownership(4, 3, plates), np.zeros((3, 4), dtype=np.int64))

    def test_unknown_method_rejected(self):
        plates = build_plates(5, 5, 1)
        with pytest.raises(ValueError):
            assign_ownership(5, 5, plates, "octree")
        with pytest.raises(ValueError):
            TectonicPlateParams(ownership_method="octree")

    def test_no_plates_rejected(self):
        with pytest.raises(ValueError):
            assign_ownership(5, 5, [])

    def test_plate_id_is_read_only(self):
        fields = build_tectonic_plates(8, 8, 1)
        assert not fields.plate_id.flags.writeable


class TestBoundaryClassification:
    """classify_boundary symmetry."""

    def test_negated_motion_swaps_regimes(self):
        rng = np.random.default_rng(0)
        rel = rng.normal(size=(50, 2))
        angle = rng.random(50) * 2 * np.pi
        nx, ny = np.cos(angle), np.sin(angle)
        conv, div, trans = classify_boundary(rel[:, 0], rel[:, 1], nx, ny)
        conv_neg, div_neg, trans_neg = classify_boundary(-rel[:, 0], -rel[:, 1], nx, ny)
        np.testing.assert_allclose(conv, div_neg)
        np.testing.assert_allclose(div, conv_neg)
        np.testing.assert_allclose(trans, trans_neg)

    def test_head_on_collision(self):
        conv, div, trans = classify_boundary(np.array([-1.0]), np.array([0.0]), np.array([1.0]), np.array([0.0]))
        assert conv[0] == pytest.approx(1.0)
        assert div[0] == 0.0
        assert trans[0] == 0.0


class TestBoundaryFields:
    """Boundary stress grids."""

    def test_single_plate_has_no_stress(self):
        params = TectonicPlateParams(plate_count=1)
        plates = build_tectonic_plates(16, 12, 4, params)
        boundary = build_boundary_fields(16, 12, plates)
        np.testing.assert_array_equal(boundary.boundary_signed, np.zeros((12, 16)))
        np.testing.assert_array_equal(boundary.fault_mask01, np.zeros((12, 16)))

    def test_converging_plates_raise_ridge_on_both_sides(self):
        plates = _two_plate_world((1.0, 0.0), (-1.0, 0.0))
        boundary = build_boundary_fields(10, 10, plates)
        signed = boundary.boundary_signed
        assert signed.max() == pytest.approx(1.0)
        assert signed.min() >= 0.0
        np.testing.assert_allclose(signed, signed[:, ::-1], atol=1e-12)
        assert signed[5, 4] == pytest.approx(signed.max())

    def test_separating_plates_open_rift(self):
        plates = _two_plate_world((-1.0, 0.0), (1.0, 0.0))
        boundary = build_boundary_fields(10, 10, plates)
        assert boundary.boundary_signed.min() == pytest.approx(-1.0)
        assert boundary.boundary_signed[5, 4] < 0.0

    def test_ranges(self):
        plates = build_tectonic_plates(40, 30, 12)
        boundary = build_boundary_fields(40, 30, plates)
        assert boundary.boundary_signed.min() >= -1.0
        assert boundary.boundary_signed.max() <= 1.0
        assert boundary.fault_mask01.min() >= 0.0
        assert boundary.fault_mask01.max() <= 1.0
        assert boundary.fault_mask01.max() > 0.0

    def test_negative_falloff_rejected(self):
        with pytest.raises(ValueError):
            PlateBoundaryParams(boundary_falloff=-1.0)


class TestPlateBias:
    """Plate continental bias as a signed field."""

    def test_constant_within_each_plate(self):
        plates = _two_plate_world((0.0, 0.0), (0.0, 0.0))
        bias = build_plate_bias(10, 10, plates).plate_bias_signed
        assert bias[:, :5].max() == pytest.approx(1.0)
        np.testing.assert_allclose(bias[:, :5], 1.0)
        np.testing.assert_allclose(bias[:, 5:], -1.0)

    def test_unnormalized(self):
        plates = _two_plate_world((0.0, 0.0), (0.0, 0.0))
        bias = build_plate_bias(10, 10, plates, PlateBiasParams(normalize_signed=False)).plate_bias_signed
        np.testing.assert_allclose(bias[:, :5], 0.3)
        np.testing.assert_allclose(bias[:, 5:], -0.3)

    @pytest.mark.parametrize("center", [0.0, 1.0])
    def test_unnormalized_stays_signed(self, center):
        plates = _two_plate_world((0.0, 0.0), (0.0, 0.0))
        params = PlateBiasParams(normalize_signed=False, bias_center=center)
        bias = build_plate_bias(10, 10, plates, params).plate_bias_signed
        assert bias.min() >= -1.0
        assert bias.max() <= 1.0

    @pytest.mark.parametrize("overrides", [
        {"bias_center": -0.8},
        {"bias_center": 1.2},
        {"blur_passes": -1},
    ])
    def test_invalid_params_rejected(self, overrides):
        with pytest.raises(ValueError):
            PlateBiasParams(**overrides)
