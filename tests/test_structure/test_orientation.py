"""Tests for the orientation solver."""
from __future__ import annotations

import numpy as np
import pytest

from pdbimages.errors import WarningAsError
from pdbimages.helpers.warnings_policy import WarningPolicy
from pdbimages.structure.camera import combine_rotations
from pdbimages.structure.orientation import (
    FLIP_CANDIDATES,
    ROTATION_MATRICES,
    avoid_mirror_rotation,
    canonical_flip,
    canonical_rotation,
    minimal_flip,
    principal_axes,
    select_main_coords,
    structure_laying_rotation,
    vee_slope,
    view_rotations,
)


def assert_proper_rotation(m):
    assert m.shape == (3, 3)
    np.testing.assert_allclose(m @ m.T, np.eye(3), atol=1e-9)
    assert np.linalg.det(m) == pytest.approx(1.0)


class TestRotationMatrices:
    def test_all_proper(self):
        for m in ROTATION_MATRICES.values():
            assert_proper_rotation(m)

    def test_inverse_pairs(self):
        for axis in "XYZ":
            product = ROTATION_MATRICES[f"rot{axis}90"] @ ROTATION_MATRICES[f"rot{axis}270"]
            np.testing.assert_array_equal(product, np.eye(3))

    def test_rot_z90_maps_x_to_y(self):
        np.testing.assert_array_equal(ROTATION_MATRICES["rotZ90"] @ [1, 0, 0], [0, 1, 0])

    def test_combine_order(self):
        a, b = ROTATION_MATRICES["rotX90"], ROTATION_MATRICES["rotZ90"]
        np.testing.assert_array_equal(combine_rotations(a, b), b @ a)
        np.testing.assert_array_equal(combine_rotations(), np.eye(3))


class TestVeeSlope:
    def test_odd(self):
        assert [vee_slope(i, 5) for i in range(5)] == [2, 1, 0, 1, 2]

    def test_even(self):
        assert [vee_slope(i, 4) for i in range(4)] == [1, 0, 0, 1]


class TestPrincipalAxes:
    def test_axes_follow_variance(self, elongated_cloud):
        rotation, origin = principal_axes(elongated_cloud)
        np.testing.assert_allclose(origin, elongated_cloud.mean(axis=0))
        assert abs(rotation[0, 0]) > 0.99
        assert abs(rotation[1, 1]) > 0.99
        assert abs(rotation[2, 2]) > 0.99

    def test_avoid_mirror(self):
        mirror = np.diag([1.0, 1.0, -1.0])
        np.testing.assert_array_equal(avoid_mirror_rotation(mirror), np.eye(3))
        np.testing.assert_array_equal(avoid_mirror_rotation(np.eye(3)), np.eye(3))


class TestCanonicalRotation:
    def test_proper_rotation(self, rng):
        for scale in ([10, 3, 1], [5, 5, 1], [1, 1, 1]):
            coords = rng.normal(size=(50, 3)) * scale
            assert_proper_rotation(canonical_rotation(coords))

    def test_deterministic(self, elongated_cloud):
        r1 = canonical_rotation(elongated_cloud)
        r2 = canonical_rotation(elongated_cloud.copy())
        np.testing.assert_array_equal(r1, r2)

    def test_canonical_flip_is_stable(self, elongated_cloud):
        rotation = canonical_rotation(elongated_cloud)
        flip = canonical_flip(elongated_cloud, rotation, elongated_cloud.mean(axis=0))
        np.testing.assert_array_equal(flip, np.eye(3))

    def test_rotated_input_gives_same_picture(self, elongated_cloud):
        q = ROTATION_MATRICES["rotZ90"] @ ROTATION_MATRICES["rotX90"]
        rotated = elongated_cloud @ q.T
        oriented1 = elongated_cloud @ canonical_rotation(elongated_cloud).T
        oriented2 = rotated @ canonical_rotation(rotated).T
        np.testing.assert_allclose(oriented1, oriented2, atol=1e-6)

    def test_reference_mode_reproduces_reference(self, elongated_cloud):
        reference = canonical_rotation(elongated_cloud)
        np.testing.assert_allclose(canonical_rotation(elongated_cloud, reference), reference, atol=1e-12)

    def test_reference_mode_picks_closest_flip(self, elongated_cloud):
        reference = canonical_rotation(elongated_cloud)
        for name in FLIP_CANDIDATES:
            flipped = ROTATION_MATRICES[name] @ reference
            np.testing.assert_array_equal(minimal_flip(flipped, reference), ROTATION_MATRICES[name])
            result = canonical_rotation(elongated_cloud, flipped)
            assert_proper_rotation(result)
            np.testing.assert_allclose(result, flipped, atol=1e-12)

    def test_no_atoms_gives_identity(self):
        policy = WarningPolicy()
        result = canonical_rotation(np.zeros((0, 3)), warning_policy=policy)
        np.testing.assert_array_equal(result, np.eye(3))
        assert policy.issued == ["Skipping PCA, no atoms"]

    def test_no_atoms_fail_on_warning(self):
        with pytest.raises(WarningAsError):
            canonical_rotation(np.zeros((0, 3)), warning_policy=WarningPolicy(fail_on_warning=True))


class TestStructure:
    def test_select_trace_atoms(self, structure):
        coords = select_main_coords(structure)
        assert coords.shape == (24, 3)

    def test_select_heavy_atoms_fallback(self, ligand_only_structure):
        coords = select_main_coords(ligand_only_structure)
        assert coords.shape == (3, 3)

    def test_select_all_atoms_fallback(self, structure):
        structure.units = [structure.units[3]]  # the lone zinc ion
        assert select_main_coords(structure).shape == (1, 3)

    def test_structure_laying_rotation(self, structure):
        assert_proper_rotation(structure_laying_rotation(structure))


class TestViews:
    def test_views(self, elongated_cloud):
        rotation = canonical_rotation(elongated_cloud)
        views = view_rotations(rotation)
        assert list(views) == ["front", "side", "top"]
        for m in views.values():
            assert_proper_rotation(m)
        np.testing.assert_allclose(views["side"], ROTATION_MATRICES["rotY270"] @ rotation)
        np.testing.assert_allclose(views["top"], ROTATION_MATRICES["rotX90"] @ rotation)

    def test_subset(self):
        assert list(view_rotations(np.eye(3), ["top"])) == ["top"]
