import numpy as np
import pytest

from colour import XYZ_to_Oklab

from ChromaCore.ColorMath.OkLab import (
    from_xyz_d65, to_xyz_d65, oklab_to_oklch, oklch_to_oklab, spow, OKLAB_M1, OKLAB_M1_INV, OKLAB_M2, OKLAB_M2_INV
)

# XYZ (D65) and the matching OkLab values from Björn Ottosson's reference table.
REFERENCE_VECTORS = [
    ([0.95, 1.0, 1.089], [1.0, 0.0, 0.0]),
    ([1.0, 0.0, 0.0], [0.45, 1.236, -0.019]),
    ([0.0, 1.0, 0.0], [0.922, -0.671, 0.263]),
    ([0.0, 0.0, 1.0], [0.153, -1.415, -0.449]),
]


@pytest.mark.parametrize("xyz, lab", REFERENCE_VECTORS)
def test_from_xyz_reference(xyz, lab):
    assert np.max(np.abs(from_xyz_d65(xyz) - np.array(lab))) < 0.002


@pytest.mark.parametrize("xyz, lab", REFERENCE_VECTORS)
def test_to_xyz_reference(xyz, lab):
    assert np.max(np.abs(to_xyz_d65(lab) - np.array(xyz))) < 0.002


def test_matches_colour():
    xyz = np.array([0.2, 0.3, 0.4])
    assert np.allclose(from_xyz_d65(xyz), XYZ_to_Oklab(xyz), atol=1e-6)


def test_inverse_matrices():
    assert np.allclose(OKLAB_M1 @ OKLAB_M1_INV, np.eye(3), atol=1e-8)
    assert np.allclose(OKLAB_M2 @ OKLAB_M2_INV, np.eye(3), atol=1e-8)


@pytest.mark.parametrize("xyz", [[0.2, 0.3, 0.4], [0.9, 0.1, 0.05], [0.01, 0.02, 0.9]])
def test_round_trip(xyz):
    assert np.allclose(to_xyz_d65(from_xyz_d65(xyz)), xyz, atol=1e-6)


def test_negative_input_stays_finite():
    lab = from_xyz_d65([-0.05, 0.01, -0.02])
    assert np.all(np.isfinite(lab))
    assert np.all(np.isfinite(to_xyz_d65(lab)))


def test_spow():
    assert np.allclose(spow([-8.0, 0.0, 8.0], 1.0 / 3.0), [-2.0, 0.0, 2.0])
    assert np.allclose(spow([-2.0, 2.0], 3), [-8.0, 8.0])


def test_oklch_round_trip():
    lab = np.array([0.6, -0.1, -0.05])
    lch = oklab_to_oklch(lab)
    assert lch[0] == lab[0]
    assert lch[1] == pytest.approx(np.hypot(-0.1, -0.05))
    assert 0.0 <= lch[2] < 2.0 * np.pi
    assert np.allclose(oklch_to_oklab(lch), lab, atol=1e-15)


def test_oklch_gray_has_zero_chroma():
    lch = oklab_to_oklch([0.5, 0.0, 0.0])
    assert lch[1] == 0.0
    assert np.array_equal(oklch_to_oklab([0.5, 0.0, lch[2]]), [0.5, 0.0, 0.0])
