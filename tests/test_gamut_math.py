import numpy as np
import pytest

import ChromaCore.Primaries as Primaries
from ChromaCore.ColorMath import OkLab
from ChromaCore.ColorMath.GamutMath import (
    soft_clamp, open_domain_clip, closed_domain_clip, intersect, is_in_gamut,
    bisect_to_gamut, rgb_clip, oklab_clip, clip_colors, BISECTION_ITERATIONS
)
from ChromaCore.ColorMath.Geometry import IntersectSegmentWithBox, ReciprocalDirection
from ChromaCore.ColorMath.Matrix import rgb_to_xyz_matrix, transform_color


REC709_TO_XYZ = rgb_to_xyz_matrix(Primaries.REC709)


def oklch_of(rgb):
    return OkLab.oklab_to_oklch(OkLab.from_xyz_d65(transform_color(rgb, REC709_TO_XYZ)))


@pytest.mark.parametrize("x", np.linspace(-2.0, 3.0, 21))
def test_soft_clamp_hard_clip(x):
    assert soft_clamp(x, 1.0) == min(x, 1.0)


def test_soft_clamp_leaves_protected_range_alone():
    assert soft_clamp(0.5, 0.8) == 0.5
    assert soft_clamp(-3.0, 0.8) == -3.0


def test_soft_clamp_rolls_off_below_one():
    xs = np.linspace(0.6, 50.0, 200)
    ys = [soft_clamp(x, 0.5) for x in xs]
    assert all(y < 1.0 for y in ys)
    assert all(b > a for a, b in zip(ys, ys[1:]))
    assert soft_clamp(0.5 + 1e-9, 0.5) == pytest.approx(0.5, abs=1e-8)


@pytest.mark.parametrize("gray", [0.01, 0.18, 0.5, 0.99])
@pytest.mark.parametrize("protected", [0.0, 0.5, 1.0])
def test_gray_passes_through_domain_clips(gray, protected):
    rgb = np.full(3, gray)
    assert np.allclose(open_domain_clip(rgb, gray, protected), rgb, atol=1e-15)
    assert np.allclose(closed_domain_clip(rgb, gray, protected), rgb, atol=1e-12)


def test_open_domain_clip_non_positive_gray_is_black():
    assert np.array_equal(open_domain_clip([0.5, -0.2, 0.1], 0.0, 1.0), np.zeros(3))
    assert np.array_equal(open_domain_clip([0.5, -0.2, 0.1], -1.0, 1.0), np.zeros(3))


def test_open_domain_clip_hard_clip_lands_on_zero():
    clipped = open_domain_clip([-0.2, 0.5, 0.8], 0.4, 1.0)
    assert clipped[0] == pytest.approx(0.0, abs=1e-12)
    assert np.all(clipped >= -1e-12)


def test_open_domain_clip_does_not_modify_input():
    rgb = np.array([-0.2, 0.5, 0.8])
    open_domain_clip(rgb, 0.4, 1.0)
    assert np.array_equal(rgb, [-0.2, 0.5, 0.8])


def test_closed_domain_clip_hard_clip():
    clipped = closed_domain_clip([2.0, 0.5, 0.5], 0.8, 1.0)
    assert np.allclose(clipped, [1.0, 0.75, 0.75], atol=1e-12)


def test_closed_domain_clip_black():
    assert np.array_equal(closed_domain_clip([0.0, 0.0, 0.0], 0.0, 1.0), np.zeros(3))
    assert np.array_equal(closed_domain_clip([1e-16, 0.0, 0.0], 0.5, 1.0), np.zeros(3))


def test_intersect_hits_ceiling():
    hit = intersect([1.5, 0.5, 0.5], [0.5, 0.5, 0.5], True, True)
    assert np.allclose(hit, [1.0, 0.5, 0.5], atol=1e-12)


def test_intersect_hits_floor():
    hit = intersect([-0.5, 0.5, 0.5], [0.5, 0.5, 0.5], True, True)
    assert np.allclose(hit, [0.0, 0.5, 0.5], atol=1e-12)


def test_intersect_in_gamut_from_is_unchanged():
    from_ = np.array([0.2, 0.3, 0.4])
    assert np.array_equal(intersect(from_, [0.5, 0.5, 0.5], True, True), from_)


def test_intersect_without_ceiling():
    hit = intersect([3.0, 0.5, 0.5], [0.5, 0.5, 0.5], False, True)
    assert np.array_equal(hit, [3.0, 0.5, 0.5])


def test_intersect_without_floor_mixed_signs():
    hit = intersect([1.5, -0.2, 0.5], [0.5, 0.5, 0.5], True, False)
    assert np.allclose(hit, [1.0, 0.15, 0.5], atol=1e-12)


def test_intersect_without_floor_negative_color_clamps_to_black():
    from_ = [-0.5, -0.2, -0.1]
    assert is_in_gamut(from_, 1.0, use_floor=False)
    assert np.array_equal(intersect(from_, [0.5, 0.5, 0.5], True, False), np.zeros(3))


def test_intersect_zero_length_segment_has_no_nan():
    hit = intersect([2.0, 2.0, 2.0], [2.0, 2.0, 2.0], True, True)
    assert np.all(np.isfinite(hit))


def test_intersect_miss_returns_to():
    # Segment entirely above the ceiling.
    hit = intersect([2.0, 3.0, 2.0], [2.0, 2.0, 2.0], True, True)
    assert np.array_equal(hit, [2.0, 2.0, 2.0])


def test_reciprocal_direction_signed_infinities():
    dir_inv = ReciprocalDirection(np.array([0.0, -0.0, 2.0]))
    assert dir_inv[0] == np.inf
    assert dir_inv[1] == -np.inf
    assert dir_inv[2] == 0.5


def test_segment_box_miss():
    origin = np.array([2.0, 0.5, 0.5])
    dir_inv = ReciprocalDirection(np.array([0.0, 1.0, 0.0]))
    assert IntersectSegmentWithBox(origin, dir_inv, np.zeros(3), np.ones(3)) is None


def test_is_in_gamut():
    assert is_in_gamut([0.0, 0.5, 1.0])
    assert not is_in_gamut([0.0, 0.5, 1.01])
    assert is_in_gamut([0.0, 0.5, 5.0], ceiling=None)
    assert not is_in_gamut([-0.1, 0.5, 0.5])
    assert is_in_gamut([-0.1, -0.5, 0.0], use_floor=False)
    assert not is_in_gamut([-0.1, 0.5, 0.0], use_floor=False)


def test_bisect_runs_fixed_iterations():
    calls = []

    def in_gamut(c):
        calls.append(c)
        return c[0] <= 1.0

    found = bisect_to_gamut([2.0, 0.0, 0.0], [0.0, 0.0, 0.0], in_gamut)
    assert len(calls) == BISECTION_ITERATIONS == 32
    assert found[0] <= 1.0
    assert found[0] == pytest.approx(1.0, abs=1e-8)


def test_rgb_clip_in_gamut_unchanged():
    rgb = np.array([0.1, 0.2, 0.3])
    assert np.array_equal(rgb_clip(rgb, [0.5, 0.5, 0.5]), rgb)


def test_rgb_clip_finds_boundary():
    clipped = rgb_clip([1.5, 0.5, 0.5], [0.5, 0.5, 0.5])
    assert is_in_gamut(clipped)
    assert np.allclose(clipped, [1.0, 0.5, 0.5], atol=1e-8)


def test_oklab_clip_in_gamut_unchanged():
    rgb = np.array([0.2, 0.7, 0.4])
    assert np.array_equal(oklab_clip(rgb, REC709_TO_XYZ), rgb)


@pytest.mark.parametrize("rgb", [[1.2, -0.1, 0.3], [-0.2, 0.9, 0.1], [0.1, 0.2, 1.4]])
def test_oklab_clip_result_in_gamut_and_hue_preserved(rgb):
    clipped = oklab_clip(rgb, REC709_TO_XYZ)
    assert is_in_gamut(clipped)
    assert np.min(clipped) < 1e-6 or np.max(clipped) > 1.0 - 1e-6

    before, after = oklch_of(rgb), oklch_of(clipped)
    assert after[0] == pytest.approx(before[0], abs=1e-5)
    hue_diff = (after[2] - before[2] + np.pi) % (2.0 * np.pi) - np.pi
    assert abs(hue_diff) < 1e-5


def test_oklab_clip_bright_white_goes_to_ceiling():
    clipped = oklab_clip([2.0, 2.0, 2.0], REC709_TO_XYZ)
    assert is_in_gamut(clipped)
    assert np.allclose(clipped, [1.0, 1.0, 1.0], atol=2e-3)


def test_oklab_clip_without_ceiling():
    rgb = np.array([3.0, 0.5, 0.5])
    assert np.array_equal(oklab_clip(rgb, REC709_TO_XYZ, ceiling=None), rgb)


def test_oklab_clip_singular_matrix_raises():
    with pytest.raises(ValueError):
        oklab_clip([2.0, 0.0, 0.0], np.zeros((3, 3)))


def test_clip_colors_matches_single_color_calls():
    colors = np.array([[1.2, -0.1, 0.3], [0.5, 0.5, 0.5], [0.1, 0.2, 1.4]])
    batch = clip_colors(colors, oklab_clip, REC709_TO_XYZ, ceiling=1.0)
    for row, color in zip(batch, colors):
        assert np.array_equal(row, oklab_clip(color, REC709_TO_XYZ, ceiling=1.0))
