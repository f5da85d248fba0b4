"""
Operations for working with RGB colors relative to their enclosing gamut.

The gamut is always an explicit axis aligned box: an optional floor at 0 per
channel and an optional ceiling per channel. Nothing here raises on numeric
input, degenerate cases return black or the input unchanged.
"""
import logging
from typing import Callable, Optional

import numpy as np
import numpy.typing as npt
from tqdm import tqdm

import ChromaCore.ColorMath.Geometry as Geometry
import ChromaCore.ColorMath.OkLab as OkLab
from ChromaCore.ColorMath.Matrix import invert, transform_color
from ChromaCore.Utils.CustomTypes import Color, Matrix

logger = logging.getLogger(__name__)

# Fixed so results are reproducible against reference values.
BISECTION_ITERATIONS = 32

CLOSED_DOMAIN_EPSILON = 1.0e-15


def soft_clamp(x: float, protected: float) -> float:
    """Clamps `x` to <= 1.0 with an (optionally) smooth transition.

    Args:
        x (float): value to clamp
        protected (float): value up to which x is not touched. 1.0 is a perfectly sharp
            clip, lower numbers give room for progressively smoother roll-offs.

    Returns:
        float: the clamped value
    """
    p = protected

    # p == 1.0 divides by zero below, and p or x below zero misbehave in the main equation.
    if p >= 1.0 or x <= p:
        return min(x, 1.0)

    x = (x - p) / (1.0 - p)
    tmp = x / np.sqrt(x * x + 1.0)
    return float(tmp * (1.0 - p) + p)


def open_domain_clip(rgb: npt.ArrayLike, gray_level: float, protected: float) -> Color:
    """Clip an RGB value to the open-domain [0.0, inf] gamut, i.e. make all channels >= 0.0.

    Args:
        rgb (npt.ArrayLike): color to clip
        gray_level (float): achromatic value to clip towards. For luminance preserving
            clipping this is the gray with the same luminance as `rgb`.
        protected (float): how much of the gamut is protected from modification. 0.0 leaves
            all of it up for grabs, 1.0 only touches out of gamut colors (hard clip).

    Returns:
        Color: the clipped color
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    if gray_level <= 0.0:
        return np.zeros(3)

    min_component = float(np.min(rgb))
    saturation = (gray_level - min_component) / gray_level
    if saturation <= 0.0:
        return rgb.copy()
    target_saturation = soft_clamp(saturation, protected)

    # Amount to lerp from `gray_level` to `rgb`.
    t = target_saturation / saturation
    return (gray_level * (1.0 - t)) + (rgb * t)


def closed_domain_clip(rgb: npt.ArrayLike, gray_level: float, protected: float) -> Color:
    """Clip an RGB value to the closed-domain [0.0, 1.0] gamut.

    This does not do open-domain clipping: `rgb` must already have all channels >= 0.0,
    run open_domain_clip first if needed.

    Args:
        rgb (npt.ArrayLike): color to clip
        gray_level (float): achromatic value to clip towards
        protected (float): channel value up to which channels are left alone. 1.0 is a
            hard clip, lower values smooth out the desaturation (no mach bands) at the
            cost of touching some in-gamut colors.

    Returns:
        Color: the clipped color
    """
    rgb = np.asarray(rgb, dtype=np.float64)

    max_component = float(np.max(rgb))
    if max_component <= CLOSED_DOMAIN_EPSILON:
        return np.zeros(3)

    # Scale into gamut, and the gray level that goes with the scaled color.
    fac = soft_clamp(max_component, protected) / max_component
    scaled_rgb = rgb * fac
    scaled_gray_level = gray_level * fac

    # Mix in enough white to reach the target gray level.
    clamped_gray_level = min(max(gray_level, 0.0), 1.0)
    if scaled_gray_level >= clamped_gray_level:
        return scaled_rgb
    t = (clamped_gray_level - scaled_gray_level) / (1.0 - scaled_gray_level)
    t = min(max(t, 0.0), 1.0)
    return (scaled_rgb * (1.0 - t)) + t


def intersect(from_: npt.ArrayLike, to: npt.ArrayLike, use_ceiling: bool, use_floor: bool) -> Color:
    """Intersects the directed segment `from_` -> `to` with the rgb gamut.

    Finds the in-gamut color on the segment closest to `from_`, so `to` should
    usually be in gamut. The hit point is always clamped to >= 0, so an in-gamut
    `from_` comes back unchanged only when it has no negative channels. Without a
    floor, an all-negative `from_` therefore comes back as black.

    Args:
        from_ (npt.ArrayLike): a possibly out of gamut color
        to (npt.ArrayLike): a (presumably) in gamut color
        use_ceiling (bool): cap the gamut at [1, 1, 1]. Otherwise unbounded above.
        use_floor (bool): floor the gamut at [0, 0, 0]. Otherwise colors with all
            channels negative count as in gamut, with negative luminance.

    Returns:
        Color: the intersection point, or `to` if the segment misses the gamut
    """
    from_ = np.asarray(from_, dtype=np.float64)
    to = np.asarray(to, dtype=np.float64)

    direction = to - from_
    dir_inv = Geometry.ReciprocalDirection(direction)

    ceiling = np.ones(3) if use_ceiling else np.full(3, np.inf)
    positive_hit_t = Geometry.IntersectSegmentWithBox(from_, dir_inv, np.zeros(3), ceiling)
    negative_hit_t = None
    if not use_floor:
        negative_hit_t = Geometry.IntersectSegmentWithBox(from_, dir_inv, np.full(3, -np.inf), np.zeros(3))

    hits = [t for t in (positive_hit_t, negative_hit_t) if t is not None]
    if not hits:
        return to.copy()
    hit_t = min(hits)

    # Clip to zero for floating point rounding error.
    return np.maximum(from_ + direction * hit_t, 0.0)


def is_in_gamut(rgb: npt.ArrayLike, ceiling: Optional[float] = 1.0, use_floor: bool = True) -> bool:
    """Box membership test.

    Args:
        rgb (npt.ArrayLike): color to test
        ceiling (Optional[float]): per channel maximum, None for no ceiling
        use_floor (bool): require channels >= 0. Otherwise an all non-positive color also
            counts as in gamut (negative luminance).
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    if ceiling is not None and np.any(rgb > ceiling):
        return False
    if np.all(rgb >= 0.0):
        return True
    return not use_floor and bool(np.all(rgb <= 0.0))


def bisect_to_gamut(from_: npt.ArrayLike, target: npt.ArrayLike, in_gamut: Callable[[npt.NDArray], bool]) -> npt.NDArray:
    """Binary search for the gamut boundary between an out of gamut and an in gamut point.

    Runs exactly BISECTION_ITERATIONS steps: an in gamut midpoint becomes the new
    `target`, otherwise the new `from_`.

    Args:
        from_ (npt.ArrayLike): out of gamut end
        target (npt.ArrayLike): in gamut (or boundary) end
        in_gamut (Callable): membership test on a point of the search space

    Returns:
        npt.NDArray: the final `target`
    """
    from_ = np.array(from_, dtype=np.float64)
    target = np.array(target, dtype=np.float64)
    for _ in range(BISECTION_ITERATIONS):
        mid = (from_ + target) * 0.5
        if in_gamut(mid):
            target = mid
        else:
            from_ = mid
    return target


def rgb_clip(rgb: npt.ArrayLike, target: npt.ArrayLike, ceiling: Optional[float] = 1.0, use_floor: bool = True) -> Color:
    """Clip a color by bisecting in RGB along the line towards `target`.

    Args:
        rgb (npt.ArrayLike): color to clip
        target (npt.ArrayLike): in gamut color to search towards, usually a gray
        ceiling (Optional[float]): per channel maximum, None for no ceiling
        use_floor (bool): see is_in_gamut

    Returns:
        Color: `rgb` if already in gamut, else the boundary point found
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    if is_in_gamut(rgb, ceiling, use_floor):
        return rgb.copy()
    return bisect_to_gamut(rgb, target, lambda c: is_in_gamut(c, ceiling, use_floor))


def oklab_clip(rgb: npt.ArrayLike, rgb_to_xyz: Matrix, ceiling: Optional[float] = 1.0, use_floor: bool = True) -> Color:
    """Clip a color by bisecting in OkLab towards the gray of equal lightness, preserving hue.

    The search target has zero chroma and the color's OkLab lightness, clamped to
    [0, lightness of the ceiling gray]. The lower bound is dropped without a floor,
    the upper bound without a ceiling.

    Args:
        rgb (npt.ArrayLike): color to clip
        rgb_to_xyz (Matrix): RGB -> XYZ matrix of the color's space. OkLab gray is D65, so
            spaces with another white should pass a matrix adapted to D65.
        ceiling (Optional[float]): per channel maximum, None for no ceiling
        use_floor (bool): see is_in_gamut

    Raises:
        ValueError: `rgb_to_xyz` is not invertible.

    Returns:
        Color: `rgb` if already in gamut, else the boundary point found
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    if is_in_gamut(rgb, ceiling, use_floor):
        return rgb.copy()

    xyz_to_rgb = invert(rgb_to_xyz)
    if xyz_to_rgb is None:
        raise ValueError("RGB -> XYZ matrix is not invertible")

    def lab_to_rgb(lab: npt.NDArray) -> npt.NDArray:
        return transform_color(OkLab.to_xyz_d65(lab), xyz_to_rgb)

    lab = OkLab.from_xyz_d65(transform_color(rgb, rgb_to_xyz))
    lch = OkLab.oklab_to_oklch(lab)

    lightness = lch[0]
    if use_floor:
        lightness = max(lightness, 0.0)
    if ceiling is not None:
        max_lightness = OkLab.from_xyz_d65(transform_color(np.full(3, ceiling), rgb_to_xyz))[0]
        lightness = min(lightness, max_lightness)
    target_lab = OkLab.oklch_to_oklab([lightness, 0.0, lch[2]])

    found_lab = bisect_to_gamut(lab, target_lab, lambda c: is_in_gamut(lab_to_rgb(c), ceiling, use_floor))
    found = lab_to_rgb(found_lab)

    # Absorb rounding error from the round trip through OkLab.
    if use_floor:
        found = np.maximum(found, 0.0)
    if ceiling is not None:
        found = np.minimum(found, ceiling)
    return found


def clip_colors(colors: npt.ArrayLike, clip_fn: Callable[..., Color], *args, progress: bool = False, **kwargs) -> npt.NDArray:
    """Apply a per-color clip function to every row of an N x 3 array.

    Args:
        colors (npt.ArrayLike, N x 3): colors to clip
        clip_fn (Callable): e.g. oklab_clip, called as clip_fn(color, *args, **kwargs)
        progress (bool): show a tqdm progress bar

    Returns:
        npt.NDArray: N x 3 clipped colors
    """
    colors = np.asarray(colors, dtype=np.float64).reshape(-1, 3)
    logger.debug("Clipping %d colors with %s", colors.shape[0], clip_fn.__name__)
    out = np.empty_like(colors)
    for i, color in enumerate(tqdm(colors, disable=not progress)):
        out[i] = clip_fn(color, *args, **kwargs)
    return out
