"""
Transforms to and from the OkLab color space and its cylindrical form OkLCh.

OkLab assumes a D65 white point, so XYZ colors with another white should be
adapted before conversion (see Matrix.xyz_chromatic_adaptation_matrix).
"""
import numpy as np
import numpy.typing as npt

import ChromaCore.ColorMath.Geometry as Geometry
from ChromaCore.ColorMath.Matrix import transform_color
from ChromaCore.Utils.CustomTypes import Color


def _constant(rows) -> npt.NDArray:
    mat = np.array(rows, dtype=np.float64)
    mat.flags.writeable = False
    return mat


# XYZ -> linear LMS
OKLAB_M1 = _constant([
    [0.8189330101, 0.3618667424, -0.1288597137],
    [0.0329845436, 0.9293118715, 0.0361456387],
    [0.0482003018, 0.2643662691, 0.6338517070],
])

# non-linear LMS -> Lab
OKLAB_M2 = _constant([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
])

OKLAB_M1_INV = _constant([
    [1.2270138511035211, -0.5577999806518222, 0.2812561489664678],
    [-0.040580178423280586, 1.11225686961683, -0.0716766786656012],
    [-0.0763812845057069, -0.4214819784180127, 1.5861632204407947],
])

OKLAB_M2_INV = _constant([
    [0.9999999984505197, 0.3963377921737678, 0.21580375806075883],
    [1.0000000088817607, -0.10556134232365633, -0.063854174771706],
    [1.000000054672411, -0.08948418209496575, -1.2914855378640917],
])


def spow(x: npt.ArrayLike, p: float) -> npt.NDArray:
    """Sign preserving power, sign(x) * |x|^p. Keeps slightly negative inputs from going NaN."""
    x = np.asarray(x, dtype=np.float64)
    return np.sign(x) * np.power(np.abs(x), p)


def from_xyz_d65(xyz: npt.ArrayLike) -> Color:
    """CIE XYZ (D65) -> OkLab."""
    lms_linear = transform_color(xyz, OKLAB_M1)
    lms_nonlinear = np.cbrt(lms_linear)  # real cube root, sign preserving
    return transform_color(lms_nonlinear, OKLAB_M2)


def to_xyz_d65(oklab: npt.ArrayLike) -> Color:
    """OkLab -> CIE XYZ (D65)."""
    lms_nonlinear = transform_color(oklab, OKLAB_M2_INV)
    lms_linear = spow(lms_nonlinear, 3)
    return transform_color(lms_linear, OKLAB_M1_INV)


def oklab_to_oklch(lab: npt.ArrayLike) -> Color:
    """OkLab -> OkLCh, hue in radians in [0, 2π)."""
    lab = np.asarray(lab, dtype=np.float64)
    ch = Geometry.ConvertCartesianToPolar(lab[np.newaxis, 1:])[0]
    return np.array([lab[0], ch[0], ch[1]])


def oklch_to_oklab(lch: npt.ArrayLike) -> Color:
    """OkLCh -> OkLab."""
    lch = np.asarray(lch, dtype=np.float64)
    ab = Geometry.ConvertPolarToCartesian(lch[np.newaxis, 1:])[0]
    return np.array([lch[0], ab[0], ab[1]])
