"""
Building, inverting and composing 3x3 color transform matrices.

Matrices are applied to column vectors, `transform_color(c, m) == m @ c`, and
`multiply(a, b)` is the matrix that applies `a` first and then `b`.
"""
import logging
from typing import List, Optional

import numpy as np
import numpy.typing as npt

from ChromaCore.Utils.CustomTypes import AdaptationMethod, Chromaticities, Color, Matrix, XY

logger = logging.getLogger(__name__)


def _constant(rows) -> Matrix:
    mat = np.array(rows, dtype=np.float64)
    mat.flags.writeable = False
    return mat


IDENTITY = _constant([
    [1.0, 0.0, 0.0],
    [0.0, 1.0, 0.0],
    [0.0, 0.0, 1.0],
])

# Hunt-Pointer-Estevez XYZ -> LMS
TO_LMS_HUNT = _constant([
    [0.38971, 0.68898, -0.07868],
    [-0.22981, 1.18340, 0.04641],
    [0.0, 0.0, 1.0],
])

# Bradford XYZ -> RGB
TO_RGB_BRADFORD = _constant([
    [0.8951, 0.2664, -0.1614],
    [-0.7502, 1.7135, 0.0367],
    [0.0389, -0.0685, 1.0296],
])

ADAPTATION_BASES = {
    AdaptationMethod.XYZScale: IDENTITY,
    AdaptationMethod.Hunt: TO_LMS_HUNT,
    AdaptationMethod.Bradford: TO_RGB_BRADFORD,
}


def rgb_to_xyz_matrix(chroma: Chromaticities) -> Matrix:
    """Computes the matrix that transforms colors from an RGB space to CIE 1931 XYZ.

    No chromatic adaptation is done, so RGB `1,1,1` maps to a color with the
    chromaticity of the white point.

    Args:
        chroma (Chromaticities): chromaticities of the RGB color space

    Returns:
        Matrix: RGB -> XYZ transform
    """
    rx, ry, gx, gy, bx, by, wx, wy = np.array([*chroma.r, *chroma.g, *chroma.b, *chroma.w], dtype=np.float64)

    # Collinear primaries give d == 0, which propagates as inf/NaN.
    with np.errstate(divide='ignore', invalid='ignore'):
        # X and Z of RGB (1, 1, 1)
        x = wx / wy
        z = (1.0 - wx - wy) / wy

        # Row scale factors.
        d = rx * (by - gy) + bx * (gy - ry) + gx * (ry - by)
        sr = (x * (by - gy)
              - gx * ((by - 1.0) + by * (x + z))
              + bx * ((gy - 1.0) + gy * (x + z))) / d
        sg = (x * (ry - by)
              + rx * ((by - 1.0) + by * (x + z))
              - bx * ((ry - 1.0) + ry * (x + z))) / d
        sb = (x * (gy - ry)
              - rx * ((gy - 1.0) + gy * (x + z))
              + gx * ((ry - 1.0) + ry * (x + z))) / d

    return np.array([
        [sr * rx, sg * gx, sb * bx],
        [sr * ry, sg * gy, sb * by],
        [sr * (1.0 - rx - ry), sg * (1.0 - gx - gy), sb * (1.0 - bx - by)],
    ], dtype=np.float64)


def xyz_to_rgb_matrix(chroma: Chromaticities) -> Matrix:
    """Inverse of `rgb_to_xyz_matrix`. Raises ValueError for degenerate primaries."""
    inv = invert(rgb_to_xyz_matrix(chroma))
    if inv is None:
        raise ValueError(f"RGB -> XYZ matrix of {chroma} is not invertible, primaries must not be collinear")
    return inv


def rgb_to_rgb_matrix(src: Chromaticities, dst: Chromaticities) -> Matrix:
    """Computes a matrix to transform colors from one RGB color space to another.

    This is a plain change of basis without chromatic adaptation: if the white
    points differ, `1,1,1` in `src` does not map to `1,1,1` in `dst`.

    Args:
        src (Chromaticities): source RGB space
        dst (Chromaticities): destination RGB space

    Raises:
        ValueError: The destination primaries are degenerate.

    Returns:
        Matrix: src RGB -> dst RGB transform
    """
    return multiply(rgb_to_xyz_matrix(src), xyz_to_rgb_matrix(dst))


def white_point_xyz(w: XY) -> Color:
    """XYZ of a white point chromaticity, normalized to Y = 1."""
    return np.array([w[0] / w[1], 1.0, (1.0 - w[0] - w[1]) / w[1]], dtype=np.float64)


def xyz_chromatic_adaptation_matrix(src_w: XY, dst_w: XY, method: AdaptationMethod) -> Matrix:
    """Computes a matrix to chromatically adapt CIE 1931 XYZ colors from one white point to another.

    The matrix "moves" colors: with `src_w` D65 and `dst_w` E, a color at D65
    ends up at E. Only valid for colors in XYZ.

    Args:
        src_w (XY): source white point chromaticity
        dst_w (XY): destination white point chromaticity
        method (AdaptationMethod): basis to do the Von Kries scaling in

    Returns:
        Matrix: XYZ -> XYZ adaptation transform
    """
    # "ABC" is whatever space the method scales in (XYZ, LMS, Bradford RGB).
    to_abc = ADAPTATION_BASES[method]
    from_abc = invert(to_abc)

    src_w_abc = transform_color(white_point_xyz(src_w), to_abc)
    dst_w_abc = transform_color(white_point_xyz(dst_w), to_abc)

    w_scale = np.diag(dst_w_abc / src_w_abc)

    return compose([to_abc, w_scale, from_abc])


def invert(m: npt.ArrayLike) -> Optional[Matrix]:
    """Calculates the inverse of a 3x3 matrix by Gauss-Jordan elimination with partial pivoting.

    A pivot is only rejected when it is exactly 0.0, so ill-conditioned
    matrices still invert (to very large entries).

    Args:
        m (npt.ArrayLike): the matrix to invert

    Returns:
        Optional[Matrix]: the inverse, or None if the matrix is not invertible
    """
    s = np.eye(3, dtype=np.float64)
    t = np.array(m, dtype=np.float64)

    # Forward elimination
    for i in range(2):
        pivot = i
        pivotsize = abs(t[i, i])

        for j in range(i + 1, 3):
            tmp = abs(t[j, i])
            if tmp > pivotsize:
                pivot = j
                pivotsize = tmp

        if pivotsize == 0.0:
            logger.debug("Matrix not invertible, zero pivot in column %d", i)
            return None

        if pivot != i:
            t[[i, pivot]] = t[[pivot, i]]
            s[[i, pivot]] = s[[pivot, i]]

        for j in range(i + 1, 3):
            f = t[j, i] / t[i, i]
            t[j] -= f * t[i]
            s[j] -= f * s[i]

    # Backward substitution
    for i in range(2, -1, -1):
        f = t[i, i]
        if f == 0.0:
            logger.debug("Matrix not invertible, zero diagonal in row %d", i)
            return None

        t[i] /= f
        s[i] /= f

        for j in range(i):
            f = t[j, i]
            t[j] -= f * t[i]
            s[j] -= f * s[i]

    return s


def multiply(a: npt.ArrayLike, b: npt.ArrayLike) -> Matrix:
    """Multiplies two matrices. The result transforms by `a` first and then by `b`."""
    return np.asarray(b, dtype=np.float64) @ np.asarray(a, dtype=np.float64)


def compose(matrices: List[npt.ArrayLike]) -> Matrix:
    """Chains matrices left to right: the first in the list is applied first.

    Raises:
        ValueError: The list is empty.
    """
    if len(matrices) == 0:
        raise ValueError("Cannot compose an empty list of matrices")
    result = np.array(matrices[0], dtype=np.float64)
    for mat in matrices[1:]:
        result = multiply(result, mat)
    return result


def transform_color(color: npt.ArrayLike, m: npt.ArrayLike) -> Color:
    """Transforms a color by a matrix."""
    return np.asarray(m, dtype=np.float64) @ np.asarray(color, dtype=np.float64)
