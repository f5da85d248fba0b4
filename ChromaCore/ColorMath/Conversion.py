import numpy as np
import numpy.typing as npt

from ChromaCore.Utils.CustomTypes import Color


def xyz_to_xyy(xyz: npt.ArrayLike) -> Color:
    """
    CIE XYZ -> CIE xyY
    Args:
        xyz (npt.ArrayLike): XYZ tristimulus values
    """
    X, Y, Z = np.asarray(xyz, dtype=np.float64)
    n = X + Y + Z
    return np.array([X / n, Y / n, Y])


def xyy_to_xyz(xyy: npt.ArrayLike) -> Color:
    """
    CIE xyY -> CIE XYZ
    Args:
        xyy (npt.ArrayLike): chromaticity x, y and luminance Y
    """
    x, y, Y = np.asarray(xyy, dtype=np.float64)
    X = Y / y * x
    Z = Y / y * (1.0 - x - y)
    return np.array([X, Y, Z])


# The functions below reproduce OpenColorIO's fixed-function transforms, quirks included.

# Saturation is clipped just below 2.0 before HSV -> RGB.
MAX_SAT = 1.999


def rgb_to_hsv(rgb: npt.ArrayLike) -> Color:
    """RGB -> HSV, OCIO compatible.

    H is in [0.0, 1.0). S is in [0.0, 2.0) with 1.0 full saturation and values above
    1.0 outside the input RGB space. V is unbounded.
    """
    red, grn, blu = (float(c) for c in np.asarray(rgb, dtype=np.float64))

    rgb_min = min(red, grn, blu)
    rgb_max = max(red, grn, blu)
    delta = rgb_max - rgb_min

    val = rgb_max
    sat = 0.0
    hue = 0.0

    if delta != 0.0:
        if rgb_max != 0.0:
            sat = delta / rgb_max

        if red == rgb_max:
            hue = (grn - blu) / delta
        elif grn == rgb_max:
            hue = 2.0 + (blu - red) / delta
        else:
            hue = 4.0 + (red - grn) / delta

        if hue < 0.0:
            hue += 6.0

        hue *= 1.0 / 6.0

    # Extended range inputs.
    if rgb_min < 0.0:
        val += rgb_min

    if -rgb_min > rgb_max:
        sat = (rgb_max - rgb_min) / -rgb_min

    return np.array([hue, sat, val])


def hsv_to_rgb(hsv: npt.ArrayLike) -> Color:
    """HSV -> RGB, OCIO compatible. H wraps in [0.0, 1.0), S is clipped to [0.0, MAX_SAT]."""
    h, s, v = (float(c) for c in np.asarray(hsv, dtype=np.float64))

    hue = (h - np.floor(h)) * 6.0
    sat = min(max(s, 0.0), MAX_SAT)
    val = v

    red = np.clip(abs(hue - 3.0) - 1.0, 0.0, 1.0)
    grn = np.clip(2.0 - abs(hue - 2.0), 0.0, 1.0)
    blu = np.clip(2.0 - abs(hue - 4.0), 0.0, 1.0)

    rgb_max = val
    rgb_min = val * (1.0 - sat)

    # Extended range inputs.
    if sat > 1.0:
        rgb_min = val * (1.0 - sat) / (2.0 - sat)
        rgb_max = val - rgb_min
    if val < 0.0:
        rgb_min = val / (2.0 - sat)
        rgb_max = val - rgb_min

    delta = rgb_max - rgb_min
    return np.array([red, grn, blu]) * delta + rgb_min


def xyz_to_uvy(xyz: npt.ArrayLike) -> Color:
    """CIE XYZ -> uvY, the CIELUV u' v' chromaticity plus linear Y."""
    x, y, z = np.asarray(xyz, dtype=np.float64)

    tmp = x + 15.0 * y + 3.0 * z
    d = 0.0 if tmp == 0.0 else 1.0 / tmp

    return np.array([4.0 * x * d, 9.0 * y * d, y])


def uvy_to_xyz(uvy: npt.ArrayLike) -> Color:
    """uvY -> CIE XYZ."""
    u, v, y = np.asarray(uvy, dtype=np.float64)

    d = 0.0 if v == 0.0 else 1.0 / v
    x = (9.0 / 4.0) * y * u * d
    z = (3.0 / 4.0) * y * (4.0 - u - (20.0 / 3.0) * v) * d

    return np.array([x, y, z])
