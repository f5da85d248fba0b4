from typing import Optional

import numpy as np
import numpy.typing as npt


# Far hit slack, absorbs rounding error when a segment ends exactly on a box face.
BBOX_MAXT_ADJUST = 1.000_000_24


def ConvertPolarToCartesian(CH: npt.NDArray) -> npt.NDArray:
    """
    Convert Polar to Cartesian Coordinates
    Args:
        CH (npt.ArrayLike, N x 2): The radius (chroma) and angle (hue, radians) that we want to transform
    """
    C, H = CH[:, 0], CH[:, 1]
    return np.array([C * np.cos(H), C * np.sin(H)]).T


def ConvertCartesianToPolar(CC: npt.NDArray) -> npt.NDArray:
    """
    Convert Cartesian to Polar Coordinates (CH)
    Args:
        Cartesian (npt.ArrayLike, N x 2): The Cartesian coordinates that we want to transform
    """
    x, y = CC[:, 0], CC[:, 1]
    rTheta = np.array([np.sqrt(x**2 + y**2), np.arctan2(y, x)]).T
    rTheta[:, 1] = np.where(rTheta[:, 1] < 0, rTheta[:, 1] + 2 * np.pi, rTheta[:, 1])  # Ensure θ is in [0, 2π)
    return rTheta


def ReciprocalDirection(direction: npt.NDArray) -> npt.NDArray:
    """
    1 / direction, where a zero component gives an infinity of the matching sign.
    Used by the slab test so a zero-length axis is "always inside" instead of NaN.
    """
    with np.errstate(divide='ignore'):
        return np.float64(1.0) / direction


def IntersectSegmentWithBox(origin: npt.NDArray, dir_inv: npt.NDArray,
                            box_min: npt.NDArray, box_max: npt.NDArray) -> Optional[float]:
    """Slab intersection of the segment `origin + t * dir`, t in [0, 1], with an axis aligned box.

    Args:
        origin (npt.NDArray): start of the segment
        dir_inv (npt.NDArray): reciprocal of the segment direction, see ReciprocalDirection
        box_min (npt.NDArray): lower corner of the box, may hold -inf
        box_max (npt.NDArray): upper corner of the box, may hold inf

    Returns:
        Optional[float]: the entry parameter t clamped to [0, 1], or None on a miss
    """
    # inf * 0 shows up when the origin sits on an infinite face, NaN loses in min/max below
    with np.errstate(invalid='ignore'):
        t1 = (box_min - origin) * dir_inv
        t2 = (box_max - origin) * dir_inv

    # Near and far hits.
    far_t = np.fmax(t1, t2)
    near_t = np.fmin(t1, t2)
    far_hit_t = float(np.fmin(np.fmin.reduce(far_t), 1.0)) * BBOX_MAXT_ADJUST
    near_hit_t = float(np.fmax.reduce(near_t))

    if near_hit_t <= far_hit_t:
        return min(max(near_hit_t, 0.0), 1.0)
    return None
