import numpy as np
import numpy.typing as npt
from typing import Tuple

from dataclasses import dataclass
from enum import Enum


# A 3x3 color transform matrix, applied as `m @ color`.
Matrix = npt.NDArray[np.float64]

# A single RGB/XYZ/Lab triple. Components are unconstrained.
Color = npt.NDArray[np.float64]

# CIE 1931 xy chromaticity coordinate.
XY = Tuple[float, float]


class AdaptationMethod(Enum):
    """
    Chromatic adaptation methods. Each selects the basis that the Von Kries
    scaling happens in.
        XYZScale: Scale directly in CIE 1931 XYZ. Generally a poor method, but useful sometimes.
        Hunt: Hunt-Pointer-Estevez LMS basis.
        Bradford: Bradford RGB basis.
    """
    XYZScale = 0
    Hunt = 1
    Bradford = 2


@dataclass(frozen=True)
class Chromaticities:
    """
    The chromaticities of a (usually) RGB color space, as CIE 1931 xy coordinates.

        r (XY): The red primary.
        g (XY): The green primary.
        b (XY): The blue primary.
        w (XY): The white point.

    The primaries must not be collinear, otherwise the derived matrices are inf/NaN.
    """
    r: XY
    g: XY
    b: XY
    w: XY
