import numpy as np

from colour import RGB_COLOURSPACES

from ChromaCore.Utils.CustomTypes import Chromaticities


# Rec.709 and sRGB
REC709 = Chromaticities(
    r=(0.640, 0.330),
    g=(0.300, 0.600),
    b=(0.150, 0.060),
    w=(0.3127, 0.3290),
)

REC2020 = Chromaticities(
    r=(0.708, 0.292),
    g=(0.170, 0.797),
    b=(0.131, 0.046),
    w=(0.3127, 0.3290),
)

DCI_P3 = Chromaticities(
    r=(0.680, 0.320),
    g=(0.265, 0.690),
    b=(0.150, 0.060),
    w=(0.314, 0.351),
)

# ACES2065-1
ACES_AP0 = Chromaticities(
    r=(0.73470, 0.26530),
    g=(0.00000, 1.00000),
    b=(0.00010, -0.07700),
    w=(0.32168, 0.33767),
)

# ACEScg, ACEScc, ACEScct
ACES_AP1 = Chromaticities(
    r=(0.713, 0.293),
    g=(0.165, 0.830),
    b=(0.128, 0.044),
    w=(0.32168, 0.33767),
)

ADOBE_RGB = Chromaticities(
    r=(0.6400, 0.3300),
    g=(0.2100, 0.7100),
    b=(0.1500, 0.0600),
    w=(0.3127, 0.3290),
)

ADOBE_WIDE_GAMUT_RGB = Chromaticities(
    r=(0.7347, 0.2653),
    g=(0.1152, 0.8264),
    b=(0.1566, 0.0177),
    w=(0.3457, 0.3585),
)

# Kodak ProPhoto RGB
PROPHOTO = Chromaticities(
    r=(0.734699, 0.265301),
    g=(0.159597, 0.840403),
    b=(0.036598, 0.000105),
    w=(0.345704, 0.358540),
)


def from_colour(name: str) -> Chromaticities:
    """Look up the chromaticities of an RGB colourspace registered with colour-science.

    Args:
        name (str): colourspace name or alias, e.g. "ITU-R BT.709" or "ACEScg"

    Returns:
        Chromaticities: primaries and white point of the colourspace
    """
    colourspace = RGB_COLOURSPACES[name]
    primaries = np.asarray(colourspace.primaries, dtype=np.float64)
    whitepoint = np.asarray(colourspace.whitepoint, dtype=np.float64)
    return Chromaticities(
        r=(float(primaries[0, 0]), float(primaries[0, 1])),
        g=(float(primaries[1, 0]), float(primaries[1, 1])),
        b=(float(primaries[2, 0]), float(primaries[2, 1])),
        w=(float(whitepoint[0]), float(whitepoint[1])),
    )
