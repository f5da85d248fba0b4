import numpy as np
import pytest

import ChromaCore.Primaries as Primaries
from ChromaCore.ColorMath.Matrix import rgb_to_xyz_matrix


def test_from_colour_rec709():
    chroma = Primaries.from_colour("ITU-R BT.709")
    for ours, theirs in zip((chroma.r, chroma.g, chroma.b, chroma.w),
                            (Primaries.REC709.r, Primaries.REC709.g, Primaries.REC709.b, Primaries.REC709.w)):
        assert ours == pytest.approx(theirs, abs=1e-4)


def test_from_colour_aces():
    chroma = Primaries.from_colour("ACES2065-1")
    assert np.allclose(rgb_to_xyz_matrix(chroma), rgb_to_xyz_matrix(Primaries.ACES_AP0), atol=1e-6)


def test_from_colour_unknown_name():
    with pytest.raises(KeyError):
        Primaries.from_colour("not a colourspace")


def test_chromaticities_are_frozen():
    with pytest.raises(AttributeError):
        Primaries.REC709.w = (0.3333, 0.3333)
