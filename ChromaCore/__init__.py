# ChromaCore - color transform matrices, gamut mapping and LUT resampling
from .Utils.CustomTypes import *
from .ColorMath.Matrix import (
    rgb_to_xyz_matrix, xyz_to_rgb_matrix, rgb_to_rgb_matrix, xyz_chromatic_adaptation_matrix,
    invert, multiply, compose, transform_color
)
from .ColorMath.GamutMath import (
    soft_clamp, open_domain_clip, closed_domain_clip, intersect, rgb_clip, oklab_clip, clip_colors
)
from .Lut import Lut1D, Lut3D, resample, resample_inv
from . import Primaries
