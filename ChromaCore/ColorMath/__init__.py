from .Matrix import (
    rgb_to_xyz_matrix, xyz_to_rgb_matrix, rgb_to_rgb_matrix, xyz_chromatic_adaptation_matrix,
    invert, multiply, compose, transform_color, white_point_xyz
)
from .OkLab import from_xyz_d65, to_xyz_d65, oklab_to_oklch, oklch_to_oklab
from .GamutMath import (
    soft_clamp, open_domain_clip, closed_domain_clip, intersect, is_in_gamut,
    bisect_to_gamut, rgb_clip, oklab_clip, clip_colors, BISECTION_ITERATIONS
)
