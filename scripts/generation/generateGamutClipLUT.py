import argparse
import numpy as np

import ChromaCore.Primaries as Primaries
from ChromaCore.ColorMath.Matrix import rgb_to_xyz_matrix, xyz_to_rgb_matrix, xyz_chromatic_adaptation_matrix, compose, transform_color
from ChromaCore.ColorMath.GamutMath import oklab_clip, rgb_clip, clip_colors
from ChromaCore.Lut import Lut3D
from ChromaCore.Utils.ParserOptions import AddGamutArgs

parser = argparse.ArgumentParser(description='Bake a gamut clipping 3D LUT from one RGB space into another')
AddGamutArgs(parser)
parser.add_argument('--resolution', type=int, default=33, help='Samples per axis of the cube')
parser.add_argument('--max_input', type=float, default=1.0, help='Largest input channel value of the cube')
parser.add_argument('--output_filename', type=str, default='gamut_clip_lut.npy')
args = parser.parse_args()

src = getattr(Primaries, args.src_space)
dst = getattr(Primaries, args.dst_space)
ceiling = args.ceiling if args.ceiling > 0 else None
use_floor = not args.no_floor
D65 = Primaries.REC709.w

# src RGB -> XYZ -> adapted to the dst white -> dst RGB
adapt = xyz_chromatic_adaptation_matrix(src.w, dst.w, args.adaptation)
src_to_dst = compose([rgb_to_xyz_matrix(src), adapt, xyz_to_rgb_matrix(dst)])

# OkLab gray is D65, so the clip sees dst colors adapted to D65
dst_to_xyz_d65 = compose([rgb_to_xyz_matrix(dst),
                          xyz_chromatic_adaptation_matrix(dst.w, D65, args.adaptation)])

res = args.resolution
grid = np.linspace(0.0, args.max_input, res)
zs, ys, xs = np.meshgrid(grid, grid, grid, indexing='ij')
src_colors = np.stack([xs.ravel(), ys.ravel(), zs.ravel()], axis=1)
dst_colors = np.array([transform_color(c, src_to_dst) for c in src_colors])

if args.method == 'oklab':
    clipped = clip_colors(dst_colors, oklab_clip, dst_to_xyz_d65, ceiling, use_floor, progress=True)
else:
    grays = np.clip(dst_colors @ rgb_to_xyz_matrix(dst)[1], 0.0, ceiling if ceiling is not None else np.inf)
    clipped = np.array([rgb_clip(c, np.full(3, g), ceiling, use_floor) for c, g in zip(dst_colors, grays)])

lut = Lut3D(range=[(0.0, args.max_input)] * 3, resolution=(res, res, res),
            tables=[clipped[:, 0].copy(), clipped[:, 1].copy(), clipped[:, 2].copy()])
np.save(args.output_filename, np.stack(lut.tables))
print(f"Saved {res}^3 {args.method} clip LUT {args.src_space} -> {args.dst_space} to {args.output_filename}")
