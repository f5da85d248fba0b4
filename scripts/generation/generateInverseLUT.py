import argparse
import logging
import numpy as np

from ChromaCore.Lut import Lut1D
from ChromaCore.Utils.ParserOptions import AddLutArgs

parser = argparse.ArgumentParser(description='Tabulate a monotonic curve and bake its inverse as a 1D LUT')
AddLutArgs(parser)
parser.add_argument('--curve', type=str, default='gamma', choices=['gamma', 'log2'], help='Curve to tabulate')
parser.add_argument('--gamma', type=float, default=2.4, help='Exponent of the gamma curve')
args = parser.parse_args()

if args.verbose:
    logging.basicConfig(level=logging.DEBUG)

if args.curve == 'gamma':
    def curve(x): return np.sign(x) * np.abs(x) ** (1.0 / args.gamma)
else:
    if args.min_x <= 0:
        raise ValueError("log2 curve needs a positive --min_x")
    curve = np.log2

forward = Lut1D.from_fn(args.samples, args.min_x, args.max_x, curve)
if not forward.is_monotonic():
    raise ValueError(f"{args.curve} is not monotonic over [{args.min_x}, {args.max_x}]")

inverse = forward.resample_inverted(args.inverse_samples)
np.save(args.output_filename, inverse.tables[0])
print(f"Inverse {args.curve} LUT over {inverse.ranges[0]} with {args.inverse_samples} samples saved to {args.output_filename}")
