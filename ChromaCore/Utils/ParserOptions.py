import argparse

from .CustomTypes import AdaptationMethod


COLOR_SPACE_CHOICES = ['REC709', 'REC2020', 'DCI_P3', 'ACES_AP0', 'ACES_AP1',
                       'ADOBE_RGB', 'ADOBE_WIDE_GAMUT_RGB', 'PROPHOTO']


def AddGamutArgs(parser: argparse.ArgumentParser):
    parser.add_argument('--src_space', type=str, default='ACES_AP1', choices=COLOR_SPACE_CHOICES,
                        help='Color space the input colors are in')
    parser.add_argument('--dst_space', type=str, default='REC709', choices=COLOR_SPACE_CHOICES,
                        help='Color space to clip into')
    parser.add_argument('--adaptation', type=lambda choice: AdaptationMethod[choice],
                        choices=list(AdaptationMethod), default=AdaptationMethod.Bradford,
                        help='Chromatic adaptation between white points')
    parser.add_argument('--method', type=str, default='oklab', choices=['oklab', 'rgb'],
                        help='Search space of the gamut clip')
    parser.add_argument('--ceiling', type=float, default=1.0, help='Per channel maximum, <= 0 for none')
    parser.add_argument('--no_floor', action='store_true', help='Treat all-negative colors as in gamut')


def AddLutArgs(parser: argparse.ArgumentParser):
    parser.add_argument('--samples', type=int, default=4096, help='Number of samples in the forward table')
    parser.add_argument('--inverse_samples', type=int, default=1024, help='Number of samples in the inverted table')
    parser.add_argument('--min_x', type=float, default=0.0, help='Start of the input range')
    parser.add_argument('--max_x', type=float, default=1.0, help='End of the input range')
    parser.add_argument('--output_filename', type=str, required=True, help='Where to save the .npy table')
    parser.add_argument("--verbose", action='store_true', help="Verbose output")
