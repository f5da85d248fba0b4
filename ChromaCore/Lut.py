"""
1D and 3D lookup tables in memory, and the resampling/inversion of 1D tables.

Reading and writing LUT files is left to format codecs, which produce and
consume the types defined here.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)

Range = Tuple[float, float]


def _sample_positions(points: int, min_x: float, max_x: float) -> npt.NDArray:
    if points < 2:
        raise ValueError(f"A lookup table needs at least 2 samples, got {points}")
    inc = (max_x - min_x) / (points - 1)
    return min_x + inc * np.arange(points, dtype=np.float64)


@dataclass(frozen=True, eq=False)
class Lut1D:
    """
    A 1D look up table.

        ranges (List[Range]): the input range that the table indices map to. Either a
            single range shared by all tables, or one range per table.
        tables (List[npt.NDArray]): the sample values, one table per channel.
    """
    ranges: List[Range] = field(default_factory=list)
    tables: List[npt.NDArray] = field(default_factory=list)

    @classmethod
    def from_fn(cls, points: int, min_x: float, max_x: float, f: Callable[[float], float]) -> "Lut1D":
        """Single channel LUT sampling `f` at `points` evenly spaced inputs in [min_x, max_x]."""
        table = np.array([f(x) for x in _sample_positions(points, min_x, max_x)], dtype=np.float64)
        return cls(ranges=[(min_x, max_x)], tables=[table])

    @classmethod
    def from_fn_3(cls, points: int, mins: Sequence[float], maxs: Sequence[float],
                  fs: Sequence[Callable[[float], float]]) -> "Lut1D":
        """Three channel LUT, each channel with its own function and input range."""
        ranges = []
        tables = []
        for min_x, max_x, f in zip(mins, maxs, fs):
            ranges.append((min_x, max_x))
            tables.append(np.array([f(x) for x in _sample_positions(points, min_x, max_x)], dtype=np.float64))
        return cls(ranges=ranges, tables=tables)

    def _range_for(self, channel: int) -> Range:
        if len(self.ranges) == 1:
            return self.ranges[0]
        if len(self.ranges) == len(self.tables):
            return self.ranges[channel]
        raise ValueError("Lut1D range count must either be 1 or match the table count")

    def resample_inverted(self, samples: int) -> "Lut1D":
        """Inverts the LUT, resampling it to the given number of samples.

        Assumes every table is monotonically increasing. The result keeps the same
        number of ranges and tables as this LUT.

        Args:
            samples (int): number of samples in each inverted table

        Raises:
            ValueError: The range count is neither 1 nor the table count.

        Returns:
            Lut1D: the inverted LUT
        """
        if len(self.ranges) == 1:
            # One shared output range covering all the tables' values.
            new_range = (min(float(t[0]) for t in self.tables), max(float(t[-1]) for t in self.tables))
            tables = [resample_inv(samples, new_range, table, self.ranges[0]) for table in self.tables]
            return Lut1D(ranges=[new_range], tables=tables)
        elif len(self.ranges) == len(self.tables):
            ranges = []
            tables = []
            for old_range, table in zip(self.ranges, self.tables):
                new_range = (float(table[0]), float(table[-1]))
                ranges.append(new_range)
                tables.append(resample_inv(samples, new_range, table, old_range))
            return Lut1D(ranges=ranges, tables=tables)
        else:
            raise ValueError("Lut1D range count must either be 1 or match the table count")

    def resample_to_single_range(self, samples: int) -> "Lut1D":
        """Resample the LUT so all channels share one input range, the union of the old ranges."""
        if len(self.ranges) == 1 and all(len(t) == samples for t in self.tables):
            return Lut1D(ranges=list(self.ranges), tables=[t.copy() for t in self.tables])

        new_range = (min(r[0] for r in self.ranges), max(r[1] for r in self.ranges))
        tables = [resample(samples, new_range, table, self._range_for(i)) for i, table in enumerate(self.tables)]
        return Lut1D(ranges=[new_range], tables=tables)

    def look_up(self, n: float, channel: int) -> float:
        """Single channel, linearly interpolated lookup. A convenience, not meant for bulk use."""
        if not 0 <= channel < len(self.tables):
            raise ValueError(f"Channel {channel} out of range for a LUT with {len(self.tables)} tables")
        table = self.tables[channel]
        lo, hi = self._range_for(channel)

        t = min(max((n - lo) / (hi - lo), 0.0), 1.0)
        pos = (len(table) - 1) * t
        i1 = int(pos)
        alpha = pos - i1

        if i1 == len(table) - 1:
            return float(table[-1])
        v1 = table[i1]
        v2 = table[i1 + 1]
        return float(v1 + ((v2 - v1) * alpha))

    def look_up_inv(self, n: float, channel: int) -> float:
        """Inverse of look_up, `n == lut.look_up_inv(lut.look_up(n, 0), 0)`. Assumes a monotonic table."""
        if not 0 <= channel < len(self.tables):
            raise ValueError(f"Channel {channel} out of range for a LUT with {len(self.tables)} tables")
        table = self.tables[channel]
        lo, hi = self._range_for(channel)

        i = int(np.searchsorted(table, n, side='left'))
        if i == 0:
            i1, i2 = 0, 1
        elif i < len(table) and table[i] == n:
            i1, i2 = i - 1, i
        else:
            i1, i2 = i - 1, min(i, len(table) - 1)
            if i1 == i2:
                i1 -= 1

        out_1 = i1 / (len(table) - 1)
        out_2 = i2 / (len(table) - 1)

        if table[i1] == table[i2]:
            t = (out_1 + out_2) * 0.5
        else:
            alpha = (n - table[i1]) / (table[i2] - table[i1])
            t = out_1 + ((out_2 - out_1) * alpha)

        return float((t * (hi - lo)) + lo)

    def is_monotonic(self) -> bool:
        """Whether every table is monotonically non-decreasing (unrelated to monotone color)."""
        return all(bool(np.all(np.diff(table) >= 0)) for table in self.tables)


@dataclass(frozen=True, eq=False)
class Lut3D:
    """
    A 3D lookup table.

        range (List[Range]): input range on each of the three axes.
        resolution (Tuple[int, int, int]): number of samples along each axis.
        tables (List[npt.NDArray]): one flat table per output component, indexed as
            x + y * resolution[0] + z * resolution[0] * resolution[1].
    """
    range: List[Range] = field(default_factory=lambda: [(0.0, 1.0)] * 3)
    resolution: Tuple[int, int, int] = (0, 0, 0)
    tables: List[npt.NDArray] = field(default_factory=list)

    @classmethod
    def from_fn(cls, resolution: Sequence[int], mins: Sequence[float], maxs: Sequence[float],
                f: Callable[[Tuple[float, float, float]], Sequence[float]]) -> "Lut3D":
        """Sample `f` on a regular grid, x varying fastest."""
        xs, ys, zs = (_sample_positions(resolution[i], mins[i], maxs[i]) for i in range(3))
        tables = [np.empty(resolution[0] * resolution[1] * resolution[2]) for _ in range(3)]
        index = 0
        for z_in in zs:
            for y_in in ys:
                for x_in in xs:
                    out = f((float(x_in), float(y_in), float(z_in)))
                    for c in range(3):
                        tables[c][index] = out[c]
                    index += 1
        return cls(range=[(mins[i], maxs[i]) for i in range(3)],
                   resolution=(resolution[0], resolution[1], resolution[2]),
                   tables=tables)


def resample(new_samples: int, new_range_x: Range, old_table: npt.ArrayLike, old_range_x: Range) -> npt.NDArray:
    """Piecewise-linear resampling of a 1D table.

    Args:
        new_samples (int): sample count of the new table
        new_range_x (Range): input range of the new table
        old_table (npt.ArrayLike): the table to resample
        old_range_x (Range): input range of the old table

    Returns:
        npt.NDArray: the new table. Samples outside the old range take the old
        table's first/last value.
    """
    if new_samples < 2:
        raise ValueError(f"Resampling needs at least 2 samples, got {new_samples}")
    old_table = np.asarray(old_table, dtype=np.float64)
    last = len(old_table) - 1
    new_table = np.empty(new_samples)

    # Maps the new range onto the old range's [0, 1].
    offset = (new_range_x[0] - old_range_x[0]) / (old_range_x[1] - old_range_x[0])
    norm = (new_range_x[1] - new_range_x[0]) / (old_range_x[1] - old_range_x[0])

    for i in range(new_samples):
        x = offset + ((i / (new_samples - 1)) * norm)

        if x <= 0.0:
            y = old_table[0]
        elif x >= 1.0:
            y = old_table[last]
        else:
            j = x * last
            j1 = int(j)
            j2 = j1 + 1
            if j2 > last:
                y = old_table[last]
            else:
                alpha = j - j1
                y = (old_table[j1] * (1.0 - alpha)) + (old_table[j2] * alpha)
        new_table[i] = y

    logger.debug("Resampled %d -> %d samples", len(old_table), new_samples)
    return new_table


def resample_inv(new_samples: int, new_range_x: Range, old_table: npt.ArrayLike, old_range_x: Range) -> npt.NDArray:
    """Resamples the inverse of a monotonically non-decreasing 1D table.

    `new_range_x` lives on the old table's value axis, since the function is inverted.
    Values below/above the table clamp to the ends of `old_range_x`.

    Args:
        new_samples (int): sample count of the inverted table
        new_range_x (Range): input range of the inverted table
        old_table (npt.ArrayLike): the table to invert
        old_range_x (Range): input range of the old table

    Returns:
        npt.NDArray: the inverted table
    """
    if new_samples < 2:
        raise ValueError(f"Resampling needs at least 2 samples, got {new_samples}")
    old_table = np.asarray(old_table, dtype=np.float64)
    if len(old_table) < 2:
        raise ValueError(f"Inverting needs a table of at least 2 samples, got {len(old_table)}")
    new_table = np.empty(new_samples)
    old_norm = (old_range_x[1] - old_range_x[0]) / (len(old_table) - 1)
    new_norm = (new_range_x[1] - new_range_x[0]) / (new_samples - 1)

    # Only ever advances, both the new x values and the table are increasing.
    old_i_1 = 0
    old_i_2 = 1
    for i in range(new_samples):
        new_x = new_range_x[0] + (i * new_norm)
        if new_x < old_table[0]:
            new_table[i] = old_range_x[0]
        elif new_x > old_table[-1]:
            new_table[i] = old_range_x[1]
        else:
            # Find the interval that contains new_x.
            while new_x > old_table[old_i_2]:
                old_i_1 += 1
                old_i_2 += 1

            x1 = old_range_x[0] + (old_i_1 * old_norm)
            x2 = old_range_x[0] + (old_i_2 * old_norm)
            y1 = old_table[old_i_1]
            y2 = old_table[old_i_2]

            tmp = y2 - y1
            alpha = (new_x - y1) / tmp if tmp > 0.0 else 0.0
            new_table[i] = x1 + (alpha * (x2 - x1))

    logger.debug("Inverted %d -> %d samples", len(old_table), new_samples)
    return new_table
