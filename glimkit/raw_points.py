"""A raw point cloud frame as delivered by a sensor driver."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def _empty(dtype: type = float) -> np.ndarray:
    return np.zeros(0, dtype=dtype)


def _empty_rows() -> np.ndarray:
    return np.zeros((0, 4), dtype=float)


@dataclass
class RawPoints:
    """One scan: homogeneous point coordinates plus optional per-point attributes.

    ``stamp`` is the time of the first point; ``times`` are per-point offsets
    relative to it. ``points`` and ``colors`` hold one row of four values per
    point. Attribute arrays are empty when the sensor does not provide them.
    """

    stamp: float = 0.0
    times: np.ndarray = field(default_factory=_empty)
    intensities: np.ndarray = field(default_factory=_empty)
    points: np.ndarray = field(default_factory=_empty_rows)
    colors: np.ndarray = field(default_factory=_empty_rows)
    rings: np.ndarray = field(default_factory=lambda: _empty(np.uint32))

    def __len__(self) -> int:
        return len(self.points)