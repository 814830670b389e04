"""Placement transforms and the quantized point key.

Schematic angles are stored clockwise (screen orientation), so a
placement rotates local coordinates by the negative of its angle.
Every transformed coordinate is rounded to ``PRECISION`` decimals and
the same rounding is what makes two points the same electrical node.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np
from numpy.typing import ArrayLike, NDArray

from kicad_spice.exceptions import GeometryError

PRECISION = 2
_SCALE = 10**PRECISION


def _frozen(rows) -> NDArray[np.float64]:
    arr = np.array(rows, dtype=np.float64)
    arr.setflags(write=False)
    return arr


# The unmirrored entry flips y; "xy" collapses every point onto the
# placement origin.
MIRROR = MappingProxyType({
    "": _frozen([[1.0, 0.0], [0.0, -1.0]]),
    "x": _frozen([[1.0, 0.0], [0.0, 1.0]]),
    "y": _frozen([[-1.0, 0.0], [0.0, -1.0]]),
    "xy": _frozen([[0.0, 0.0], [0.0, 0.0]]),
})


def _quantize(value: float) -> int:
    return int(round(round(value, PRECISION) * _SCALE))


@dataclass(frozen=True)
class Point:
    """Absolute schematic coordinate, compared in hundredths of a unit."""

    xi: int
    yi: int

    @classmethod
    def from_float(cls, x: float, y: float) -> Point:
        return cls(_quantize(x), _quantize(y))

    @property
    def x(self) -> float:
        return self.xi / _SCALE

    @property
    def y(self) -> float:
        return self.yi / _SCALE

    def __repr__(self) -> str:
        return f"Point({self.x:.{PRECISION}f}, {self.y:.{PRECISION}f})"


@dataclass(frozen=True)
class Placement:
    position: tuple[float, float]
    angle: float = 0.0
    mirror: str = ""

    def __post_init__(self):
        if self.mirror not in MIRROR:
            raise GeometryError("unknown mirror axis", context={"mirror": self.mirror})
        if len(self.position) != 2:
            raise GeometryError("placement position needs x and y", context={"position": self.position})


def rotation(angle: float) -> NDArray[np.float64]:
    theta = -math.radians(angle)
    return np.array([
        [math.cos(theta), -math.sin(theta)],
        [math.sin(theta), math.cos(theta)],
    ])


def transform(placement: Placement, pts: ArrayLike) -> NDArray[np.float64]:
    """Map local symbol coordinates to absolute schematic coordinates.

    ``pts`` is either a single ``(x, y)`` pair or an ``(n, 2)`` array; the
    result has the same shape. Rows are treated as row vectors:
    ``pts @ R @ M + position``.
    """
    local = np.asarray(pts, dtype=np.float64)
    if local.shape[-1:] != (2,) or local.ndim > 2:
        raise GeometryError("expected points with two coordinates", context={"shape": local.shape})
    verts = local @ rotation(placement.angle) @ MIRROR[placement.mirror]
    verts = verts + np.asarray(placement.position, dtype=np.float64)
    return np.round(verts, PRECISION)


def transform_point(placement: Placement, xy: ArrayLike) -> Point:
    x, y = transform(placement, xy)
    return Point.from_float(float(x), float(y))
