"""
The prototype pentagon and the lattice basis of the Hilbert tiling.

A face quintant is covered by a skewed lattice spanned by the vectors
``v`` and ``w``. Every lattice cell holds one pentagon; the prototype
here is the pentagon for resolution 2 before it is flipped, moved and
scaled into place by the tiling.

The constants are derived once per process on first use.
"""

import logging
import math
import threading
from typing import NamedTuple, Optional

from .constants import DISTANCE_TO_EDGE, PI_OVER_5, PI_OVER_10
from .geometry import Mat2, PentagonShape, Point2, ShapeKind

logger = logging.getLogger(__name__)

# Prototype pentagon, before being scaled to the face
_A = (0.0, 0.0)
_B = (0.0, 1.0)
_C = (0.7885966681787006, 1.6149108024237764)
_D = (1.6171013659387945, 1.054928690397459)
_E = (math.cos(PI_OVER_10), math.sin(PI_OVER_10))


class PentagonConstants(NamedTuple):
    """Derived pentagon geometry shared by the tiling and projection code."""
    a: Point2
    b: Point2
    c: Point2
    d: Point2
    e: Point2
    u: Point2
    v: Point2
    w: Point2
    v_angle: float
    basis: Mat2
    basis_inverse: Mat2
    pentagon: PentagonShape
    triangle: PentagonShape


_constants: Optional[PentagonConstants] = None
_lock = threading.Lock()


def invert_mat2(m: Mat2) -> Mat2:
    """Inverse of a row-major 2x2 matrix."""
    m00, m01, m10, m11 = m
    det = m00 * m11 - m01 * m10
    return (m11 / det, -m01 / det, -m10 / det, m00 / det)


def apply_mat2(m: Mat2, p: Point2) -> Point2:
    m00, m01, m10, m11 = m
    x, y = p
    return (m00 * x + m01 * y, m10 * x + m11 * y)


def _build() -> PentagonConstants:
    c_length = math.hypot(_C[0], _C[1])
    edge_midpoint_d = 2 * c_length * math.cos(PI_OVER_5)

    # Rotate so that the edge c-d is bisected by the x-axis
    basis_rotation = PI_OVER_5 - math.atan2(_C[1], _C[0])
    factor = 2 * DISTANCE_TO_EDGE / edge_midpoint_d
    cos_r = math.cos(basis_rotation)
    sin_r = math.sin(basis_rotation)

    def place(p: Point2) -> Point2:
        x = p[0] * factor
        y = p[1] * factor
        return (x * cos_r - y * sin_r, x * sin_r + y * cos_r)

    a, b, c, d, e = (place(p) for p in (_A, _B, _C, _D, _E))

    bisector_angle = math.atan2(c[1], c[0]) - PI_OVER_5

    # Lattice vectors reach the edge midpoints of the quintant
    u = (0.0, 0.0)
    edge_length = DISTANCE_TO_EDGE / math.cos(PI_OVER_5)
    v_angle = bisector_angle + PI_OVER_5
    v = (edge_length * math.cos(v_angle), edge_length * math.sin(v_angle))
    w_angle = bisector_angle - PI_OVER_5
    w = (edge_length * math.cos(w_angle), edge_length * math.sin(w_angle))

    basis = (v[0], w[0], v[1], w[1])
    logger.debug("Derived pentagon lattice basis %s", basis)

    return PentagonConstants(
        a=a, b=b, c=c, d=d, e=e,
        u=u, v=v, w=w,
        v_angle=v_angle,
        basis=basis,
        basis_inverse=invert_mat2(basis),
        pentagon=PentagonShape([a, b, c, d, e], ShapeKind.PENTAGON),
        triangle=PentagonShape([u, v, w], ShapeKind.TRIANGLE),
    )


def get_pentagon_constants() -> PentagonConstants:
    """Return the shared pentagon constants, deriving them on first call."""
    global _constants
    if _constants is None:
        with _lock:
            if _constants is None:
                _constants = _build()
    return _constants
