"""
Three-dimensional vector arithmetic on plain tuples.

Points on the unit sphere are carried around as ``(x, y, z)`` tuples.
Cartesian coordinates give equal precision in every direction, which is
why the spherical geometry is done here rather than in angles.
"""

import math
from typing import Tuple

from .errors import DegenerateGeometry

Vec3 = Tuple[float, float, float]


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def subtract(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(v: Vec3, s: float) -> Vec3:
    return (v[0] * s, v[1] * s, v[2] * s)


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def distance(a: Vec3, b: Vec3) -> float:
    return length(subtract(a, b))


def normalize(v: Vec3) -> Vec3:
    """
    Scale a vector to unit length.

    Raises:
        DegenerateGeometry: If the vector has zero length
    """
    n = length(v)
    if n == 0.0:
        raise DegenerateGeometry(f"Cannot normalize zero-length vector {v}")
    return (v[0] / n, v[1] / n, v[2] / n)


def lerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    return (
        a[0] + t * (b[0] - a[0]),
        a[1] + t * (b[1] - a[1]),
        a[2] + t * (b[2] - a[2]),
    )


def angle(a: Vec3, b: Vec3) -> float:
    """Angle between two vectors in radians."""
    cos_angle = dot(a, b) / (length(a) * length(b))
    return math.acos(max(-1.0, min(1.0, cos_angle)))


def slerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    """
    Spherical linear interpolation along the great circle from a to b.

    Args:
        a: Start vector
        b: End vector
        t: Interpolation parameter, 0 gives a and 1 gives b

    Returns:
        Interpolated vector
    """
    gamma = angle(a, b)
    if gamma < 1e-12:
        return lerp(a, b, t)
    sin_gamma = math.sin(gamma)
    weight_a = math.sin((1 - t) * gamma) / sin_gamma
    weight_b = math.sin(t * gamma) / sin_gamma
    return add(scale(a, weight_a), scale(b, weight_b))


def triple_product(a: Vec3, b: Vec3, c: Vec3) -> float:
    """Scalar triple product a . (b x c)."""
    return dot(a, cross(b, c))


def quadruple_product(a: Vec3, b: Vec3, c: Vec3, d: Vec3) -> Vec3:
    """Vector quadruple product (a x b) x (c x d)."""
    cross_cd = cross(c, d)
    triple_acd = dot(a, cross_cd)
    triple_bcd = dot(b, cross_cd)
    return subtract(scale(b, triple_acd), scale(a, triple_bcd))


def vector_difference(a: Vec3, b: Vec3) -> float:
    """
    Angular difference measure between two unit vectors.

    Equal to sqrt(1 - a.b) / sqrt(2), i.e. sin(x / 2) for the angle x
    between them, 0 when equal. Computed through
    the normalized midpoint, which stays accurate for small angles where
    a.b approaches 1.
    """
    midpoint = normalize(lerp(a, b, 0.5))
    d = length(cross(a, midpoint))

    # sin(x) ~ x below 1e-8
    if d < 1e-8:
        return 0.5 * length(subtract(a, b))
    return d
