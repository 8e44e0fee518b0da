"""
Equal-area projection between a spherical triangle and a planar triangle.

This is the vertex-centred great-circle construction known as IVEA
(after icoVertexGreatCircle from the DGGAL project, BSD 3-Clause,
Copyright (c) 2014-2025 Ecere Corporation). A point is located by the
great circle from vertex A through it; the fraction of area swept on
either side of that circle becomes its barycentric position in the
planar triangle.
"""

import math
from typing import Sequence

from .coords import barycentric_to_face, face_to_barycentric
from .geometry import Point2, SphericalTriangleShape
from .vector import (
    Vec3, cross, dot, length, normalize, quadruple_product, slerp, subtract, vector_difference,
)

# Barycentric weight above which a point is treated as sitting on a vertex
VERTEX_THRESHOLD = 1.0 - 1e-14


def forward(v: Vec3, spherical_triangle: SphericalTriangleShape, face_triangle: Sequence[Point2]) -> Point2:
    """
    Project a unit vector onto the planar face triangle.

    Args:
        v: Point on the sphere inside ``spherical_triangle``
        spherical_triangle: Triangle (A, B, C) on the sphere
        face_triangle: Matching planar triangle

    Returns:
        Face point
    """
    a, b, c = spherical_triangle.vertices

    if subtract(v, a) == (0.0, 0.0, 0.0):
        return face_triangle[0]

    # The quadruple product is unstable near A, so the great circle through
    # A and v is described by their difference instead
    z = normalize(subtract(v, a))
    p = normalize(quadruple_product(a, z, b, c))

    h = vector_difference(a, v) / vector_difference(a, p)
    scaled_area = h / spherical_triangle.get_area()
    weights = (
        1.0 - h,
        scaled_area * SphericalTriangleShape([a, p, c]).get_area(),
        scaled_area * SphericalTriangleShape([a, b, p]).get_area(),
    )
    return barycentric_to_face(weights, face_triangle)


def inverse(face_point: Point2, face_triangle: Sequence[Point2], spherical_triangle: SphericalTriangleShape) -> Vec3:
    """
    Unproject a face point back onto the sphere.

    Args:
        face_point: Point inside ``face_triangle``
        face_triangle: Planar triangle
        spherical_triangle: Matching triangle (A, B, C) on the sphere

    Returns:
        Unit vector
    """
    a, b, c = spherical_triangle.vertices
    u, v, w = face_to_barycentric(face_point, face_triangle)

    if u > VERTEX_THRESHOLD:
        return a
    if v > VERTEX_THRESHOLD:
        return b
    if w > VERTEX_THRESHOLD:
        return c

    c1 = cross(b, c)
    area_abc = spherical_triangle.get_area()
    h = 1.0 - u
    r = w / h
    alpha = r * area_abc
    s = math.sin(alpha)
    half_c = math.sin(alpha / 2)
    cc = 2 * half_c * half_c

    c01 = dot(a, b)
    c12 = dot(b, c)
    c20 = dot(c, a)
    s12 = length(c1)

    volume = dot(a, c1)
    f = s * volume + cc * (c01 * c12 - c20)
    g = cc * s12 * (1 + c01)
    q = (2 / math.acos(c12)) * math.atan2(g, f)
    p = slerp(b, c, q)
    k = vector_difference(a, p)
    t = safe_acos(h * k) / safe_acos(k)
    return slerp(a, p, t)


def safe_acos(x: float) -> float:
    """acos(1 - 2x^2), using a series for small x."""
    if x < 1e-3:
        return 2 * x + x * x * x / 3
    return math.acos(1 - 2 * x * x)
