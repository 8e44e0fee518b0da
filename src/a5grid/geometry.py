"""
Planar and spherical polygon shapes.

PentagonShape holds a cell footprint in the flat working plane of a
dodecahedron face. The same class also carries the triangular quintants
of resolution 1; the ``kind`` tag says which one a given shape is.

SphericalPolygonShape and SphericalTriangleShape work on unit vectors and
provide great-circle interpolation, containment and area on the sphere.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .vector import Vec3, add, cross, dot, lerp, length, normalize, slerp, subtract, triple_product

Point2 = Tuple[float, float]
Mat2 = Tuple[float, float, float, float]  # row-major (m00, m01, m10, m11)


class ShapeKind(Enum):
    """Tag distinguishing the planar shapes used by the tiling."""
    PENTAGON = "pentagon"
    TRIANGLE = "triangle"


class PentagonShape:
    """
    A planar polygon in face coordinates.

    Vertices are kept in a consistent winding: the value returned by
    ``get_area`` is non-negative. Operations return new shapes and leave
    the receiver untouched.
    """

    def __init__(self, vertices: Sequence[Point2], kind: ShapeKind = ShapeKind.PENTAGON):
        self.kind = kind
        self.vertices: List[Point2] = [(float(x), float(y)) for x, y in vertices]
        if not self.is_winding_correct():
            self.vertices.reverse()

    @classmethod
    def _raw(cls, vertices: List[Point2], kind: ShapeKind) -> PentagonShape:
        """Build a shape without touching the vertex order."""
        shape = cls.__new__(cls)
        shape.kind = kind
        shape.vertices = vertices
        return shape

    def __repr__(self) -> str:
        return f"PentagonShape(kind={self.kind.value}, vertices={self.vertices})"

    def __len__(self) -> int:
        return len(self.vertices)

    def get_area(self) -> float:
        """
        Winding measure of the polygon.

        Sum of (x_j - x_i) * (y_j + y_i) over the edges: twice the area,
        with the sign of the winding.
        """
        total = 0.0
        n = len(self.vertices)
        for i in range(n):
            x1, y1 = self.vertices[i]
            x2, y2 = self.vertices[(i + 1) % n]
            total += (x2 - x1) * (y2 + y1)
        return total

    def is_winding_correct(self) -> bool:
        return self.get_area() >= 0.0

    def get_center(self) -> Point2:
        """Vertex centroid."""
        n = len(self.vertices)
        sum_x = 0.0
        sum_y = 0.0
        for x, y in self.vertices:
            sum_x += x / n
            sum_y += y / n
        return (sum_x, sum_y)

    def scale(self, factor: float) -> PentagonShape:
        return self._raw([(x * factor, y * factor) for x, y in self.vertices], self.kind)

    def rotate180(self) -> PentagonShape:
        """Rotate by 180 degrees about the origin."""
        return self._raw([(-x, -y) for x, y in self.vertices], self.kind)

    def reflect_y(self) -> PentagonShape:
        """Reflect over the x-axis, reversing the order to keep the winding."""
        reflected = [(x, -y) for x, y in self.vertices]
        reflected.reverse()
        return self._raw(reflected, self.kind)

    def translate(self, offset: Point2) -> PentagonShape:
        dx, dy = offset
        return self._raw([(x + dx, y + dy) for x, y in self.vertices], self.kind)

    def transform(self, matrix: Mat2) -> PentagonShape:
        """Apply a 2x2 linear map, then restore the winding."""
        m00, m01, m10, m11 = matrix
        return PentagonShape(
            [(m00 * x + m01 * y, m10 * x + m11 * y) for x, y in self.vertices],
            self.kind,
        )

    def contains_point(self, point: Point2) -> float:
        """
        Test whether a point lies inside the polygon.

        Returns:
            1.0 when the point is inside. Otherwise a negative value that
            grows in magnitude with the distance to the violated edge.
        """
        px0, py0 = point
        n = len(self.vertices)
        d_max = 1.0
        for i in range(n):
            x1, y1 = self.vertices[i]
            x2, y2 = self.vertices[(i + 1) % n]

            dx = x1 - x2
            dy = y1 - y2
            px = px0 - x1
            py = py0 - y1

            # Negative cross product means the point is on the outer side
            cross_product = dx * py - dy * px
            if cross_product < 0:
                # Edges are of similar length, so only the point offset is normalized
                p_length = math.sqrt(px * px + py * py)
                d_max = min(d_max, cross_product / p_length)

        return d_max

    def split_edges(self, segments: int) -> PentagonShape:
        """
        Subdivide every edge into ``segments`` equal pieces.

        Args:
            segments: Pieces per edge; 1 or less returns an unchanged copy

        Returns:
            A shape with ``len(self) * segments`` vertices
        """
        if segments <= 1:
            return self._raw(list(self.vertices), self.kind)

        new_vertices: List[Point2] = []
        n = len(self.vertices)
        for i in range(n):
            x1, y1 = self.vertices[i]
            x2, y2 = self.vertices[(i + 1) % n]
            new_vertices.append((x1, y1))
            for j in range(1, segments):
                t = j / segments
                new_vertices.append((x1 + t * (x2 - x1), y1 + t * (y2 - y1)))

        return PentagonShape(new_vertices, self.kind)


class SphericalPolygonShape:
    """A polygon on the unit sphere with great-circle edges."""

    def __init__(self, vertices: Sequence[Vec3]):
        self.vertices: List[Vec3] = list(vertices)
        self._area: Optional[float] = None

    def get_boundary(self, n_segments: int = 1, closed_ring: bool = True) -> List[Vec3]:
        """Boundary with ``n_segments`` points per edge."""
        n = len(self.vertices)
        points = [self.slerp(s / n_segments) for s in range(n * n_segments)]
        if closed_ring and points:
            points.append(points[0])
        return points

    def slerp(self, t: float) -> Vec3:
        """
        Interpolate along the boundary.

        The integer part of ``t`` selects the edge and the fractional part
        the position on it; t = 1.5 is halfway between the second and third
        vertices.
        """
        n = len(self.vertices)
        f = t % 1
        i = int(t % n)
        j = (i + 1) % n
        return slerp(self.vertices[i], self.vertices[j], f)

    def get_transformed_vertices(self, t: float) -> Tuple[Vec3, Vec3, Vec3]:
        """
        Vertex ``t`` together with the vectors to its next and previous vertices.
        """
        n = len(self.vertices)
        i = int(t % n)
        j = (i + 1) % n
        k = (i + n - 1) % n
        v = self.vertices[i]
        return v, subtract(self.vertices[j], v), subtract(self.vertices[k], v)

    def contains_point(self, point: Vec3) -> float:
        """
        Signed containment measure for a counter-clockwise polygon.

        Uses the "necessary strike" condition from Bevis & Chatelain,
        "Locating a point on a spherical surface relative to a spherical
        polygon".

        Returns:
            Positive inside, 0 on an edge or vertex, negative outside.
            The magnitude approximates the angular distance to the nearest
            limiting arc.
        """
        theta_delta_min = math.inf

        for i in range(len(self.vertices)):
            v, va, vb = self.get_transformed_vertices(i)
            vp = subtract(point, v)
            if length(vp) == 0.0:
                return 0.0

            vp = normalize(vp)
            va = normalize(va)
            vb = normalize(vb)

            # Both are positive when P lies within the arc from VA to VB
            sin_ap = dot(v, cross(va, vp))
            sin_pb = dot(v, cross(vp, vb))

            theta_delta_min = min(theta_delta_min, sin_ap, sin_pb)

        return theta_delta_min

    @staticmethod
    def _triangle_area(v1: Vec3, v2: Vec3, v3: Vec3) -> float:
        mid_a = normalize(lerp(v2, v3, 0.5))
        mid_b = normalize(lerp(v3, v1, 0.5))
        mid_c = normalize(lerp(v1, v2, 0.5))

        s = max(-1.0, min(1.0, triple_product(mid_a, mid_b, mid_c)))

        # asin(x) ~ x below 1e-8
        if abs(s) < 1e-8:
            return 2 * s
        return 2 * math.asin(s)

    def get_area(self) -> float:
        """Signed area in steradians, positive for counter-clockwise winding."""
        if self._area is None:
            self._area = self._compute_area()
        return self._area

    def _compute_area(self) -> float:
        n = len(self.vertices)
        if n < 3:
            return 0.0
        if n == 3:
            return self._triangle_area(*self.vertices)

        center = (0.0, 0.0, 0.0)
        for vertex in self.vertices:
            center = add(center, vertex)
        center = normalize(center)

        area = 0.0
        for i in range(n):
            tri_area = self._triangle_area(center, self.vertices[i], self.vertices[(i + 1) % n])
            if not math.isnan(tri_area):
                area += tri_area
        return area


class SphericalTriangleShape(SphericalPolygonShape):
    """A spherical polygon with exactly three vertices."""

    def __init__(self, vertices: Sequence[Vec3]):
        if len(vertices) != 3:
            raise ValueError("SphericalTriangleShape requires exactly 3 vertices")
        super().__init__(vertices)
