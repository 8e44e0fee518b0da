"""
Coordinate systems and the conversions between them.

Geographic input arrives as longitude/latitude in degrees. Internally the
grid works with spherical (theta, phi) angles, unit Cartesian vectors,
planar face points, polar face points and the IJ lattice coordinates of
the Hilbert tiling.
"""

import math
from typing import List, NamedTuple, Sequence, Tuple

from .authalic import authalic_to_geodetic, geodetic_to_authalic
from .errors import InvalidInput
from .geometry import Point2
from .pentagon import apply_mat2, get_pentagon_constants
from .vector import Vec3, length

Spherical = Tuple[float, float]
Polar = Tuple[float, float]
Barycentric = Tuple[float, float, float]

# Rotates the grid so that no face edge runs along the antimeridian
LONGITUDE_OFFSET = 93.0


class LonLat(NamedTuple):
    """Geographic position in degrees."""
    lon: float
    lat: float

    @classmethod
    def from_radians(cls, lon: float, lat: float) -> "LonLat":
        return cls(math.degrees(lon), math.degrees(lat))

    def to_radians(self) -> Tuple[float, float]:
        return (math.radians(self.lon), math.radians(self.lat))


def wrap_longitude(lon: float) -> float:
    """Wrap a longitude in degrees into [-180, 180)."""
    return ((lon + 180.0) % 360.0) - 180.0


def normalize_lonlat(lon: float, lat: float) -> LonLat:
    """
    Validate a geographic position and wrap its longitude.

    Args:
        lon: Longitude in degrees, any finite value
        lat: Latitude in degrees [-90, 90]

    Returns:
        LonLat with longitude in [-180, 180)

    Raises:
        InvalidInput: If either value is not finite or latitude is out of range
    """
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidInput(f"Coordinates must be finite, got lon={lon}, lat={lat}")
    if lat < -90.0 or lat > 90.0:
        raise InvalidInput(f"Latitude must be within [-90, 90], got {lat}")
    return LonLat(wrap_longitude(lon), lat)


def to_polar(face: Point2) -> Polar:
    x, y = face
    return (math.hypot(x, y), math.atan2(y, x))


def to_face(polar: Polar) -> Point2:
    rho, gamma = polar
    return (rho * math.cos(gamma), rho * math.sin(gamma))


def face_to_ij(face: Point2) -> Point2:
    """Express a face point in the lattice basis."""
    return apply_mat2(get_pentagon_constants().basis_inverse, face)


def ij_to_face(ij: Point2) -> Point2:
    """Convert lattice coordinates back to a face point."""
    return apply_mat2(get_pentagon_constants().basis, ij)


def face_to_barycentric(p: Point2, triangle: Sequence[Point2]) -> Barycentric:
    """
    Barycentric coordinates of a face point within a planar triangle.

    Args:
        p: Face point
        triangle: Three face points (p1, p2, p3)

    Returns:
        Weights (u, v, w) summing to 1
    """
    (p1x, p1y), (p2x, p2y), (p3x, p3y) = triangle
    d31 = (p1x - p3x, p1y - p3y)
    d23 = (p3x - p2x, p3y - p2y)
    d3p = (p[0] - p3x, p[1] - p3y)

    det = d23[0] * d31[1] - d23[1] * d31[0]
    b0 = (d23[0] * d3p[1] - d23[1] * d3p[0]) / det
    b1 = (d31[0] * d3p[1] - d31[1] * d3p[0]) / det
    b2 = 1 - (b0 + b1)
    return (b0, b1, b2)


def barycentric_to_face(b: Barycentric, triangle: Sequence[Point2]) -> Point2:
    (p1x, p1y), (p2x, p2y), (p3x, p3y) = triangle
    return (
        b[0] * p1x + b[1] * p2x + b[2] * p3x,
        b[0] * p1y + b[1] * p2y + b[2] * p3y,
    )


def to_cartesian(spherical: Spherical) -> Vec3:
    theta, phi = spherical
    sin_phi = math.sin(phi)
    return (sin_phi * math.cos(theta), sin_phi * math.sin(theta), math.cos(phi))


def to_spherical(v: Vec3) -> Spherical:
    x, y, z = v
    theta = math.atan2(y, x)
    r = length(v)
    phi = math.acos(max(-1.0, min(1.0, z / r)))
    return (theta, phi)


def from_lon_lat(lonlat: LonLat) -> Spherical:
    """
    Convert geographic degrees to spherical angles on the authalic sphere.
    """
    theta = math.radians(lonlat[0] + LONGITUDE_OFFSET)
    geodetic_lat = math.radians(lonlat[1])
    phi = math.pi / 2 - geodetic_to_authalic(geodetic_lat)
    return (theta, phi)


def to_lon_lat(spherical: Spherical) -> LonLat:
    """Inverse of from_lon_lat."""
    theta, phi = spherical
    lon = math.degrees(theta) - LONGITUDE_OFFSET
    geodetic_lat = authalic_to_geodetic(math.pi / 2 - phi)
    return LonLat(lon, math.degrees(geodetic_lat))


def normalize_longitudes(ring: Sequence[LonLat]) -> List[LonLat]:
    """
    Unwrap longitudes so that a ring does not jump across the antimeridian.

    Longitudes are shifted by multiples of 360 to lie within 180 degrees of
    the ring's centre, which itself is placed in [-180, 180). A ring around
    a pole keeps the longitude of its first vertex as the centre.

    Args:
        ring: Boundary vertices

    Returns:
        New list of vertices with continuous longitudes
    """
    if not ring:
        return []

    cx = cy = cz = 0.0
    for lon, lat in ring:
        cx_i, cy_i, cz_i = to_cartesian((math.radians(lon), math.radians(90.0 - lat)))
        cx += cx_i
        cy += cy_i
        cz += cz_i

    norm = math.sqrt(cx * cx + cy * cy + cz * cz)
    center_lat = math.degrees(math.asin(max(-1.0, min(1.0, cz / norm)))) if norm > 0 else 0.0
    if abs(center_lat) > 89.99:
        center_lon = ring[0][0]
    else:
        center_lon = math.degrees(math.atan2(cy, cx))
    center_lon = wrap_longitude(center_lon)

    result = []
    for lon, lat in ring:
        while lon - center_lon > 180.0:
            lon -= 360.0
        while lon - center_lon < -180.0:
            lon += 360.0
        result.append(LonLat(lon, lat))
    return result


def round_half_away_from_zero(x: float) -> int:
    """
    Round to nearest integer, with ties going away from zero.

    Python's round() sends ties to the even neighbour, which would move
    points lying exactly on a quintant bisector.
    """
    if x >= 0:
        return int(math.floor(x + 0.5))
    return int(math.ceil(x - 0.5))
