"""
Gnomonic projection between a face-centred sphere patch and its tangent plane.

Spherical coordinates here are ``(theta, phi)`` measured around the face
axis, and polar coordinates are ``(rho, gamma)`` on the tangent plane.
"""

import math
from typing import Tuple

Spherical = Tuple[float, float]
Polar = Tuple[float, float]


def project_gnomonic(spherical: Spherical) -> Polar:
    """Project (theta, phi) onto the tangent plane as (rho, gamma)."""
    theta, phi = spherical
    return (math.tan(phi), theta)


def unproject_gnomonic(polar: Polar) -> Spherical:
    """Inverse of project_gnomonic."""
    rho, gamma = polar
    return (gamma, math.atan(rho))
