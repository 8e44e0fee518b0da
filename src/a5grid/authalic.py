"""
Authalic latitude conversion.

Maps geodetic latitude on the WGS84 ellipsoid to authalic latitude on the
sphere of equal surface area, and back. Equal steps of authalic latitude
enclose equal areas, so applying it before any face projection keeps the
whole grid equal-area.

The series coefficients come from Karney, "On auxiliary latitudes"
(arXiv:2212.05818), evaluated with Clenshaw summation to order 6.
"""

import math
from typing import Sequence

GEODETIC_TO_AUTHALIC = (
    -2.2392098386786394e-03,
    2.1308606513250217e-06,
    -2.5592576864212742e-09,
    3.3701965267802837e-12,
    -4.6675453126112487e-15,
    6.6749287038481596e-18,
)

AUTHALIC_TO_GEODETIC = (
    2.2392089963541657e-03,
    2.8831978048607556e-06,
    5.0862207399726603e-09,
    1.0201812377816100e-11,
    2.1912872306767718e-14,
    4.9284235482523806e-17,
)


def _apply_coefficients(phi: float, c: Sequence[float]) -> float:
    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    x = 2 * (cos_phi - sin_phi) * (cos_phi + sin_phi)  # 2 cos(2 phi)

    u0 = x * c[5] + c[4]
    u1 = x * u0 + c[3]
    u0 = x * u1 - u0 + c[2]
    u1 = x * u0 - u1 + c[1]
    u0 = x * u1 - u0 + c[0]

    return phi + 2 * sin_phi * cos_phi * u0


def geodetic_to_authalic(phi: float) -> float:
    """
    Convert geodetic latitude to authalic latitude.

    Args:
        phi: Geodetic latitude in radians

    Returns:
        Authalic latitude in radians
    """
    return _apply_coefficients(phi, GEODETIC_TO_AUTHALIC)


def authalic_to_geodetic(phi: float) -> float:
    """
    Convert authalic latitude to geodetic latitude.

    Args:
        phi: Authalic latitude in radians

    Returns:
        Geodetic latitude in radians
    """
    return _apply_coefficients(phi, AUTHALIC_TO_GEODETIC)
