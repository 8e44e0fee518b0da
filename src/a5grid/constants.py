"""
Geometric constants of the dodecahedron used throughout the grid.
"""

import math

# Golden ratio, (1 + sqrt(5)) / 2
PHI = 1.618033988749895

TWO_PI = 2 * math.pi
TWO_PI_OVER_5 = 2 * math.pi / 5
PI_OVER_5 = math.pi / 5
PI_OVER_10 = math.pi / 10

# Angle between adjacent faces, 2 * atan(phi)
DIHEDRAL_ANGLE = 2.0344439357957027

# pi - DIHEDRAL_ANGLE
INTERHEDRAL_ANGLE = 1.1071487177940904

# -pi / 2 + acos(-1 / sqrt(3 - phi))
FACE_EDGE_ANGLE = 1.0172219678978514

# Face centre to edge midpoint, phi - 1
DISTANCE_TO_EDGE = 0.6180339887498949

# Face centre to vertex, 3 - sqrt(5)
DISTANCE_TO_VERTEX = 0.7639320225002102

R_INSCRIBED = 1.0
R_MIDEDGE = 1.1755705045849463  # sqrt(3 - phi)
R_CIRCUMSCRIBED = 1.2584085723648188  # sqrt(3) * R_MIDEDGE / phi
