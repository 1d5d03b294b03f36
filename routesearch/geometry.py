import numpy as np
from numba import njit

"""
GEOMETRY:

Euclidean distance between cities.
Cities are anything with `x` and `y` attributes.
"""


@njit(cache=True)
def euclidean(x1, y1, x2, y2):
    dx = x1 - x2
    dy = y1 - y2
    return np.sqrt(dx * dx + dy * dy)


def distance(a, b) -> float:
    """
    Euclidean distance between two cities.
    """
    return float(euclidean(float(a.x), float(a.y), float(b.x), float(b.y)))
