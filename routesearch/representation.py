import numpy as np
from numba import njit
from collections.abc import Mapping
from typing import NamedTuple, Sequence

from routesearch.errors import DuplicateCityError, InvalidCityError, MissingCityError
from routesearch.geometry import euclidean


"""
REPRESENTATION:

A city is an immutable (id, x, y) record; the id is the stable key used everywhere.
A tour is an ordered sequence of city ids that implicitly closes into a cycle.

Internally an instance keeps the ids and an (N, 2) coordinate array,
so tours can be converted to index arrays and evaluated with numba.
"""

MISSING_POLICIES = ("skip", "raise")


class City(NamedTuple):
    id: int
    x: float
    y: float


class Instance(NamedTuple):
    ids: tuple
    coords: np.ndarray
    index: dict


def make_instance(cities: Sequence[City]) -> Instance:
    """
    Build the array form of a collection of cities.

    Raises DuplicateCityError if two cities share an id
    and InvalidCityError if a coordinate is NaN or infinite.
    """
    index = {}
    duplicates = []
    for i, city in enumerate(cities):
        if city.id in index:
            duplicates.append(city.id)
        index[city.id] = i
    if duplicates:
        raise DuplicateCityError(duplicates)

    coords = np.empty((len(cities), 2), dtype=np.float64)
    for i, city in enumerate(cities):
        coords[i, 0] = city.x
        coords[i, 1] = city.y

    finite = np.isfinite(coords).all(axis=1)
    if not finite.all():
        raise InvalidCityError([cities[i].id for i in np.flatnonzero(~finite)])
    return Instance(ids=tuple(city.id for city in cities), coords=coords, index=index)


def to_indices(tour, index: Mapping[int, int]) -> np.ndarray:
    """
    Convert a tour of city ids to row indices in the coordinate array.
    Unknown ids are mapped to -1.
    """
    order = np.empty(len(tour), dtype=np.int64)
    for i, city_id in enumerate(tour):
        order[i] = index.get(city_id, -1)
    return order


@njit(cache=True)
def cycle_cost(order, coords):
    """
    Calculate the length of the closed cycle visiting `coords` rows in `order`.

    Edges touching a negative index are skipped.
    With a single entry the closing edge is a self loop of length 0.
    """
    n = order.shape[0]
    s = 0.0
    if n < 2:
        return s
    for i in range(n):
        a = order[i]
        b = order[(i + 1) % n]
        if a < 0 or b < 0:
            continue
        s += euclidean(coords[a, 0], coords[a, 1], coords[b, 0], coords[b, 1])
    return s


def tour_length(tour, cities, missing: str = "skip") -> float:
    """
    Calculate the total cyclic length of a tour.

    Args:
        tour: ordered sequence of city ids.
        cities: mapping id -> City, a sequence of City, or an Instance.
        missing: "skip" drops every edge that touches an unknown id,
                 "raise" raises MissingCityError instead.
    """
    if missing not in MISSING_POLICIES:
        raise ValueError(f"Unknown missing-city policy: {missing!r}")

    if isinstance(cities, Instance):
        instance = cities
    elif isinstance(cities, Mapping):
        instance = make_instance(list(cities.values()))
    else:
        instance = make_instance(cities)

    order = to_indices(tour, instance.index)
    if missing == "raise" and np.any(order < 0):
        raise MissingCityError(
            [city_id for city_id, i in zip(tour, order) if i < 0]
        )
    return float(cycle_cost(order, instance.coords))


def is_valid_tour(tour, ids) -> bool:
    """
    Check that a tour visits every id in `ids` exactly once.
    """
    ids = list(ids)
    return len(tour) == len(ids) and sorted(tour) == sorted(ids)
