import math
import os
import re

from routesearch.representation import City


def parse_id(token: str) -> int:
    """Parse a city id, accepting integral floats such as "1.0"."""
    try:
        return int(token)
    except ValueError:
        value = float(token)
        if not value.is_integer():
            raise ValueError(f"City id is not an integer: {token!r}")
        return int(value)


def parse_tsplib(text: str) -> list:
    """
    Parse the NODE_COORD_SECTION of a TSPLIB style listing.

    Handles:
        - "id x y" lines between NODE_COORD_SECTION and EOF
        - lowercase/uppercase markers and surrounding whitespace
    Ignores:
        - header keywords and anything outside the section
        - lines with fewer than three fields or non-numeric / non-finite values
    """
    cities = []
    reading = False

    for raw in text.splitlines():
        line = raw.strip()
        marker = line.upper()
        if marker == "NODE_COORD_SECTION":
            reading = True
            continue
        if marker == "EOF":
            reading = False
            continue
        if not reading:
            continue

        parts = re.split(r"\s+", line)
        if len(parts) < 3:
            continue

        try:
            city_id = parse_id(parts[0])
            x = float(parts[1])
            y = float(parts[2])
        except ValueError:
            continue
        if not (math.isfinite(x) and math.isfinite(y)):
            continue

        cities.append(City(city_id, x, y))

    return cities


def load_tsplib(path) -> list:
    """Load the cities of a TSPLIB file."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"TSP file not found: {path}")

    with open(path, "r") as f:
        return parse_tsplib(f.read())
