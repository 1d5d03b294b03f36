import logging
import sys

from rich.logging import RichHandler

from routesearch.plot import format_route
from routesearch.representation import is_valid_tour
from routesearch.solver import RandomRestartTSP
from routesearch.tsplib import load_tsplib

logging.basicConfig(level=logging.INFO, format="%(message)s", handlers=[RichHandler()])

path = sys.argv[1] if len(sys.argv) > 1 else "tours/sample10.tsp"
iterations = int(sys.argv[2]) if len(sys.argv) > 2 else 1000

cities = load_tsplib(path)
search = RandomRestartTSP(cities, seed=0)
search.run(iterations)

assert is_valid_tour(search.best_tour, [city.id for city in cities]), "Best tour is invalid!"
print(f"Best distance: {search.best_distance:.2f}")
print(format_route(search.best_tour))
