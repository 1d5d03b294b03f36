import logging
import sys
import time

from rich.console import Console
from rich.logging import RichHandler

from routesearch.plot import format_route
from routesearch.scheduler import Ticker
from routesearch.solver import RandomRestartTSP
from routesearch.tsplib import load_tsplib

logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler()])
console = Console()

path = sys.argv[1] if len(sys.argv) > 1 else "tours/sample10.tsp"
duration = float(sys.argv[2]) if len(sys.argv) > 2 else 10.0
period = float(sys.argv[3]) if len(sys.argv) > 3 else 1.0

search = RandomRestartTSP(load_tsplib(path))
search.initialize()

with Ticker(search.step, period=period):
    time.sleep(duration)

state = search.state
console.print(f"[cyan]Iterations:[/cyan] {state.iteration_count}")
console.print(f"[green]Best distance:[/green] {state.incumbent_length:.2f}")
console.print(format_route(state.incumbent_tour))
