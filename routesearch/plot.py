"""
Display helpers: a route diagram, a textual route summary and the convergence chart.
"""

from collections.abc import Mapping

import matplotlib.pyplot as plt
import pandas as pd


def format_route(tour) -> str:
    """Render a tour as "1 -> 2 -> 3"."""
    if len(tour) == 0:
        return "no data"
    return " -> ".join(str(city_id) for city_id in tour)


def history_frame(history) -> pd.DataFrame:
    """Convert a history of (iteration, distance) records to a DataFrame."""
    return pd.DataFrame(
        [(record.iteration, record.distance) for record in history],
        columns=["iteration", "distance"],
    )


def plot_route(ax, cities, tour=None, show_path: bool = True):
    """
    Draw the cities as points and, if given, the closed tour through them.
    Tour ids without a matching city are left out of the polyline.
    """
    if isinstance(cities, Mapping):
        by_id = dict(cities)
    else:
        by_id = {city.id: city for city in cities}

    ax.scatter(
        [city.x for city in by_id.values()],
        [city.y for city in by_id.values()],
        c="red", s=20, zorder=3,
    )

    if show_path and tour is not None and len(tour) > 0:
        closed = [by_id[city_id] for city_id in list(tour) + [tour[0]] if city_id in by_id]
        ax.plot([city.x for city in closed], [city.y for city in closed], "b-", linewidth=2, zorder=1)

    ax.set_aspect("equal", adjustable="datalim")
    ax.set_title("Route")
    return ax


def plot_history(ax, history):
    """Distance against iteration."""
    data = history_frame(history)
    ax.plot(data["iteration"], data["distance"], label="Distance")
    ax.set_xlabel("Iteration")
    ax.set_ylabel("Distance")
    ax.set_title("Distance over Iterations")
    return ax


def plot_state(cities, state, figsize=(12, 5)):
    """Route diagram and convergence chart of a search snapshot side by side."""
    fig, (route_ax, history_ax) = plt.subplots(1, 2, figsize=figsize)
    plot_route(route_ax, cities, state.incumbent_tour)
    route_ax.set_title(f"Best route: {state.incumbent_length:.2f}")
    plot_history(history_ax, state.history)
    return fig
