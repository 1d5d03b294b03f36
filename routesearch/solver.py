import logging
import threading
from typing import NamedTuple, Optional

import numpy as np

from routesearch.errors import EmptyInstanceError, NotInitializedError
from routesearch.history import History, HistoryView
from routesearch.representation import MISSING_POLICIES, make_instance, tour_length
from routesearch.reporter import Reporter
from routesearch.shuffle import shuffle

logger = logging.getLogger(__name__)

SOURCES = ("all", "incumbent")
RECORDS = ("candidate", "incumbent")


class Config(NamedTuple):
    source: str
    record: str
    missing: str
    seed: Optional[int]


class SearchState(NamedTuple):
    incumbent_tour: tuple
    incumbent_length: float
    iteration_count: int
    history: HistoryView


class RandomRestartTSP:
    """
    Monte Carlo random restart search for the Euclidean TSP.

    Every step draws a completely new random tour and keeps it
    only if it is strictly shorter than the incumbent.
    The engine has no stopping criterion: it runs as long as someone calls step().

    Steps are serialized and each one is published as a single immutable
    SearchState, so the `state` property can be read from any thread.
    """

    def __init__(
        self,
        cities=None,
        source: str = "all",           # "all": shuffle every id, "incumbent": reshuffle the incumbent
        record: str = "candidate",     # history value: candidate length or incumbent length
        missing: str = "skip",         # tour evaluation policy for unknown ids
        seed: Optional[int] = None,
        rng=None,
    ):
        if source not in SOURCES:
            raise ValueError(f"source must be one of {SOURCES}, got {source!r}")
        if record not in RECORDS:
            raise ValueError(f"record must be one of {RECORDS}, got {record!r}")
        if missing not in MISSING_POLICIES:
            raise ValueError(f"missing must be one of {MISSING_POLICIES}, got {missing!r}")

        self.config = Config(source=source, record=record, missing=missing, seed=seed)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.cities = tuple(cities) if cities is not None else None
        self.instance = None
        self._history = None
        self._state = None
        self._lock = threading.Lock()

    def initialize(self, cities=None) -> SearchState:
        """
        Start a new search, discarding any previous state.

        If `cities` is omitted the cities given to the constructor
        (or to the previous initialize call) are used again.
        """
        with self._lock:
            cities = tuple(cities) if cities is not None else self.cities
            if not cities:
                raise EmptyInstanceError("Cannot initialize a search without cities.")

            instance = make_instance(cities)
            tour = tuple(shuffle(instance.ids, self.rng))
            length = tour_length(tour, instance, self.config.missing)

            history = History()
            history.append(0, length)

            self.cities = cities
            self.instance = instance
            self._history = history
            self._state = SearchState(tour, length, 0, history.view())

        logger.info("Initialized search over %d cities, initial length %.2f", len(cities), length)
        return self._state

    def step(self) -> SearchState:
        """Run one iteration of the search."""
        with self._lock:
            state = self._state
            if state is None:
                raise NotInitializedError("step() called before initialize().")

            n = state.iteration_count + 1
            if self.config.source == "all":
                base = self.instance.ids
            else:
                base = state.incumbent_tour

            candidate = tuple(shuffle(base, self.rng))
            candidate_length = tour_length(candidate, self.instance, self.config.missing)

            if candidate_length < state.incumbent_length:
                logger.debug(
                    "Iteration %d: improved %.2f -> %.2f", n, state.incumbent_length, candidate_length
                )
                tour, length = candidate, candidate_length
            else:
                tour, length = state.incumbent_tour, state.incumbent_length

            if self.config.record == "candidate":
                self._history.append(n, candidate_length)
            else:
                self._history.append(n, length)

            self._state = SearchState(tour, length, n, self._history.view())
            return self._state

    def run(self, num_iterations: int, reporter: Reporter = None) -> SearchState:
        """Run the search for a given number of iterations.

        Args:
            num_iterations: Number of iterations to run.
            reporter: Optional Reporter instance for logging. If None, a default
                      reporter will be created.
        """
        if reporter is None:
            reporter = Reporter()

        if self._state is None:
            self.initialize()

        reporter.start(self)
        try:
            reporter.log(self)

            for _ in range(num_iterations):
                self.step()
                reporter.log(self)
        finally:
            reporter.stop()
        return self._state

    @property
    def state(self) -> SearchState:
        """Return the current snapshot of the search."""
        state = self._state
        if state is None:
            raise NotInitializedError("The search has not been initialized.")
        return state

    @property
    def initialized(self) -> bool:
        return self._state is not None

    @property
    def num_cities(self) -> int:
        return len(self.cities) if self.cities is not None else 0

    @property
    def best_tour(self) -> tuple:
        return self.state.incumbent_tour

    @property
    def best_distance(self) -> float:
        return self.state.incumbent_length

    @property
    def iteration(self) -> int:
        return self.state.iteration_count

    @property
    def history(self) -> HistoryView:
        return self.state.history
