import copy
import threading

import numpy as np
import pytest

from routesearch.errors import DuplicateCityError, EmptyInstanceError, InvalidCityError, NotInitializedError
from routesearch.representation import City, is_valid_tour, tour_length
from routesearch.shuffle import shuffle
from routesearch.solver import RandomRestartTSP


def random_cities(n, seed=0):
    rng = np.random.default_rng(seed)
    return [City(i + 1, float(x), float(y)) for i, (x, y) in enumerate(rng.uniform(0, 100, size=(n, 2)))]


class FailingRng:
    """Delegates to a real generator until `fail` is set."""

    def __init__(self, seed=0):
        self.rng = np.random.default_rng(seed)
        self.fail = False

    def integers(self, low, high):
        if self.fail:
            raise RuntimeError("random source unavailable")
        return self.rng.integers(low, high)


def test_initialize():
    cities = random_cities(8)
    search = RandomRestartTSP(cities, seed=1)
    state = search.initialize()

    assert state.iteration_count == 0
    assert is_valid_tour(state.incumbent_tour, [c.id for c in cities])
    assert state.incumbent_length == pytest.approx(tour_length(state.incumbent_tour, cities))
    assert list(state.history) == [(0, state.incumbent_length)]


def test_initialize_empty_instance():
    with pytest.raises(EmptyInstanceError):
        RandomRestartTSP().initialize([])
    with pytest.raises(EmptyInstanceError):
        RandomRestartTSP().initialize()


def test_initialize_single_city():
    search = RandomRestartTSP([City(7, 1.0, 2.0)])
    state = search.initialize()
    assert state.incumbent_tour == (7,)
    assert state.incumbent_length == 0.0

    state = search.step()
    assert state.incumbent_length == 0.0
    assert state.history.distances == [0.0, 0.0]


def test_initialize_duplicate_ids():
    with pytest.raises(DuplicateCityError):
        RandomRestartTSP([City(1, 0, 0), City(1, 1, 1)]).initialize()


def test_step_before_initialize():
    search = RandomRestartTSP(random_cities(4))
    with pytest.raises(NotInitializedError):
        search.step()
    with pytest.raises(NotInitializedError):
        search.state
    assert not search.initialized


@pytest.mark.parametrize("source", ["all", "incumbent"])
@pytest.mark.parametrize("record", ["candidate", "incumbent"])
def test_history_complete_and_incumbent_monotonic(source, record):
    cities = random_cities(9)
    ids = [c.id for c in cities]
    search = RandomRestartTSP(cities, source=source, record=record, seed=3)
    search.initialize()

    lengths = [search.best_distance]
    for _ in range(50):
        state = search.step()
        assert is_valid_tour(state.incumbent_tour, ids)
        lengths.append(state.incumbent_length)

    assert all(b <= a for a, b in zip(lengths, lengths[1:]))
    assert search.history.iterations == list(range(51))
    assert search.iteration == 50
    assert search.best_distance == pytest.approx(tour_length(search.best_tour, cities))


def test_record_candidate_vs_incumbent():
    cities = random_cities(10)
    candidate = RandomRestartTSP(cities, record="candidate", seed=5)
    incumbent = RandomRestartTSP(cities, record="incumbent", seed=5)
    candidate.initialize()
    incumbent.initialize()
    for _ in range(30):
        candidate.step()
        incumbent.step()

    # the same seed gives the same search, only the recorded values differ
    assert candidate.best_tour == incumbent.best_tour
    best_so_far = np.minimum.accumulate(candidate.history.distances)
    np.testing.assert_allclose(incumbent.history.distances, best_so_far)
    assert min(candidate.history.distances) == pytest.approx(candidate.best_distance)


def test_incumbent_only_replaced_by_strictly_shorter():
    cities = random_cities(6)
    search = RandomRestartTSP(cities, seed=11)
    search.initialize()
    for _ in range(40):
        before = search.state
        after = search.step()
        sampled = after.history[-1].distance
        if sampled < before.incumbent_length:
            assert after.incumbent_length == sampled
        else:
            assert after.incumbent_tour == before.incumbent_tour
            assert after.incumbent_length == before.incumbent_length


def test_reinitialize_resets_state():
    search = RandomRestartTSP(random_cities(5), seed=2)
    search.initialize()
    for _ in range(10):
        search.step()
    old = search.state

    other = random_cities(7, seed=9)
    state = search.initialize(other)
    assert state.iteration_count == 0
    assert len(state.history) == 1
    assert is_valid_tour(state.incumbent_tour, [c.id for c in other])
    # old snapshots are untouched
    assert len(old.history) == 11


def test_deterministic_under_seed():
    cities = random_cities(12)

    def run(seed):
        search = RandomRestartTSP(cities, seed=seed)
        search.initialize()
        for _ in range(25):
            search.step()
        return list(search.history), search.best_tour

    assert run(4) == run(4)


def test_failed_step_is_not_committed():
    rng = FailingRng()
    search = RandomRestartTSP(random_cities(5), rng=rng)
    search.initialize()
    search.step()
    before = search.state

    rng.fail = True
    with pytest.raises(RuntimeError):
        search.step()
    assert search.state is before
    assert len(search.history) == 2

    rng.fail = False
    assert search.step().iteration_count == 2
    assert search.history.iterations == [0, 1, 2]


def test_snapshot_is_stable_while_stepping():
    search = RandomRestartTSP(random_cities(5), seed=0)
    search.initialize()
    snapshot = search.state
    for _ in range(5):
        search.step()
    assert snapshot.iteration_count == 0
    assert len(snapshot.history) == 1


def test_concurrent_steps_are_sequential():
    search = RandomRestartTSP(random_cities(6), seed=0)
    search.initialize()

    def worker():
        for _ in range(50):
            search.step()

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert search.iteration == 200
    assert search.history.iterations == list(range(201))


def test_invalid_options():
    with pytest.raises(ValueError):
        RandomRestartTSP(source="best")
    with pytest.raises(ValueError):
        RandomRestartTSP(record="both")
    with pytest.raises(ValueError):
        RandomRestartTSP(missing="ignore")


def test_run_with_reporter(tmp_path):
    from routesearch.reporter import Reporter

    search = RandomRestartTSP(random_cities(6), seed=0)
    state = search.run(5, reporter=Reporter(output_dir=tmp_path, filename="run.csv", quiet=True))
    assert state.iteration_count == 5
    assert (tmp_path / "run.csv").exists()


class FirstIndexRng:
    """Always swaps with position 0, so every shuffle is a rotation to the left."""

    def integers(self, low, high):
        return low


def recording_shuffle(monkeypatch):
    from routesearch import solver

    bases = []
    real_shuffle = solver.shuffle

    def record(sequence, rng=None):
        bases.append(tuple(sequence))
        return real_shuffle(sequence, rng)

    monkeypatch.setattr(solver, "shuffle", record)
    return bases


def test_initial_tour_is_shuffled(monkeypatch):
    bases = recording_shuffle(monkeypatch)
    cities = random_cities(4)
    search = RandomRestartTSP(cities, rng=FirstIndexRng())
    state = search.initialize()

    assert bases == [(1, 2, 3, 4)]
    assert state.incumbent_tour == tuple(shuffle([1, 2, 3, 4], FirstIndexRng()))
    assert state.incumbent_tour == (2, 3, 4, 1)


@pytest.mark.parametrize("source, expected_base", [
    ("all", (1, 2, 3, 4, 5)),
    ("incumbent", (2, 3, 4, 5, 1)),
])
def test_candidate_source(monkeypatch, source, expected_base):
    bases = recording_shuffle(monkeypatch)
    search = RandomRestartTSP(random_cities(5), source=source, rng=FirstIndexRng())
    search.initialize()
    assert search.best_tour == (2, 3, 4, 5, 1)

    search.step()
    assert bases[1] == expected_base


def test_incumbent_source_reshuffles_incumbent():
    cities = random_cities(8)
    rng = np.random.default_rng(21)
    search = RandomRestartTSP(cities, source="incumbent", rng=rng)
    incumbent = search.initialize().incumbent_tour

    twin = copy.deepcopy(rng)
    expected = shuffle(incumbent, twin)
    state = search.step()
    assert state.history[-1].distance == pytest.approx(tour_length(expected, cities))


def test_initialize_non_finite_city():
    search = RandomRestartTSP([City(1, 0.0, 0.0), City(2, float("nan"), 0.0), City(3, 3.0, 4.0)])
    with pytest.raises(InvalidCityError):
        search.initialize()
    assert not search.initialized
