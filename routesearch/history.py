from collections.abc import Sequence
from typing import NamedTuple


class HistoryRecord(NamedTuple):
    iteration: int
    distance: float


class HistoryView(Sequence):
    """
    Read-only view on the first `count` entries of an append-only log.

    Since the log only ever grows, a view taken at some point in time
    keeps showing exactly the entries that existed then.
    """

    def __init__(self, entries, count):
        self._entries = entries
        self._count = count

    def __len__(self):
        return self._count

    def __getitem__(self, key):
        positions = range(self._count)[key]
        if isinstance(positions, range):
            return tuple(self._entries[i] for i in positions)
        return self._entries[positions]

    def __iter__(self):
        for i in range(self._count):
            yield self._entries[i]

    def __eq__(self, other):
        if isinstance(other, Sequence):
            return len(self) == len(other) and all(a == b for a, b in zip(self, other))
        return NotImplemented

    def __repr__(self):
        return f"HistoryView({list(self)!r})"

    @property
    def iterations(self) -> list:
        return [record.iteration for record in self]

    @property
    def distances(self) -> list:
        return [record.distance for record in self]


class History:
    """Append-only log of (iteration, distance) records."""

    def __init__(self):
        self._entries = []

    def __len__(self):
        return len(self._entries)

    def append(self, iteration: int, distance: float):
        if self._entries and iteration != self._entries[-1].iteration + 1:
            raise ValueError(
                f"History iteration {iteration} does not follow {self._entries[-1].iteration}"
            )
        self._entries.append(HistoryRecord(iteration, float(distance)))

    def view(self) -> HistoryView:
        return HistoryView(self._entries, len(self._entries))
