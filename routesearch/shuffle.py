import numpy as np

"""
PERMUTATION SAMPLER:

Uniform random permutations via the Fisher-Yates shuffle.
The random source is injected so runs can be reproduced:
any object with numpy Generator.integers(low, high) semantics (high exclusive) works.
"""


def shuffle(sequence, rng=None) -> list:
    """
    Return a new list with the elements of `sequence` in uniformly random order.

    The input is not modified.
    """
    if rng is None:
        rng = np.random.default_rng()

    result = list(sequence)
    for i in range(len(result) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        result[i], result[j] = result[j], result[i]
    return result
