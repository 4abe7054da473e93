"""
pytest configuration and shared fixtures.
"""

import numpy as np
import pytest

from pygaussbayes.linear import (
    Diagonal,
    GaussianBayesNet,
    GaussianConditional,
)


def make_random_bayes_net(rng, dims=(2, 1, 3, 2), with_models=True):
    """
    Random topologically ordered net over x0..x{k-1} in elimination order.

    Each conditional gets a well-conditioned upper triangular R with a
    positive diagonal, its successor as a parent, and some later
    variables at random. Every other conditional carries a noise model.
    """
    keys = [f"x{i}" for i in range(len(dims))]
    conditionals = []
    for i, (key, dim) in enumerate(zip(keys, dims)):
        R = np.triu(rng.normal(size=(dim, dim)))
        R[np.diag_indices(dim)] = rng.uniform(1.0, 3.0, size=dim)
        parents = []
        for j in range(i + 1, len(keys)):
            if j == i + 1 or rng.random() < 0.5:
                parents.append((keys[j], rng.normal(size=(dim, dims[j]))))
        d = rng.normal(size=dim)
        model = None
        if with_models and i % 2 == 0:
            model = Diagonal.from_sigmas(rng.uniform(0.5, 2.0, size=dim))
        conditionals.append(
            GaussianConditional([(key, dim)], R, parents=parents, d=d, model=model)
        )
    return GaussianBayesNet(conditionals)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def chain_net():
    """
    Two-variable chain, eliminated x1 then x2.

        x1 + x2 = 3
        2 x2    = 4      ->  x2 = 2, x1 = 1
    """
    x1_given_x2 = GaussianConditional.from_arrays('x1', [[1.0]], [3.0], parents={'x2': [[1.0]]})
    x2 = GaussianConditional.from_arrays('x2', [[2.0]], [4.0])
    return GaussianBayesNet([x1_given_x2, x2])


@pytest.fixture
def random_net(rng):
    """Random 4-variable net with mixed dims and noise models."""
    return make_random_bayes_net(rng)


@pytest.fixture
def make_net():
    """Factory for random nets: make_net(seed, dims=..., with_models=...)."""
    def _make(seed, **kwargs):
        return make_random_bayes_net(np.random.default_rng(seed), **kwargs)
    return _make
