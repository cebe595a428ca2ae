import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from pymass.mcmc.factory import build_preconditioner, metric_registry
from pymass.mcmc.hamiltonian import EuclideanHamiltonian
from pymass.mcmc.metrics import DenseEuclideanMetric, DiagEuclideanMetric, UnitEuclideanMetric


@pytest.fixture
def mvn_data(n_dim=3):
    """Multivariate Normal distribution data"""
    rng = np.random.RandomState(seed=1234)
    rnd_eigvec, _ = np.linalg.qr(rng.normal(size=(n_dim, n_dim)))
    rnd_eigval = np.exp(rng.normal(size=n_dim))
    cov = (rnd_eigvec * rnd_eigval) @ rnd_eigvec.T
    mean = rng.normal(size=n_dim)
    return mean, cov, n_dim, rng


@pytest.fixture
def potential(mvn_data):
    mean, cov, _, _ = mvn_data
    prec = np.linalg.inv(cov)

    def V_dV(q):
        e = q - mean
        return 0.5 * e @ prec @ e, prec @ e

    return V_dV


def test_metric_type_is_checked(potential):
    with pytest.raises(TypeError):
        EuclideanHamiltonian(potential, np.identity(3))


@pytest.mark.parametrize("metric_class", [UnitEuclideanMetric, DiagEuclideanMetric, DenseEuclideanMetric])
def test_energy(potential, mvn_data, metric_class):
    mean, _, n_dim, rng = mvn_data
    hamiltonian = EuclideanHamiltonian(potential, metric_class.identity(n_dim))
    q, p = rng.normal(size=n_dim), rng.normal(size=n_dim)

    assert_allclose(hamiltonian.V(mean), 0.0)
    assert_allclose(hamiltonian.dV(mean), np.zeros(n_dim))
    assert_allclose(hamiltonian.K(p), 0.5 * p @ p)
    assert_allclose(hamiltonian.dK(p), p)
    assert_allclose(hamiltonian.H(q, p), hamiltonian.V_and_dV(q)[0] + 0.5 * p @ p)
    assert hamiltonian.sample_p(np.random.default_rng(0)).shape == (n_dim,)


def test_substituting_inverse_mass_matrix(potential, mvn_data):
    _, cov, n_dim, _ = mvn_data
    metric = DenseEuclideanMetric.identity(n_dim)
    hamiltonian = EuclideanHamiltonian(potential, metric)
    hamiltonian.inverse_mass_matrix = cov

    assert hamiltonian.metric is not metric
    assert isinstance(hamiltonian.metric, DenseEuclideanMetric)
    assert_array_equal(metric.get_inverse_metric(), np.identity(n_dim))
    assert_array_equal(hamiltonian.inverse_mass_matrix, cov)

    p = np.ones(n_dim)
    assert_allclose(hamiltonian.K(p), 0.5 * p @ cov @ p)


@pytest.mark.parametrize("metric", ["diag", "dense"])
def test_adapted_metric_matches_target(potential, mvn_data, metric):
    """The adapted inverse mass matrix approaches the covariance of the target"""
    mean, cov, n_dim, rng = mvn_data
    hamiltonian = EuclideanHamiltonian(potential, metric_registry[metric][0].identity(n_dim))
    preconditioner = build_preconditioner(hamiltonian.metric)

    for sample in rng.multivariate_normal(mean, cov, size=20_000):
        preconditioner.adapt(sample, 1.0)
    hamiltonian.inverse_mass_matrix = preconditioner.get_inverse_metric()

    expected = cov if metric == "dense" else cov.diagonal()
    assert_allclose(hamiltonian.inverse_mass_matrix, expected, rtol=0.05, atol=0.05 * cov.diagonal().max())
