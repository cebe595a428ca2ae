from typing import Callable, Tuple

import numpy as np

from .metrics import EuclideanMetric


class EuclideanHamiltonian:
    """Separable Hamiltonian with Euclidean-Gaussian kinetic energy

    .. math::

        H(q, p) = K(p) + V(q), \\quad K(p) = \\frac{1}{2} p^T M^{-1} p

    where :math:`V(q)` is the potential energy, i.e. the negative log density of
    the target, and :math:`M` the mass matrix. The momentum is distributed as
    :math:`p \\sim \\mathcal{N}(0, M)`.

    The metric is a value: assigning :attr:`inverse_mass_matrix` builds a new
    metric of the same kind and replaces the current one.

    Args:
        potential: Function which evaluate the potential energy and the gradient at a
            given position
        metric: Unit, diagonal or dense Euclidean metric

    References:
        Betancourt, M., 2017. A conceptual introduction to Hamiltonian Monte Carlo.
        arXiv preprint arXiv:1701.02434.
    """

    def __init__(self, potential: Callable, metric: EuclideanMetric):
        if not isinstance(metric, EuclideanMetric):
            raise TypeError("`metric` must be an EuclideanMetric")

        self._V_dV = potential
        self._metric = metric

    def V(self, q: np.ndarray) -> float:
        """Potential energy at the position `q`"""
        return self._V_dV(q)[0]

    def dV(self, q: np.ndarray) -> np.ndarray:
        """Gradient of the potential energy at the position `q`"""
        return self._V_dV(q)[1]

    def V_and_dV(self, q: np.ndarray) -> Tuple[float, np.ndarray]:
        """Potential energy and its gradient at the position `q`"""
        return self._V_dV(q)

    def K(self, p: np.ndarray) -> float:
        """Kinetic energy at the momentum `p`"""
        return self._metric.kinetic_energy(momentum=p)

    def dK(self, p: np.ndarray) -> np.ndarray:
        """Gradient of the kinetic energy at the momentum `p`"""
        return self._metric.gradient_kinetic_energy(momentum=p)

    def sample_p(self, rng=None) -> np.ndarray:
        """Sample momentum

        Args:
            rng: numpy Generator or RandomState, the global numpy random state if None
        """
        return self._metric.draw_momentum(rng)

    def H(self, q: np.ndarray, p: np.ndarray) -> float:
        """Energy in phase space"""
        return self.K(p) + self.V(q)

    @property
    def metric(self) -> EuclideanMetric:
        return self._metric

    @metric.setter
    def metric(self, metric: EuclideanMetric):
        if not isinstance(metric, EuclideanMetric):
            raise TypeError("`metric` must be an EuclideanMetric")
        self._metric = metric

    @property
    def inverse_mass_matrix(self):
        """Inverse of the mass matrix `M`"""
        return self._metric.get_inverse_metric()

    @inverse_mass_matrix.setter
    def inverse_mass_matrix(self, inverse_metric):
        self._metric = self._metric.with_inverse_metric(inverse_metric)
