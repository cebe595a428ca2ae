"""Euclidean metrics, i.e. inverse mass matrices of the Gaussian kinetic energy

A metric is a value: it is never modified after construction. Adapting the mass
matrix means building a new metric with :meth:`EuclideanMetric.with_inverse_metric`.
"""
import warnings

import numpy as np
from scipy.linalg import LinAlgError
from typing_extensions import Self

from ..utils.math import is_symmetric, solve_upper, upper_cholesky
from ..utils.misc import string_diag
from .exceptions import NotPositiveDefiniteError

__ALL__ = ["EuclideanMetric", "UnitEuclideanMetric", "DiagEuclideanMetric", "DenseEuclideanMetric"]


def _frozen_copy(array) -> np.ndarray:
    array = np.array(array, copy=True)
    if not np.issubdtype(array.dtype, np.floating):
        array = array.astype(np.float64)
    array.setflags(write=False)
    return array


def _standard_normal(rng, dim: int, dtype: np.dtype) -> np.ndarray:
    if rng is None:
        rng = np.random
    return rng.standard_normal(dim).astype(dtype, copy=False)


class EuclideanMetric:
    """Abstract class for Euclidean-Gaussian kinetic energy metric"""

    @classmethod
    def identity(cls, dim: int, dtype=np.float64) -> Self:
        """Identity metric of dimension `dim`"""
        raise NotImplementedError

    @property
    def dim(self) -> int:
        raise NotImplementedError

    @property
    def dtype(self) -> np.dtype:
        raise NotImplementedError

    def __len__(self):
        return self.dim

    def __str__(self):
        return string_diag(self._diagonal())

    def __repr__(self):
        return f"{type(self).__name__}({self})"

    def _diagonal(self) -> np.ndarray:
        raise NotImplementedError

    def get_inverse_metric(self):
        """Return the inverse of the metric"""
        raise NotImplementedError

    def with_inverse_metric(self, inverse_metric) -> Self:
        """New metric of the same kind built from `inverse_metric`"""
        raise NotImplementedError

    def resized(self, dim: int) -> Self:
        """New identity metric of the same kind and dtype with dimension `dim`"""
        return type(self).identity(dim, self.dtype)

    def kinetic_energy(self, momentum: np.ndarray) -> float:
        """Evaluate the kinetic energy"""
        raise NotImplementedError

    def gradient_kinetic_energy(self, momentum: np.ndarray) -> np.ndarray:
        """Evaluate the gradient of the kinetic energy"""
        raise NotImplementedError

    def draw_momentum(self, rng=None) -> np.ndarray:
        """Draw momentum from Normal(0, M)

        Args:
            rng: numpy Generator or RandomState, the global numpy random state if None
        """
        raise NotImplementedError


class UnitEuclideanMetric(EuclideanMetric):
    """The metric is the identity matrix

    Args:
        dim: Dimension of the momentum
        dtype: Floating point type of the momentum
    """

    def __init__(self, dim: int, dtype=np.float64):
        if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)):
            raise TypeError("`dim` must be an integer")
        if dim < 1:
            raise ValueError(f"`dim` must be strictly positive, got {dim}")
        self._dim = int(dim)
        self._dtype = np.dtype(dtype)

    @classmethod
    def identity(cls, dim: int, dtype=np.float64) -> Self:
        return cls(dim, dtype)

    @property
    def dim(self) -> int:
        return self._dim

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def _diagonal(self) -> np.ndarray:
        return np.ones(self._dim, dtype=self._dtype)

    def get_inverse_metric(self):
        return self._dtype.type(1.0)

    def with_inverse_metric(self, inverse_metric=None) -> Self:
        """The unit metric has no free value: the same identity metric is returned"""
        if inverse_metric is not None and not np.isscalar(inverse_metric):
            raise TypeError("`inverse_metric` must be None or a scalar for the unit metric")
        return type(self)(self._dim, self._dtype)

    def kinetic_energy(self, momentum: np.ndarray) -> float:
        return 0.5 * momentum @ momentum

    def gradient_kinetic_energy(self, momentum: np.ndarray) -> np.ndarray:
        return np.array(momentum, dtype=self._dtype, copy=True)

    def draw_momentum(self, rng=None) -> np.ndarray:
        return _standard_normal(rng, self._dim, self._dtype)


class DiagEuclideanMetric(EuclideanMetric):
    """The metric is a diagonal matrix

    Args:
        inverse_metric: Inverse of the metric diagonal elements
    """

    def __init__(self, inverse_metric: np.ndarray):
        inverse_metric = _frozen_copy(inverse_metric)

        if not inverse_metric.ndim == 1:
            raise ValueError("`inverse_metric` must be 1-dimensional")

        if not np.all(inverse_metric > 0.0):
            raise NotPositiveDefiniteError(
                "matrix not positive definite: all `inverse_metric` elements must be positive"
            )

        self._inv_metric = inverse_metric
        self._sqrt_inv_metric = np.sqrt(inverse_metric)
        self._sqrt_inv_metric.setflags(write=False)

    @classmethod
    def identity(cls, dim: int, dtype=np.float64) -> Self:
        return cls(np.ones(dim, dtype=dtype))

    @property
    def dim(self) -> int:
        return self._inv_metric.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self._inv_metric.dtype

    @property
    def sqrt_inverse_metric(self) -> np.ndarray:
        """Elementwise square root of the inverse of the metric"""
        return self._sqrt_inv_metric

    def _diagonal(self) -> np.ndarray:
        return self._inv_metric

    def get_inverse_metric(self) -> np.ndarray:
        """Get the inverse of the metric

        Returns:
            Inverse of the metric
        """
        return self._inv_metric

    def with_inverse_metric(self, inverse_metric: np.ndarray) -> Self:
        return type(self)(inverse_metric)

    def kinetic_energy(self, momentum: np.ndarray) -> float:
        """Evaluate the kinetic energy at `momentum`"""
        return 0.5 * (self._inv_metric * momentum) @ momentum

    def gradient_kinetic_energy(self, momentum: np.ndarray) -> np.ndarray:
        """Evaluate the gradient of the kinetic energy at `momentum`"""
        return self._inv_metric * momentum

    def draw_momentum(self, rng=None) -> np.ndarray:
        r = _standard_normal(rng, self.dim, self.dtype)
        r /= self._sqrt_inv_metric
        return r


class DenseEuclideanMetric(EuclideanMetric):
    """The metric is a dense matrix

    The upper Cholesky factor U of the inverse metric, with M⁻¹ = Uᵀ U, is computed
    at construction. Momentum is drawn by solving U p = z with z standard normal, so
    that p ~ Normal(0, M).

    Args:
        inverse_metric: Inverse dense mass matrix
    """

    def __init__(self, inverse_metric: np.ndarray):
        inverse_metric = _frozen_copy(inverse_metric)

        if not inverse_metric.ndim == 2:
            raise ValueError("`inverse_metric` must be 2-dimensional")

        if inverse_metric.shape[0] != inverse_metric.shape[1]:
            raise ValueError("`inverse_metric` must be a square matrix")

        if not is_symmetric(inverse_metric):
            warnings.warn(
                "`inverse_metric` is not symmetric, only its upper triangle is used"
            )

        try:
            chol = upper_cholesky(inverse_metric)
        except LinAlgError as err:
            raise NotPositiveDefiniteError("matrix not positive definite") from err

        chol.setflags(write=False)
        self._inv_metric = inverse_metric
        self._chol_inv_metric = chol

    @classmethod
    def identity(cls, dim: int, dtype=np.float64) -> Self:
        return cls(np.identity(dim, dtype=dtype))

    @property
    def dim(self) -> int:
        return self._inv_metric.shape[0]

    @property
    def dtype(self) -> np.dtype:
        return self._inv_metric.dtype

    @property
    def chol_inverse_metric(self) -> np.ndarray:
        """Upper Cholesky factor of the inverse of the metric"""
        return self._chol_inv_metric

    def _diagonal(self) -> np.ndarray:
        return self._inv_metric.diagonal()

    def get_inverse_metric(self) -> np.ndarray:
        """Get the inverse of the metric

        Returns:
            Inverse of the metric
        """
        return self._inv_metric

    def with_inverse_metric(self, inverse_metric: np.ndarray) -> Self:
        return type(self)(inverse_metric)

    def kinetic_energy(self, momentum: np.ndarray) -> float:
        """Evaluate the kinetic energy at `momentum`"""
        return 0.5 * momentum @ self._inv_metric @ momentum

    def gradient_kinetic_energy(self, momentum: np.ndarray) -> np.ndarray:
        """Evaluate the gradient of the kinetic energy at `momentum`"""
        return self._inv_metric @ momentum

    def draw_momentum(self, rng=None) -> np.ndarray:
        r = _standard_normal(rng, self.dim, self.dtype)
        return solve_upper(self._chol_inv_metric, r)


def draw_momentum(metric: EuclideanMetric, rng=None) -> np.ndarray:
    """Draw momentum from the Gaussian kinetic energy defined by `metric`"""
    return metric.draw_momentum(rng)
