"""Module for mass matrix adaptation

A preconditioner feeds each new position of the chain to an online estimator and,
once `n_min` samples are available, refreshes its estimate of the inverse mass
matrix. The estimate is kept stale, i.e. frozen at its last value or at the
identity, as long as the estimator holds fewer than `n_min` samples.
"""
import numpy as np

from ..utils.log import get_logger
from ..utils.misc import string_diag
from .estimators import CovEstimator, VarEstimator, WelfordCov, WelfordVar

__ALL__ = ["Preconditioner", "UnitPreconditioner", "DiagPreconditioner", "DensePreconditioner"]

logger = get_logger(__name__)


class Preconditioner:
    """Abstract class for mass matrix adaptation"""

    def adapt(self, theta: np.ndarray, alpha: float = None, is_update: bool = True):
        """Learn from a new position of the chain

        Args:
            theta: Position of the chain
            alpha: Acceptance statistic of the transition, unused
            is_update: Refresh the inverse mass matrix if enough samples are available
        """
        raise NotImplementedError

    def get_inverse_metric(self):
        """Current estimate of the inverse mass matrix"""
        raise NotImplementedError

    def reset(self):
        """Forget the samples; the current estimate is kept"""
        raise NotImplementedError

    def resize(self, theta: np.ndarray):
        """Match the dimension of `theta`, only allowed before the first sample"""
        raise NotImplementedError


class UnitPreconditioner(Preconditioner):
    """The mass matrix is the identity and never adapts

    Args:
        dtype: Floating point type of the inverse mass matrix
    """

    def __init__(self, dtype=np.float64):
        self._dtype = np.dtype(dtype)

    def __str__(self):
        return "I"

    def __repr__(self):
        return f"UnitPreconditioner(dtype={self._dtype})"

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def adapt(self, theta: np.ndarray = None, alpha: float = None, is_update: bool = True):
        pass

    def get_inverse_metric(self):
        return self._dtype.type(1.0)

    def reset(self):
        pass

    def resize(self, theta: np.ndarray = None):
        pass


class _EstimatorPreconditioner(Preconditioner):
    """Preconditioner backed by an online estimator

    Args:
        dimension: Dimension of the position
        n_min: Minimum number of samples before the estimate is trusted
        dtype: Floating point type of the estimate
        estimator: Online estimator; a Welford estimator of `dimension` if None
    """

    _estimator_class = None

    def __init__(self, dimension: int, n_min: int = 10, dtype=np.float64, estimator=None):
        if isinstance(n_min, bool) or not isinstance(n_min, (int, np.integer)):
            raise TypeError("`n_min` must be an integer")
        if n_min < 2:
            raise ValueError("`n_min` must be at least 2, a dispersion needs two samples")

        if estimator is None:
            estimator = self._estimator_class(dimension, dtype)
        elif estimator.dim != dimension:
            raise ValueError(
                f"`estimator` has dimension {estimator.dim} but {dimension} is expected"
            )

        self._n_min = int(n_min)
        self._estimator = estimator
        self._estimate = self._identity(dimension, estimator.dtype)

    def __repr__(self):
        return f"{type(self).__name__}(dim={self.dim}, n_min={self._n_min}, n={self.n})"

    @staticmethod
    def _identity(dimension: int, dtype: np.dtype) -> np.ndarray:
        raise NotImplementedError

    def _get_estimate(self) -> np.ndarray:
        raise NotImplementedError

    @property
    def n_min(self) -> int:
        return self._n_min

    @property
    def n(self) -> int:
        """Number of samples held by the estimator"""
        return self._estimator.n

    @property
    def dim(self) -> int:
        return self._estimator.dim

    @property
    def dtype(self) -> np.dtype:
        return self._estimator.dtype

    @property
    def estimator(self):
        return self._estimator

    def resize(self, theta: np.ndarray):
        if np.ndim(theta) != 1:
            raise ValueError(f"`theta` must be a vector, got {np.ndim(theta)} dimensions")
        dimension = len(theta)
        if dimension != self._estimator.dim:
            self._estimator.resize(dimension)
            self._estimate = self._identity(dimension, self._estimator.dtype)

    def adapt(self, theta: np.ndarray, alpha: float = None, is_update: bool = True):
        self.resize(theta)
        self._estimator.add_sample(theta)
        if is_update and self._estimator.n >= self._n_min:
            if self._estimator.n == self._n_min:
                logger.debug("%s trusts its estimate after %d samples", type(self).__name__, self._n_min)
            self._estimate[...] = self._get_estimate()

    def get_inverse_metric(self) -> np.ndarray:
        return self._estimate

    def reset(self):
        logger.debug("reset %s after %d samples", type(self).__name__, self._estimator.n)
        self._estimator.reset()


class DiagPreconditioner(_EstimatorPreconditioner):
    """Diagonal mass matrix adaptation from the marginal variances

    Args:
        dimension: Dimension of the position
        n_min: Minimum number of samples before the estimate is trusted
        dtype: Floating point type of the estimate
        estimator: Variance estimator; `WelfordVar` if None
    """

    _estimator_class = WelfordVar

    def __init__(
        self,
        dimension: int,
        n_min: int = 10,
        dtype=np.float64,
        estimator: VarEstimator = None,
    ):
        if estimator is not None and not isinstance(estimator, VarEstimator):
            raise TypeError("`estimator` must be a VarEstimator")
        super().__init__(dimension, n_min, dtype, estimator)

    def __str__(self):
        return string_diag(self._estimate)

    @staticmethod
    def _identity(dimension: int, dtype: np.dtype) -> np.ndarray:
        return np.ones(dimension, dtype=dtype)

    def _get_estimate(self) -> np.ndarray:
        return self._estimator.get_var()


class DensePreconditioner(_EstimatorPreconditioner):
    """Dense mass matrix adaptation from the covariance matrix

    Args:
        dimension: Dimension of the position
        n_min: Minimum number of samples before the estimate is trusted
        dtype: Floating point type of the estimate
        estimator: Covariance estimator; `WelfordCov` if None
    """

    _estimator_class = WelfordCov

    def __init__(
        self,
        dimension: int,
        n_min: int = 10,
        dtype=np.float64,
        estimator: CovEstimator = None,
    ):
        if estimator is not None and not isinstance(estimator, CovEstimator):
            raise TypeError("`estimator` must be a CovEstimator")
        super().__init__(dimension, n_min, dtype, estimator)

    def __str__(self):
        return string_diag(self._estimate.diagonal())

    @staticmethod
    def _identity(dimension: int, dtype: np.dtype) -> np.ndarray:
        return np.identity(dimension, dtype=dtype)

    def _get_estimate(self) -> np.ndarray:
        return self._estimator.get_cov()
