"""Online (co)variance estimators for mass matrix adaptation

The Welford estimators follow the one-pass algorithm used by Stan's
`welford_var_estimator` and `welford_covar_estimator`. The naive estimators keep
every sample and are only meant to check the Welford ones.

Both families return a regularized estimate, shrunk toward a small multiple of
the identity

.. math::

    \\hat{\\Sigma} = \\frac{n}{(n + 5)(n - 1)} M + 10^{-3} \\frac{5}{n + 5} I

where :math:`M` is the sum of squared deviations (or outer products of
deviations) from the running mean.
"""
import numpy as np

from ..utils.log import get_logger
from .exceptions import InsufficientSamplesError, ResizeError

__ALL__ = ["NaiveVar", "WelfordVar", "NaiveCov", "WelfordCov"]

logger = get_logger(__name__)


def _check_dtype(dtype) -> np.dtype:
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.floating):
        raise TypeError(f"`dtype` must be a floating point type, got {dtype}")
    return dtype


def _check_dimension(dimension, name: str = "dimension") -> int:
    if isinstance(dimension, bool) or not isinstance(dimension, (int, np.integer)):
        raise TypeError(f"`{name}` must be an integer")
    if dimension < 1:
        raise ValueError(f"`{name}` must be strictly positive, got {dimension}")
    return int(dimension)


def _shrinkage_weights(n: int, dtype: np.dtype):
    """Scaling of the second moment and weight of the identity target"""
    scale = dtype.type(n / ((n + 5) * (n - 1)))
    shrinkage = dtype.type(1e-3 * 5 / (n + 5))
    return scale, shrinkage


class _Estimator:
    """Bookkeeping shared by the online estimators

    Args:
        dimension: Length of the sample vectors
        dtype: Floating point type of the statistics
    """

    def __init__(self, dimension: int, dtype=np.float64):
        self._dim = _check_dimension(dimension)
        self._dtype = _check_dtype(dtype)
        self.reset()

    def __repr__(self):
        return f"{type(self).__name__}(n={self._n}, dim={self._dim}, dtype={self._dtype})"

    @property
    def n(self) -> int:
        """Number of samples seen since the last reset"""
        return self._n

    @property
    def dim(self) -> int:
        """Length of the sample vectors"""
        return self._dim

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    def reset(self):
        raise NotImplementedError

    def add_sample(self, sample: np.ndarray):
        raise NotImplementedError

    def resize(self, dimension: int):
        """Change the sample dimension; only allowed before the first sample

        Args:
            dimension: New length of the sample vectors

        Raises:
            TypeError: `dimension` is not an integer
            ValueError: `dimension` is not strictly positive
            ResizeError: The estimator already holds samples
        """
        dimension = _check_dimension(dimension)
        if self._n != 0:
            raise ResizeError(
                f"Cannot resize {type(self).__name__} from {self._dim} to {dimension}"
                f" when it contains {self._n} samples"
            )
        logger.debug("resize %s from %d to %d", type(self).__name__, self._dim, dimension)
        self._dim = dimension
        self.reset()

    def _as_sample(self, sample) -> np.ndarray:
        sample = np.asarray(sample, dtype=self._dtype)
        if sample.shape != (self._dim,):
            raise ValueError(
                f"`sample` must be a vector of length {self._dim}, got shape {sample.shape}"
            )
        return sample

    def _check_enough_samples(self):
        if self._n < 2:
            raise InsufficientSamplesError(
                f"cannot estimate dispersion from a single sample (n={self._n})"
            )


class VarEstimator(_Estimator):
    """Abstract class for online estimators of the marginal variances"""

    def get_var(self) -> np.ndarray:
        """Regularized variance of each component"""
        raise NotImplementedError


class CovEstimator(_Estimator):
    """Abstract class for online estimators of the covariance matrix"""

    def get_cov(self) -> np.ndarray:
        """Regularized covariance matrix"""
        raise NotImplementedError


class NaiveVar(VarEstimator):
    """Variance estimator keeping all the samples, for testing only"""

    def reset(self):
        self._n = 0
        self._samples = []

    @property
    def samples(self) -> list:
        return self._samples

    def add_sample(self, sample: np.ndarray):
        self._samples.append(np.array(self._as_sample(sample), copy=True))
        self._n += 1

    def get_var(self) -> np.ndarray:
        self._check_enough_samples()
        n = self._n
        var = np.var(np.stack(self._samples), axis=0, ddof=1)
        return (n / (n + 5) * var + 1e-3 * 5 / (n + 5)).astype(self._dtype, copy=False)


class WelfordVar(VarEstimator):
    """Welford's online variance estimator

    Args:
        dimension: Length of the sample vectors
        dtype: Floating point type of the statistics
    """

    def reset(self):
        self._n = 0
        self._mean = np.zeros(self._dim, dtype=self._dtype)
        self._m2 = np.zeros(self._dim, dtype=self._dtype)

    @property
    def mean(self) -> np.ndarray:
        """Running mean"""
        return self._mean

    def add_sample(self, sample: np.ndarray):
        """Update the estimator with a new sample

        Args:
            sample: New sample
        """
        sample = self._as_sample(sample)
        self._n += 1
        pre_diff = sample - self._mean
        self._mean += pre_diff / self._n
        self._m2 += pre_diff * (sample - self._mean)

    def get_var(self) -> np.ndarray:
        self._check_enough_samples()
        scale, shrinkage = _shrinkage_weights(self._n, self._dtype)
        return scale * self._m2 + shrinkage


class NaiveCov(CovEstimator):
    """Covariance estimator keeping all the samples, for testing only"""

    def reset(self):
        self._n = 0
        self._samples = []

    @property
    def samples(self) -> list:
        return self._samples

    def add_sample(self, sample: np.ndarray):
        self._samples.append(np.array(self._as_sample(sample), copy=True))
        self._n += 1

    def get_cov(self) -> np.ndarray:
        self._check_enough_samples()
        n = self._n
        cov = np.atleast_2d(np.cov(np.stack(self._samples), rowvar=False, ddof=1))
        cov = n / (n + 5) * cov + 1e-3 * 5 / (n + 5) * np.identity(self._dim)
        return cov.astype(self._dtype, copy=False)


class WelfordCov(CovEstimator):
    """Welford's online covariance estimator

    Args:
        dimension: Length of the sample vectors
        dtype: Floating point type of the statistics
    """

    def reset(self):
        self._n = 0
        self._mean = np.zeros(self._dim, dtype=self._dtype)
        self._m2 = np.zeros((self._dim, self._dim), dtype=self._dtype)

    @property
    def mean(self) -> np.ndarray:
        """Running mean"""
        return self._mean

    def add_sample(self, sample: np.ndarray):
        """Update the estimator with a new sample

        Args:
            sample: New sample
        """
        sample = self._as_sample(sample)
        self._n += 1
        pre_diff = sample - self._mean
        self._mean += pre_diff / self._n
        self._m2 += np.outer(sample - self._mean, pre_diff)

    def get_cov(self) -> np.ndarray:
        self._check_enough_samples()
        scale, shrinkage = _shrinkage_weights(self._n, self._dtype)
        cov = scale * self._m2
        cov[np.diag_indices_from(cov)] += shrinkage
        return cov
