from .estimators import CovEstimator, NaiveCov, NaiveVar, VarEstimator, WelfordCov, WelfordVar
from .exceptions import (
    InsufficientSamplesError,
    NotPositiveDefiniteError,
    PreconditionError,
    ResizeError,
    UnknownMetricError,
)
from .factory import PreconditionerConfig, build_preconditioner, update_metric
from .hamiltonian import EuclideanHamiltonian
from .metrics import (
    DenseEuclideanMetric,
    DiagEuclideanMetric,
    EuclideanMetric,
    UnitEuclideanMetric,
    draw_momentum,
)
from .preconditioners import (
    DensePreconditioner,
    DiagPreconditioner,
    Preconditioner,
    UnitPreconditioner,
)

__all__ = [
    "CovEstimator",
    "NaiveCov",
    "NaiveVar",
    "VarEstimator",
    "WelfordCov",
    "WelfordVar",
    "InsufficientSamplesError",
    "NotPositiveDefiniteError",
    "PreconditionError",
    "ResizeError",
    "UnknownMetricError",
    "PreconditionerConfig",
    "build_preconditioner",
    "update_metric",
    "EuclideanHamiltonian",
    "DenseEuclideanMetric",
    "DiagEuclideanMetric",
    "EuclideanMetric",
    "UnitEuclideanMetric",
    "draw_momentum",
    "DensePreconditioner",
    "DiagPreconditioner",
    "Preconditioner",
    "UnitPreconditioner",
]
