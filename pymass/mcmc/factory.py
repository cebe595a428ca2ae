"""Bind metrics to the preconditioners which adapt them"""
from typing import Literal, Union

import numpy as np
from pydantic import conint
from pydantic.dataclasses import dataclass

from .exceptions import UnknownMetricError
from .metrics import DenseEuclideanMetric, DiagEuclideanMetric, EuclideanMetric, UnitEuclideanMetric
from .preconditioners import (
    DensePreconditioner,
    DiagPreconditioner,
    Preconditioner,
    UnitPreconditioner,
)

__ALL__ = ["build_preconditioner", "update_metric", "PreconditionerConfig"]

metric_registry = {
    "unit": (UnitEuclideanMetric, UnitPreconditioner),
    "diag": (DiagEuclideanMetric, DiagPreconditioner),
    "dense": (DenseEuclideanMetric, DensePreconditioner),
}


def _lookup(metric) -> str:
    if isinstance(metric, str):
        tag = metric.lower()
        for key, (metric_class, _) in metric_registry.items():
            if tag in (key, metric_class.__name__.lower()):
                return key
    elif isinstance(metric, type):
        for key, (metric_class, _) in metric_registry.items():
            if issubclass(metric, metric_class):
                return key
    else:
        for key, (metric_class, _) in metric_registry.items():
            if isinstance(metric, metric_class):
                return key

    names = ", ".join(f"{k!r}" for k in metric_registry)
    classes = ", ".join(v[0].__name__ for v in metric_registry.values())
    raise UnknownMetricError(f"`metric` must be one of [{names}] or [{classes}], got {metric!r}")


def build_preconditioner(
    metric: Union[EuclideanMetric, type, str],
    dim: int = 2,
    dtype=np.float64,
    n_min: int = 10,
) -> Preconditioner:
    """Create the preconditioner adapting `metric`

    Args:
        metric: A metric instance, a metric class or one of 'unit', 'diag', 'dense'
        dim: Dimension of the position, ignored for metric instances
        dtype: Floating point type, ignored for metric instances
        n_min: Minimum number of samples before the estimate is trusted

    Returns:
        Preconditioner matching the metric

    Raises:
        UnknownMetricError: `metric` is not a known metric
    """
    key = _lookup(metric)
    if isinstance(metric, EuclideanMetric):
        dim, dtype = metric.dim, metric.dtype

    preconditioner_class = metric_registry[key][1]
    if preconditioner_class is UnitPreconditioner:
        return UnitPreconditioner(dtype)
    return preconditioner_class(dim, n_min=n_min, dtype=dtype)


def update_metric(metric: EuclideanMetric, preconditioner: Preconditioner) -> EuclideanMetric:
    """New metric of the same kind as `metric` with the current estimate of `preconditioner`"""
    return metric.with_inverse_metric(preconditioner.get_inverse_metric())


@dataclass
class PreconditionerConfig:
    """Configuration of the mass matrix adaptation

    Parameters
    ----------
    metric : str
        Kind of metric to adapt: 'unit', 'diag' or 'dense'
    dim : int
        Dimension of the position
    n_min : int
        Minimum number of samples before the estimate is trusted
    dtype : str
        Floating point type of the estimate
    """

    metric: Literal["unit", "diag", "dense"] = "diag"
    dim: conint(ge=1) = 2
    n_min: conint(ge=2) = 10
    dtype: Literal["float64", "float32"] = "float64"

    def build(self) -> Preconditioner:
        """Create the configured preconditioner"""
        return build_preconditioner(self.metric, self.dim, np.dtype(self.dtype), self.n_min)

    def metric_identity(self) -> EuclideanMetric:
        """Identity metric matching the configuration"""
        return metric_registry[self.metric][0].identity(self.dim, np.dtype(self.dtype))
