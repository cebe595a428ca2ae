from ._version import __version__
from .mcmc import (
    DenseEuclideanMetric,
    DensePreconditioner,
    DiagEuclideanMetric,
    DiagPreconditioner,
    EuclideanHamiltonian,
    PreconditionerConfig,
    UnitEuclideanMetric,
    UnitPreconditioner,
    build_preconditioner,
    draw_momentum,
    update_metric,
)

__all__ = [
    "__version__",
    "DenseEuclideanMetric",
    "DensePreconditioner",
    "DiagEuclideanMetric",
    "DiagPreconditioner",
    "EuclideanHamiltonian",
    "PreconditionerConfig",
    "UnitEuclideanMetric",
    "UnitPreconditioner",
    "build_preconditioner",
    "draw_momentum",
    "update_metric",
]
