import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from pydantic import ValidationError

from pymass.mcmc.exceptions import UnknownMetricError
from pymass.mcmc.factory import PreconditionerConfig, build_preconditioner, update_metric
from pymass.mcmc.metrics import DenseEuclideanMetric, DiagEuclideanMetric, UnitEuclideanMetric
from pymass.mcmc.preconditioners import DensePreconditioner, DiagPreconditioner, UnitPreconditioner


@pytest.mark.parametrize(
    "metric, preconditioner_class",
    [
        (UnitEuclideanMetric(4), UnitPreconditioner),
        (DiagEuclideanMetric.identity(4), DiagPreconditioner),
        (DenseEuclideanMetric.identity(4), DensePreconditioner),
    ],
)
def test_from_metric_instance(metric, preconditioner_class):
    preconditioner = build_preconditioner(metric)
    assert type(preconditioner) is preconditioner_class
    if preconditioner_class is not UnitPreconditioner:
        assert preconditioner.dim == 4
        assert preconditioner.n_min == 10


@pytest.mark.parametrize(
    "tag, preconditioner_class",
    [
        ("unit", UnitPreconditioner),
        ("diag", DiagPreconditioner),
        ("dense", DensePreconditioner),
        ("DiagEuclideanMetric", DiagPreconditioner),
        (UnitEuclideanMetric, UnitPreconditioner),
        (DiagEuclideanMetric, DiagPreconditioner),
        (DenseEuclideanMetric, DensePreconditioner),
    ],
)
def test_from_metric_tag(tag, preconditioner_class):
    preconditioner = build_preconditioner(tag, dim=3, dtype=np.float32, n_min=5)
    assert type(preconditioner) is preconditioner_class
    assert preconditioner.dtype == np.float32
    if preconditioner_class is not UnitPreconditioner:
        assert preconditioner.dim == 3
        assert preconditioner.n_min == 5


def test_default_dimension():
    assert build_preconditioner("dense").dim == 2


@pytest.mark.parametrize("tag", ["full", 3, None, np.identity(2), DiagPreconditioner])
def test_unknown_metric(tag):
    with pytest.raises(UnknownMetricError, match="must be one of"):
        build_preconditioner(tag)


@pytest.mark.parametrize("metric_class", [DiagEuclideanMetric, DenseEuclideanMetric])
def test_update_metric(metric_class):
    rng = np.random.default_rng(2)
    metric = metric_class.identity(3)
    preconditioner = build_preconditioner(metric)
    for sample in rng.standard_normal((30, 3)) * [1.0, 2.0, 3.0]:
        preconditioner.adapt(sample, 0.9)
        metric = update_metric(metric, preconditioner)

    assert isinstance(metric, metric_class)
    assert_array_equal(metric.get_inverse_metric(), preconditioner.get_inverse_metric())
    assert metric.get_inverse_metric() is not preconditioner.get_inverse_metric()


def test_update_unit_metric():
    metric = UnitEuclideanMetric(3)
    updated = update_metric(metric, build_preconditioner(metric))
    assert len(updated) == 3
    assert updated.get_inverse_metric() == 1


def test_config_build():
    config = PreconditionerConfig(metric="dense", dim=4, n_min=20, dtype="float32")
    preconditioner = config.build()

    assert isinstance(preconditioner, DensePreconditioner)
    assert preconditioner.dim == 4
    assert preconditioner.n_min == 20
    assert preconditioner.dtype == np.float32
    assert_allclose(preconditioner.get_inverse_metric(), np.identity(4))

    metric = config.metric_identity()
    assert isinstance(metric, DenseEuclideanMetric)
    assert metric.dtype == np.float32


def test_config_defaults():
    config = PreconditionerConfig()
    assert (config.metric, config.dim, config.n_min, config.dtype) == ("diag", 2, 10, "float64")
    assert isinstance(config.build(), DiagPreconditioner)


@pytest.mark.parametrize(
    "kwargs",
    [dict(metric="full"), dict(dim=0), dict(n_min=0), dict(n_min=1), dict(dtype="float16")],
)
def test_config_validation(kwargs):
    with pytest.raises(ValidationError):
        PreconditionerConfig(**kwargs)
