class PreconditionError(AssertionError):
    """A caller broke a precondition of an estimator, preconditioner or metric"""

    pass


class InsufficientSamplesError(PreconditionError):
    """Dispersion requested before two samples were observed"""

    pass


class ResizeError(PreconditionError):
    """Resize requested on an estimator which already holds samples"""

    pass


class NotPositiveDefiniteError(PreconditionError):
    """Inverse mass matrix is not symmetric positive definite"""

    pass


class UnknownMetricError(PreconditionError):
    """No preconditioner is registered for the metric"""

    pass
