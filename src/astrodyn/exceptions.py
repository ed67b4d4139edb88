"""
Custom exceptions for the astrodyn package.

Every error raised by the corrector or the manifold engine carries the last
known iterate and its residual so that a failed computation can be inspected
instead of silently discarded.
"""


class AstrodynError(Exception):
    """Base exception for astrodyn errors.

    Parameters
    ----------
    message : str
        The error message.
    state : ndarray, optional
        Last known state or iterate when the error occurred.
    residual : float, optional
        Constraint residual (or other metric) associated with ``state``.
    iterations : int, optional
        Number of iterations performed before the failure.
    """

    def __init__(self, message, state=None, residual=None, iterations=None):
        super().__init__(message)
        self.state = state
        self.residual = residual
        self.iterations = iterations


class InvalidParameterError(AstrodynError, ValueError):
    """Raised when a mass ratio, family selector or other input is malformed."""


class ConvergenceError(AstrodynError):
    """Raised when the differential corrector exhausts its iteration budget."""


class DivergenceError(AstrodynError):
    """Raised when an intermediate state becomes non-finite or unusable."""


class DegenerateMonodromyError(AstrodynError):
    """Raised when a monodromy matrix has no qualifying stable/unstable eigenvalue.

    Parameters
    ----------
    message : str
        The error message.
    eigenvalues : ndarray, optional
        Eigenvalues of the offending monodromy matrix.
    """

    def __init__(self, message, eigenvalues=None, **kwargs):
        super().__init__(message, **kwargs)
        self.eigenvalues = eigenvalues
