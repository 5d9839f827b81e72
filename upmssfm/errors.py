"""Exceptions raised during a split-step propagation."""


class SSFMError(Exception):
    """Base class for all propagation errors."""


class InvalidGridError(SSFMError, ValueError):
    """The number of points or the time step cannot form a grid."""


class DispersionLengthMismatch(SSFMError, ValueError):
    """The dispersion is neither a profile of length N nor a Taylor series."""


class DegenerateFieldError(SSFMError, ArithmeticError):
    """The field carries no energy, so no step size can be estimated."""


class NumericalDivergenceError(SSFMError, ArithmeticError):
    """A propagation stage produced non-finite values."""
